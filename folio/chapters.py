from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .log import get_logger
from .manifest import ManifestItem
from .navigation import NavigationPoint
from .paths import href_filename

logger = get_logger(__name__)


@dataclass(frozen=True)
class Chapter:
    id: str
    title: str
    play_order: int
    manifest_items: Tuple[ManifestItem, ...]


def _find_item_index(
    items: Sequence[ManifestItem], filename: str, start: int = 0
) -> Optional[int]:
    # Suffix match: nav src and manifest hrefs may carry different prefixes.
    if not filename:
        return None
    for idx in range(start, len(items)):
        if items[idx].path.endswith(filename):
            return idx
    return None


def chapter_bounds(
    points: Sequence[NavigationPoint], items: Sequence[ManifestItem], index: int
) -> Optional[Tuple[int, int]]:
    """Manifest slice ``[start, end)`` for ``points[index]`` before clipping."""
    start = _find_item_index(items, href_filename(points[index].content_path))
    if start is None:
        return None
    end = len(items)
    if index + 1 < len(points):
        next_start = _find_item_index(
            items, href_filename(points[index + 1].content_path), start
        )
        if next_start is not None:
            end = next_start
    return start, end


def assemble_chapters(
    points: Sequence[NavigationPoint], items: Sequence[ManifestItem]
) -> List[Chapter]:
    matched: List[Tuple[NavigationPoint, int, int]] = []
    for index, point in enumerate(points):
        bounds = chapter_bounds(points, items, index)
        if bounds is None:
            logger.warning(
                "chapter_unmatched", chapter_id=point.id, content_path=point.content_path
            )
            continue
        matched.append((point, bounds[0], bounds[1]))

    chapters: List[Chapter] = []
    floor = 0
    for pos, (point, start, end) in enumerate(matched):
        # A slice never reaches into a later chapter's entry file.
        later = [other for _, other, _ in matched[pos + 1 :] if other > start]
        if later:
            end = min(end, min(later))
        if start < floor:
            logger.warning(
                "chapter_out_of_order", chapter_id=point.id, manifest_index=start
            )
            continue
        if end <= start:
            logger.warning("chapter_empty", chapter_id=point.id, manifest_index=start)
            continue
        chapters.append(
            Chapter(
                id=point.id,
                title=point.title,
                play_order=point.play_order,
                manifest_items=tuple(items[start:end]),
            )
        )
        floor = end
    return chapters
