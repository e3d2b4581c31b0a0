from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from .log import get_logger
from .xmlstream import XmlHandler, parse_xml

logger = get_logger(__name__)


@dataclass(frozen=True)
class NavigationPoint:
    id: str
    title: str
    content_path: str
    play_order: int


def _parse_play_order(raw: Optional[str]) -> int:
    try:
        return int(str(raw or "").strip())
    except ValueError:
        return 0


@dataclass
class _PointState:
    id: str
    play_order: int
    title_parts: List[str] = field(default_factory=list)
    content_path: Optional[str] = None
    in_label: bool = False
    in_text: bool = False


class _NcxHandler(XmlHandler):
    """Collects ``navPoint`` entries, nested ones included.

    Points are slotted in start-tag order so a parent precedes its children
    even though the parent's end tag arrives last.
    """

    def __init__(self) -> None:
        self.stack: List[_PointState] = []
        self.slots: List[Optional[NavigationPoint]] = []
        self.slot_index: List[int] = []

    def on_start(self, name: str, attrs: Dict[str, str]) -> None:
        if name == "navPoint":
            state = _PointState(
                id=attrs.get("id", "").strip(),
                play_order=_parse_play_order(attrs.get("playOrder")),
            )
            self.stack.append(state)
            self.slot_index.append(len(self.slots))
            self.slots.append(None)
            return
        if not self.stack:
            return
        current = self.stack[-1]
        if name == "navLabel":
            current.in_label = True
        elif name == "text" and current.in_label:
            current.in_text = True
        elif name == "content" and current.content_path is None:
            current.content_path = attrs.get("src", "")

    def on_text(self, text: str) -> None:
        if self.stack and self.stack[-1].in_text:
            self.stack[-1].title_parts.append(text)

    def on_end(self, name: str) -> None:
        if not self.stack:
            return
        current = self.stack[-1]
        if name == "text":
            current.in_text = False
        elif name == "navLabel":
            current.in_label = False
            current.in_text = False
        elif name == "navPoint":
            self.stack.pop()
            slot = self.slot_index.pop()
            self.slots[slot] = self._finish(current)

    def _finish(self, state: _PointState) -> Optional[NavigationPoint]:
        title = "".join(state.title_parts).strip()
        if not state.id:
            logger.warning("navigation_point_skipped", reason="missing id", title=title)
            return None
        if state.play_order == 0:
            logger.warning("navigation_play_order_missing", point_id=state.id)
        return NavigationPoint(
            id=state.id,
            title=title,
            content_path=(state.content_path or "").strip(),
            play_order=state.play_order,
        )

    def result(self) -> List[NavigationPoint]:
        return [point for point in self.slots if point is not None]


def parse_navigation(path: Path) -> List[NavigationPoint]:
    """Parse an NCX file into navigation points in document order."""
    return parse_xml(path, _NcxHandler(), stage="navigation")
