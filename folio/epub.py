from __future__ import annotations

import shutil
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

from . import content as content_util
from .chapters import Chapter, assemble_chapters
from .config import ParserConfig
from .container import find_package_document
from .errors import (
    ChapterNotFound,
    ContainerNotFound,
    NavigationDocumentNotFound,
    PackageDocumentNotFound,
    ResourcePathUnresolvable,
)
from .log import epub_id_var, get_logger
from .manifest import ManifestItem, parse_manifest
from .navigation import parse_navigation
from .package import find_navigation_href
from .paths import resolve_href
from .unpack import unpack_archive

logger = get_logger(__name__)


@dataclass(frozen=True)
class ChapterContent:
    html: str
    chapter: Chapter


@dataclass(frozen=True)
class ParsedEpub:
    """Result of one processing pass over an extracted EPUB tree."""

    root: Path
    package_path: Path
    navigation_path: Path
    manifest: Tuple[ManifestItem, ...]
    chapters: Tuple[Chapter, ...]

    @property
    def base_path(self) -> Path:
        return self.package_path.parent

    def chapter(self, chapter_id: str) -> Chapter:
        for chapter in self.chapters:
            if chapter.id == chapter_id:
                return chapter
        raise ChapterNotFound(chapter_id)

    def html_paths(self, chapter_id: str) -> List[Path]:
        return content_util.chapter_html_paths(
            self.chapter(chapter_id), self.root, self.base_path
        )

    def html_path(self, chapter_id: str) -> Path:
        return self.html_paths(chapter_id)[0]

    def html(self, chapter_id: str, merge: bool = False) -> str:
        paths = self.html_paths(chapter_id)
        if merge:
            return content_util.merge_chapter_html(paths)
        return content_util.concat_chapter_html(paths)

    def chapter_content(self, chapter_id: str, merge: bool = False) -> ChapterContent:
        return ChapterContent(
            html=self.html(chapter_id, merge=merge), chapter=self.chapter(chapter_id)
        )

    def chapter_text(self, chapter_id: str) -> str:
        return content_util.chapter_text(self.html_paths(chapter_id))


def _resolve_navigation_path(root: Path, package_path: Path) -> Path:
    href = find_navigation_href(package_path)
    try:
        nav_path = resolve_href(root, package_path.parent, href)
    except ResourcePathUnresolvable as exc:
        raise PackageDocumentNotFound(
            package_path, f"Navigation document reference is unresolvable: {href!r}"
        ) from exc
    if not nav_path.is_file():
        raise NavigationDocumentNotFound(nav_path)
    return nav_path


def parse_extracted(root: Path) -> ParsedEpub:
    """Run the structural pipeline against an already-unpacked EPUB tree."""
    root = Path(root)
    package_path = find_package_document(root)
    if package_path is None:
        raise ContainerNotFound(root)
    if not package_path.is_file():
        raise PackageDocumentNotFound(package_path)

    navigation_path = _resolve_navigation_path(root, package_path)
    manifest = parse_manifest(package_path)
    points = parse_navigation(navigation_path)
    chapters = assemble_chapters(points, manifest)

    logger.info(
        "epub_processed",
        package=str(package_path),
        navigation_points=len(points),
        manifest_items=len(manifest),
        chapters=len(chapters),
    )
    return ParsedEpub(
        root=root,
        package_path=package_path,
        navigation_path=navigation_path,
        manifest=tuple(manifest),
        chapters=tuple(chapters),
    )


class EpubParser:
    """One EPUB archive and the directory it is unpacked into.

    ``process()`` returns a fresh :class:`ParsedEpub` each time; the parser
    keeps no chapter state of its own.
    """

    def __init__(self, epub_path: Path | str, config: Optional[ParserConfig] = None) -> None:
        self.epub_path = Path(epub_path)
        self.config = config or ParserConfig()

    @property
    def extract_dir(self) -> Path:
        return self.config.extract_dir

    def process(self) -> ParsedEpub:
        token = epub_id_var.set(self.config.identifier)
        try:
            unpack_archive(self.epub_path, self.extract_dir, self.config)
            return parse_extracted(self.extract_dir)
        finally:
            epub_id_var.reset(token)

    def cleanup(self) -> None:
        shutil.rmtree(self.extract_dir, ignore_errors=True)

    def __enter__(self) -> "EpubParser":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        if self.config.cleanup_on_exit:
            self.cleanup()
