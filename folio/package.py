from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from .errors import PackageDocumentNotFound
from .xmlstream import XmlHandler, parse_xml

NCX_EXTENSION = ".ncx"


@dataclass(frozen=True)
class PackageIndex:
    hrefs: Tuple[Tuple[str, str], ...]
    toc_id: Optional[str] = None

    def href_for(self, item_id: str) -> Optional[str]:
        for candidate, href in self.hrefs:
            if candidate == item_id:
                return href
        return None

    def navigation_href(self) -> Optional[str]:
        """Href of the navigation document, or ``None``.

        ``spine/@toc`` wins when it names a known item; otherwise the first
        item (in declaration order) whose href ends in ``.ncx``.
        """
        if self.toc_id:
            href = self.href_for(self.toc_id)
            if href:
                return href
        for _item_id, href in self.hrefs:
            if href.lower().endswith(NCX_EXTENSION):
                return href
        return None


class _PackageHandler(XmlHandler):
    def __init__(self) -> None:
        self.hrefs: List[Tuple[str, str]] = []
        self.seen: set[str] = set()
        self.toc_id: Optional[str] = None
        self.in_manifest = False

    def on_start(self, name: str, attrs: Dict[str, str]) -> None:
        if name == "manifest":
            self.in_manifest = True
        elif name == "spine":
            toc = attrs.get("toc", "").strip()
            self.toc_id = toc or None
        elif name == "item" and self.in_manifest:
            item_id = attrs.get("id", "")
            href = attrs.get("href", "")
            if item_id and href and item_id not in self.seen:
                self.seen.add(item_id)
                self.hrefs.append((item_id, href))

    def on_end(self, name: str) -> None:
        if name == "manifest":
            self.in_manifest = False

    def result(self) -> PackageIndex:
        return PackageIndex(hrefs=tuple(self.hrefs), toc_id=self.toc_id)


def parse_package(opf_path: Path) -> PackageIndex:
    if not opf_path.is_file():
        raise PackageDocumentNotFound(opf_path)
    return parse_xml(opf_path, _PackageHandler(), stage="package")


def find_navigation_href(opf_path: Path) -> str:
    href = parse_package(opf_path).navigation_href()
    if not href:
        raise PackageDocumentNotFound(
            opf_path, f"Package document names no navigation document: {opf_path}"
        )
    return href
