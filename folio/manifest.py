from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from .errors import ManifestSectionMissing
from .log import get_logger
from .xmlstream import XmlHandler, parse_xml

logger = get_logger(__name__)

_REQUIRED_ATTRS = ("id", "href", "media-type")


@dataclass(frozen=True)
class ManifestItem:
    id: str
    path: str
    media_type: str
    extra_properties: Dict[str, str] = field(default_factory=dict, hash=False)


class _ManifestHandler(XmlHandler):
    def __init__(self) -> None:
        self.items: List[ManifestItem] = []
        self.found_manifest = False
        self.in_manifest = False

    def on_start(self, name: str, attrs: Dict[str, str]) -> None:
        if name == "manifest":
            self.found_manifest = True
            self.in_manifest = True
            return
        if name != "item" or not self.in_manifest:
            return
        if any(key not in attrs for key in _REQUIRED_ATTRS):
            logger.debug("manifest_item_skipped", attrs=attrs)
            return
        extra = {key: value for key, value in attrs.items() if key not in _REQUIRED_ATTRS}
        self.items.append(
            ManifestItem(
                id=attrs["id"],
                path=attrs["href"],
                media_type=attrs["media-type"],
                extra_properties=extra,
            )
        )

    def on_end(self, name: str) -> None:
        if name == "manifest":
            self.in_manifest = False

    def result(self) -> List[ManifestItem]:
        return self.items


def parse_manifest(opf_path: Path) -> List[ManifestItem]:
    """Manifest items of a package document, in declaration order."""
    handler = _ManifestHandler()
    items = parse_xml(opf_path, handler, stage="manifest")
    if not handler.found_manifest:
        raise ManifestSectionMissing(opf_path)
    return items
