from __future__ import annotations

from pathlib import Path
from typing import Dict, Optional

from .errors import DocumentParseFailure, ResourcePathUnresolvable
from .log import get_logger
from .paths import resolve_href
from .xmlstream import XmlHandler, parse_xml

logger = get_logger(__name__)

CONTAINER_PATH = "META-INF/container.xml"


class _ContainerHandler(XmlHandler):
    def __init__(self) -> None:
        self.full_path: Optional[str] = None

    def on_start(self, name: str, attrs: Dict[str, str]) -> None:
        if name != "rootfile" or self.full_path is not None:
            return
        full_path = attrs.get("full-path", "").strip()
        if full_path:
            self.full_path = full_path

    def result(self) -> Optional[str]:
        return self.full_path


def find_package_document(root: Path) -> Optional[Path]:
    """Return the package document named by ``META-INF/container.xml``.

    ``full-path`` is relative to the archive root. Returns ``None`` when the
    descriptor is absent, unreadable, or names no ``rootfile``.
    """
    container = root / CONTAINER_PATH
    if not container.is_file():
        logger.warning("container_missing", path=str(container))
        return None
    try:
        full_path = parse_xml(container, _ContainerHandler(), stage="container")
    except DocumentParseFailure as exc:
        logger.warning("container_unreadable", path=str(container), error=exc.message)
        return None
    if not full_path:
        logger.warning("container_rootfile_missing", path=str(container))
        return None
    try:
        return resolve_href(root, root, "/" + full_path.lstrip("/"))
    except ResourcePathUnresolvable as exc:
        logger.warning(
            "container_rootfile_unresolvable", path=str(container), error=exc.message
        )
        return None
