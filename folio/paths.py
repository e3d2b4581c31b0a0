from __future__ import annotations

from pathlib import Path
from posixpath import join as posix_join
from posixpath import normpath as posix_normpath
from urllib.parse import unquote

from .errors import ResourcePathUnresolvable


def href_filename(href: str) -> str:
    return (href or "").rsplit("/", 1)[-1]


def resolve_href(root: Path, base: Path, href: str) -> Path:
    """Map an archive href to a filesystem path under ``root``.

    A leading ``/`` anchors ``href`` at the archive root; anything else is
    relative to ``base``. Percent-escapes are decoded.
    """
    raw = href
    href = unquote((href or "").strip())
    if not href:
        raise ResourcePathUnresolvable(raw, "empty href")
    if "://" in href:
        raise ResourcePathUnresolvable(raw, "href is not a local path")

    if href.startswith("/"):
        rel = posix_normpath(href.lstrip("/") or ".")
    else:
        try:
            base_rel = base.relative_to(root).as_posix()
        except ValueError as exc:
            raise ResourcePathUnresolvable(raw, f"base {base} is outside {root}") from exc
        rel = posix_normpath(posix_join(base_rel, href))

    if rel == ".." or rel.startswith("../") or rel.startswith("/"):
        raise ResourcePathUnresolvable(raw, "href escapes the archive root")
    if rel == ".":
        return root
    return root / rel
