from __future__ import annotations

import shutil
import zipfile
from pathlib import Path

from .config import ParserConfig
from .errors import ArchiveUnreadable, ArchiveUnsafe
from .log import get_logger

logger = get_logger(__name__)


def check_archive_safety(zf: zipfile.ZipFile, config: ParserConfig) -> None:
    infos = zf.infolist()
    if len(infos) > config.max_entries:
        raise ArchiveUnsafe(
            f"Archive has {len(infos)} entries (limit {config.max_entries})"
        )

    total_uncompressed = 0
    for info in infos:
        # path safety: reject absolute, traversal, drive-qualified
        name = info.filename
        if name.startswith("/") or name.startswith("\\"):
            raise ArchiveUnsafe(f"Absolute path in archive: {name}")
        if ".." in name.replace("\\", "/").split("/"):
            raise ArchiveUnsafe(f"Path traversal in archive: {name}")
        if len(name) > 1 and name[1] == ":":
            raise ArchiveUnsafe(f"Drive-qualified path in archive: {name}")

        uncompressed = info.file_size
        compressed = info.compress_size
        if uncompressed > config.max_entry_bytes:
            raise ArchiveUnsafe(
                f"Entry '{name}' uncompressed size {uncompressed} "
                f"exceeds limit {config.max_entry_bytes}"
            )
        if compressed > 0 and uncompressed / compressed > config.max_compression_ratio:
            raise ArchiveUnsafe(
                f"Entry '{name}' compression ratio {uncompressed / compressed:.1f} "
                f"exceeds limit {config.max_compression_ratio}"
            )
        total_uncompressed += uncompressed

    if total_uncompressed > config.max_total_bytes:
        raise ArchiveUnsafe(
            f"Total uncompressed {total_uncompressed} "
            f"exceeds limit {config.max_total_bytes}"
        )


def _is_populated(dest: Path) -> bool:
    return dest.is_dir() and any(dest.iterdir())


def unpack_archive(epub_path: Path, dest: Path, config: ParserConfig | None = None) -> bool:
    """Extract ``epub_path`` into ``dest`` unless ``dest`` is already populated.

    Returns True when files were extracted.
    """
    if config is None:
        config = ParserConfig()
    if _is_populated(dest):
        return False
    if not epub_path.is_file():
        raise ArchiveUnreadable(epub_path, "file not found")

    try:
        zf = zipfile.ZipFile(epub_path)
    except (zipfile.BadZipFile, OSError) as exc:
        raise ArchiveUnreadable(epub_path, str(exc)) from exc

    with zf:
        check_archive_safety(zf, config)
        dest.mkdir(parents=True, exist_ok=True)
        try:
            zf.extractall(dest)
        except (zipfile.BadZipFile, OSError, RuntimeError) as exc:
            shutil.rmtree(dest, ignore_errors=True)
            raise ArchiveUnreadable(epub_path, str(exc)) from exc
        entries = len(zf.infolist())

    logger.info("epub_unpacked", source=str(epub_path), dest=str(dest), entries=entries)
    return True
