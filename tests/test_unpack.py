import zipfile
from pathlib import Path

import pytest

from folio.config import ParserConfig
from folio.errors import ArchiveUnreadable, ArchiveUnsafe
from folio.unpack import unpack_archive


def _zip(path: Path, entries: dict[str, bytes]) -> Path:
    with zipfile.ZipFile(path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        for name, data in entries.items():
            zf.writestr(name, data)
    return path


def test_unpack_extracts_tree(tmp_path: Path, sample_epub: Path) -> None:
    dest = tmp_path / "out"
    assert unpack_archive(sample_epub, dest) is True
    assert (dest / "META-INF" / "container.xml").is_file()
    assert (dest / "OEBPS" / "ch1.html").is_file()


def test_unpack_is_noop_when_destination_populated(tmp_path: Path, sample_epub: Path) -> None:
    dest = tmp_path / "out"
    dest.mkdir()
    (dest / "marker.txt").write_text("keep", encoding="utf-8")

    assert unpack_archive(sample_epub, dest) is False
    assert sorted(p.name for p in dest.iterdir()) == ["marker.txt"]


def test_unpack_rejects_path_traversal(tmp_path: Path) -> None:
    archive = _zip(tmp_path / "evil.epub", {"../escape.txt": b"x"})
    with pytest.raises(ArchiveUnsafe, match="traversal"):
        unpack_archive(archive, tmp_path / "out")
    assert not (tmp_path / "escape.txt").exists()


def test_unpack_rejects_compression_bombs(tmp_path: Path) -> None:
    archive = _zip(tmp_path / "bomb.epub", {"big.txt": b"\x00" * 200_000})
    config = ParserConfig(max_compression_ratio=10)
    with pytest.raises(ArchiveUnsafe, match="compression ratio"):
        unpack_archive(archive, tmp_path / "out", config)


def test_unpack_rejects_too_many_entries(tmp_path: Path) -> None:
    archive = _zip(tmp_path / "many.epub", {f"f{idx}.txt": b"x" for idx in range(5)})
    with pytest.raises(ArchiveUnsafe, match="entries"):
        unpack_archive(archive, tmp_path / "out", ParserConfig(max_entries=3))


def test_unpack_rejects_non_zip(tmp_path: Path) -> None:
    path = tmp_path / "broken.epub"
    path.write_bytes(b"not a zip")
    with pytest.raises(ArchiveUnreadable):
        unpack_archive(path, tmp_path / "out")


def test_unpack_missing_archive(tmp_path: Path) -> None:
    with pytest.raises(ArchiveUnreadable):
        unpack_archive(tmp_path / "nope.epub", tmp_path / "out")
