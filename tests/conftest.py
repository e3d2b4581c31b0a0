from __future__ import annotations

from pathlib import Path

import pytest

from tests.factories import sample_files, write_tree, zip_tree


@pytest.fixture
def sample_root(tmp_path: Path) -> Path:
    return write_tree(tmp_path / "book", sample_files())


@pytest.fixture
def sample_epub(tmp_path: Path, sample_root: Path) -> Path:
    return zip_tree(sample_root, tmp_path / "sample.epub")
