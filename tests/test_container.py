from pathlib import Path

from folio.container import find_package_document
from tests.factories import container_xml, write_tree


def test_find_package_document_resolves_against_archive_root(tmp_path: Path) -> None:
    write_tree(tmp_path, {"META-INF/container.xml": container_xml("OEBPS/content.opf")})
    assert find_package_document(tmp_path) == tmp_path / "OEBPS" / "content.opf"


def test_find_package_document_uses_first_rootfile_with_full_path(tmp_path: Path) -> None:
    xml = (
        '<container xmlns="urn:oasis:names:tc:opendocument:xmlns:container">'
        "<rootfiles>"
        '<rootfile media-type="application/oebps-package+xml"/>'
        '<rootfile full-path="first.opf"/>'
        '<rootfile full-path="second.opf"/>'
        "</rootfiles></container>"
    )
    write_tree(tmp_path, {"META-INF/container.xml": xml})
    assert find_package_document(tmp_path) == tmp_path / "first.opf"


def test_find_package_document_missing_descriptor(tmp_path: Path) -> None:
    assert find_package_document(tmp_path) is None


def test_find_package_document_without_rootfile(tmp_path: Path) -> None:
    write_tree(tmp_path, {"META-INF/container.xml": "<container><rootfiles/></container>"})
    assert find_package_document(tmp_path) is None


def test_find_package_document_malformed_descriptor(tmp_path: Path) -> None:
    write_tree(tmp_path, {"META-INF/container.xml": "<container><rootfiles>"})
    assert find_package_document(tmp_path) is None


def test_find_package_document_rejects_escaping_path(tmp_path: Path) -> None:
    write_tree(tmp_path, {"META-INF/container.xml": container_xml("../outside.opf")})
    assert find_package_document(tmp_path) is None
