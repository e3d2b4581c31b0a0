from __future__ import annotations

import zipfile
from pathlib import Path
from typing import Iterable, Optional, Sequence

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{full_path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""


def container_xml(full_path: str) -> str:
    return CONTAINER_XML.format(full_path=full_path)


def opf_xml(
    items: Iterable[tuple],
    toc_id: Optional[str] = "ncx",
    spine_ids: Sequence[str] = (),
) -> str:
    lines = []
    for item in items:
        item_id, href, media_type = item[:3]
        extra = item[3] if len(item) > 3 else {}
        attrs = f'id="{item_id}" href="{href}" media-type="{media_type}"'
        for key, value in extra.items():
            attrs += f' {key}="{value}"'
        lines.append(f"    <item {attrs}/>")
    toc_attr = f' toc="{toc_id}"' if toc_id else ""
    itemrefs = "\n".join(f'    <itemref idref="{idref}"/>' for idref in spine_ids)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<package xmlns="http://www.idpf.org/2007/opf" version="2.0" unique-identifier="uid">\n'
        '  <metadata xmlns:dc="http://purl.org/dc/elements/1.1/">\n'
        "    <dc:title>Sample</dc:title>\n"
        "  </metadata>\n"
        "  <manifest>\n" + "\n".join(lines) + "\n  </manifest>\n"
        f"  <spine{toc_attr}>\n{itemrefs}\n  </spine>\n"
        "</package>\n"
    )


def nav_point(point_id: str, play_order, title: str, src: str, children: str = "") -> str:
    id_attr = f' id="{point_id}"' if point_id is not None else ""
    order_attr = f' playOrder="{play_order}"' if play_order is not None else ""
    return (
        f"<navPoint{id_attr}{order_attr}>"
        f"<navLabel><text>{title}</text></navLabel>"
        f'<content src="{src}"/>{children}</navPoint>'
    )


def ncx_xml(points: Iterable[str]) -> str:
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<ncx xmlns="http://www.daisy.org/z3986/2005/ncx/" version="2005-1">\n'
        "  <head/>\n"
        "  <docTitle><text>Sample</text></docTitle>\n"
        "  <navMap>\n    " + "\n    ".join(points) + "\n  </navMap>\n"
        "</ncx>\n"
    )


def html_doc(title: str, body: str) -> str:
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<html xmlns="http://www.w3.org/1999/xhtml">\n'
        f"<head><title>{title}</title></head>\n"
        f"<body>\n{body}\n</body>\n"
        "</html>\n"
    )


def write_tree(root: Path, files: dict[str, str]) -> Path:
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    return root


def zip_tree(root: Path, out_path: Path) -> Path:
    with zipfile.ZipFile(out_path, "w") as zf:
        zf.writestr("mimetype", "application/epub+zip")
        for path in sorted(root.rglob("*")):
            if path.is_file():
                zf.write(path, path.relative_to(root).as_posix())
    return out_path


def sample_files() -> dict[str, str]:
    """Two chapters; ch1 owns its image, cover.html belongs to no chapter."""
    items = [
        ("ncx", "toc.ncx", "application/x-dtbncx+xml"),
        ("cover", "cover.html", "application/xhtml+xml"),
        ("ch1", "ch1.html", "application/xhtml+xml"),
        ("ch1-img", "ch1-img.jpg", "image/jpeg"),
        ("ch2", "ch2.html", "application/xhtml+xml"),
    ]
    points = [
        nav_point("np1", 1, "Chapter One", "ch1.html"),
        nav_point("np2", 2, "Chapter Two", "ch2.html"),
    ]
    return {
        "META-INF/container.xml": container_xml("OEBPS/content.opf"),
        "OEBPS/content.opf": opf_xml(items, spine_ids=["cover", "ch1", "ch2"]),
        "OEBPS/toc.ncx": ncx_xml(points),
        "OEBPS/cover.html": html_doc("Cover", "<p>Cover</p>"),
        "OEBPS/ch1.html": html_doc("One", "<h1>Chapter One</h1>\n<p>First body.</p>"),
        "OEBPS/ch1-img.jpg": "not really a jpeg",
        "OEBPS/ch2.html": html_doc("Two", "<h1>Chapter Two</h1>\n<p>Second body.</p>"),
    }
