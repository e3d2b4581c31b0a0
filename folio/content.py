from __future__ import annotations

import re
from pathlib import Path
from typing import Iterable, List, Sequence

from bs4 import BeautifulSoup

from .chapters import Chapter
from .errors import DocumentParseFailure, ResourcePathUnresolvable
from .log import get_logger
from .manifest import ManifestItem
from .paths import href_filename, resolve_href

logger = get_logger(__name__)

HTML_FILENAME_RE = re.compile(r"\.x?html?$", re.IGNORECASE)
MERGE_SEPARATOR = "\n<!-- folio:merge -->\n"
CONCAT_SEPARATOR = "\n\n"

_BODY_RE = re.compile(r"<body\b[^>]*>\s*(.*?)\s*</body\s*>", re.DOTALL)
_BODY_CLOSE = "</body>"
_BLOCK_TAGS = (
    "p",
    "div",
    "section",
    "article",
    "blockquote",
    "li",
    "h1",
    "h2",
    "h3",
    "h4",
    "h5",
    "h6",
)


def resolve_item_path(item: ManifestItem, root: Path, base: Path) -> Path:
    return resolve_href(root, base, item.path)


def is_html_item(item: ManifestItem) -> bool:
    return bool(HTML_FILENAME_RE.search(href_filename(item.path)))


def chapter_html_paths(chapter: Chapter, root: Path, base: Path) -> List[Path]:
    paths = [
        resolve_item_path(item, root, base)
        for item in chapter.manifest_items
        if is_html_item(item)
    ]
    if not paths:
        raise ResourcePathUnresolvable(chapter.id, "chapter has no HTML resources")
    return paths


def read_html(path: Path) -> str:
    try:
        return path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentParseFailure("content", path, str(exc)) from exc


def concat_chapter_html(paths: Sequence[Path]) -> str:
    return CONCAT_SEPARATOR.join(read_html(path) for path in paths)


def extract_body(html: str) -> str:
    match = _BODY_RE.search(html)
    if not match:
        return ""
    return match.group(1)


def merge_html_documents(documents: Sequence[str]) -> str:
    # Bodies of documents[1:] go before the carrier's last </body>.
    if not documents:
        return ""
    carrier = documents[0]
    if len(documents) == 1:
        return carrier
    splice_at = carrier.rfind(_BODY_CLOSE)
    if splice_at < 0:
        logger.warning("merge_body_missing", documents=len(documents))
        return carrier

    fragments: List[str] = []
    for idx, document in enumerate(documents[1:], start=1):
        body = extract_body(document)
        if not body:
            logger.debug("merge_fragment_skipped", document_index=idx)
            continue
        fragments.append(body)
    if not fragments:
        return carrier

    spliced = MERGE_SEPARATOR + MERGE_SEPARATOR.join(fragments) + "\n"
    return carrier[:splice_at] + spliced + carrier[splice_at:]


def merge_chapter_html(paths: Sequence[Path]) -> str:
    return merge_html_documents([read_html(path) for path in paths])


def _parse_html_soup(html: str) -> BeautifulSoup:
    head = html.lstrip()[:512].lower()
    parser = "lxml-xml" if (head.startswith("<?xml") or "xmlns=" in head) else "lxml"
    return BeautifulSoup(html, parser)


def _normalize_text(text: str) -> str:
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = re.sub(r"[ \t]+", " ", text)
    text = re.sub(r" *\n *", "\n", text)
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text.strip()


def html_to_text(html: str) -> str:
    soup = _parse_html_soup(html)
    for tag in soup.find_all(["script", "style", "head"]):
        tag.decompose()
    root = soup.find("body") or soup
    blocks: List[str] = []
    for node in root.find_all(_BLOCK_TAGS):
        if node.find(_BLOCK_TAGS):
            continue
        text = " ".join(node.get_text().split())
        if text:
            blocks.append(text)
    if not blocks:
        return _normalize_text(root.get_text("\n"))
    return _normalize_text("\n\n".join(blocks))


def chapter_text(paths: Iterable[Path]) -> str:
    parts = [html_to_text(read_html(path)) for path in paths]
    return _normalize_text("\n\n".join(part for part in parts if part))
