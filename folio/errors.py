"""Error types raised while reading an EPUB.

Structural failures (no container, no package document, no navigation
document, unparseable XML) abort processing. Per-entry anomalies are logged
and skipped by the parsers instead of being raised.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional


class ErrorCode(str, Enum):
    E_CONTAINER_NOT_FOUND = "E_CONTAINER_NOT_FOUND"
    E_PACKAGE_DOCUMENT_NOT_FOUND = "E_PACKAGE_DOCUMENT_NOT_FOUND"
    E_NAVIGATION_DOCUMENT_NOT_FOUND = "E_NAVIGATION_DOCUMENT_NOT_FOUND"
    E_CHAPTER_NOT_FOUND = "E_CHAPTER_NOT_FOUND"
    E_RESOURCE_PATH_UNRESOLVABLE = "E_RESOURCE_PATH_UNRESOLVABLE"
    E_DOCUMENT_PARSE_FAILURE = "E_DOCUMENT_PARSE_FAILURE"
    E_MANIFEST_SECTION_MISSING = "E_MANIFEST_SECTION_MISSING"
    E_ARCHIVE_UNREADABLE = "E_ARCHIVE_UNREADABLE"
    E_ARCHIVE_UNSAFE = "E_ARCHIVE_UNSAFE"


class EpubError(Exception):
    """Base exception for EPUB parsing errors.

    Attributes:
        code: The error code enum value
        message: Human-readable error message
    """

    code = ErrorCode.E_DOCUMENT_PARSE_FAILURE

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class ContainerNotFound(EpubError):
    """META-INF/container.xml is missing or names no package document."""

    code = ErrorCode.E_CONTAINER_NOT_FOUND

    def __init__(self, root: Path | str):
        self.root = Path(root)
        super().__init__(f"Failed to find package document via container.xml in {root}")


class PackageDocumentNotFound(EpubError):
    """The package document is missing or names no navigation document."""

    code = ErrorCode.E_PACKAGE_DOCUMENT_NOT_FOUND

    def __init__(self, path: Path | str, message: Optional[str] = None):
        self.path = Path(path)
        super().__init__(message or f"Package document not found: {path}")


class NavigationDocumentNotFound(EpubError):
    code = ErrorCode.E_NAVIGATION_DOCUMENT_NOT_FOUND

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Navigation document not found: {path}")


class ChapterNotFound(EpubError, LookupError):
    code = ErrorCode.E_CHAPTER_NOT_FOUND

    def __init__(self, chapter_id: str):
        self.chapter_id = chapter_id
        super().__init__(f"Could not find chapter with id {chapter_id}")


class ResourcePathUnresolvable(EpubError):
    code = ErrorCode.E_RESOURCE_PATH_UNRESOLVABLE

    def __init__(self, href: str, reason: str = "could not resolve path"):
        self.href = href
        super().__init__(f"{reason}: {href!r}")


class DocumentParseFailure(EpubError):
    """A document could not be read or is not well-formed.

    ``stage`` names the pipeline step that failed (container, package,
    manifest, navigation, content).
    """

    code = ErrorCode.E_DOCUMENT_PARSE_FAILURE

    def __init__(self, stage: str, path: Path | str, detail: str = ""):
        self.stage = stage
        self.path = Path(path)
        message = f"Failed to parse {stage} document {path}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class ManifestSectionMissing(EpubError):
    code = ErrorCode.E_MANIFEST_SECTION_MISSING

    def __init__(self, path: Path | str):
        self.path = Path(path)
        super().__init__(f"Package document has no manifest element: {path}")


class ArchiveUnreadable(EpubError):
    code = ErrorCode.E_ARCHIVE_UNREADABLE

    def __init__(self, path: Path | str, detail: str = ""):
        self.path = Path(path)
        message = f"Invalid archive: {path}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ArchiveUnsafe(EpubError):
    code = ErrorCode.E_ARCHIVE_UNSAFE

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)
