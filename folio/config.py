"""Parser settings loaded from environment variables.

Environment Configuration:
    FOLIO_IDENTIFIER: Extraction directory name (default: random hex)
    FOLIO_CACHE_DIR: Directory to unpack into (default: <temp>/epubUnzip)
    FOLIO_CLEANUP_ON_EXIT: Remove the unpacked tree when a session closes

Archive limits:
    FOLIO_MAX_ENTRIES, FOLIO_MAX_TOTAL_BYTES, FOLIO_MAX_ENTRY_BYTES,
    FOLIO_MAX_COMPRESSION_RATIO
"""

from __future__ import annotations

import tempfile
import uuid
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

UNZIP_DIRNAME = "epubUnzip"

DEFAULT_MAX_ENTRIES = 10_000
DEFAULT_MAX_TOTAL_BYTES = 512 * 1024 * 1024
DEFAULT_MAX_ENTRY_BYTES = 64 * 1024 * 1024
DEFAULT_MAX_COMPRESSION_RATIO = 100


def _new_identifier() -> str:
    return uuid.uuid4().hex


class ParserConfig(BaseSettings):
    """Settings for one :class:`folio.epub.EpubParser` session.

    ``identifier`` names the extraction directory, so two sessions sharing an
    identifier (and cache directory) reuse the same unpacked tree.
    """

    model_config = SettingsConfigDict(
        env_prefix="FOLIO_", env_ignore_empty=True, frozen=True
    )

    identifier: str = Field(default_factory=_new_identifier, min_length=1)
    cache_dir: Optional[Path] = None
    cleanup_on_exit: bool = True

    # Archive safety limits
    max_entries: int = Field(default=DEFAULT_MAX_ENTRIES, gt=0)
    max_total_bytes: int = Field(default=DEFAULT_MAX_TOTAL_BYTES, gt=0)
    max_entry_bytes: int = Field(default=DEFAULT_MAX_ENTRY_BYTES, gt=0)
    max_compression_ratio: int = Field(default=DEFAULT_MAX_COMPRESSION_RATIO, gt=0)

    @field_validator("identifier", mode="before")
    @classmethod
    def _strip_identifier(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip()
        return value

    @field_validator("cache_dir")
    @classmethod
    def _expand_cache_dir(cls, value: Optional[Path]) -> Optional[Path]:
        if value is None:
            return None
        return value.expanduser()

    @property
    def extract_dir(self) -> Path:
        if self.cache_dir is not None:
            return self.cache_dir / f"epub_{self.identifier}"
        return Path(tempfile.gettempdir()) / UNZIP_DIRNAME / self.identifier


def load_config() -> ParserConfig:
    """Build a config from ``FOLIO_*`` environment variables.

    Raises:
        pydantic.ValidationError: a variable holds a malformed value.
    """
    return ParserConfig()
