"""Exceptions raised by the EPUB ingestion pipeline."""

from __future__ import annotations


class EpubError(Exception):
    """Base class for ingestion errors."""


class ArchiveError(EpubError):
    """The buffer is not a readable ZIP container."""


class InvalidEpub(EpubError):
    """The archive is a ZIP file but not a usable EPUB."""


class UnsupportedFormat(EpubError):
    """The upload is not an EPUB file at all."""


class IngestionFailed(EpubError):
    """Wraps whatever stopped an ingestion. The only error callers see."""

    def __init__(self, reason: EpubError) -> None:
        super().__init__(f"Failed to parse EPUB: {reason}")
        self.reason = reason
