"""Base parser interface and upload routing."""

from __future__ import annotations

from abc import ABC, abstractmethod
from pathlib import PurePosixPath
from typing import Optional

from folio.library.models import IngestedBook

from .errors import UnsupportedFormat


class BaseParser(ABC):
    """Abstract base for format-specific parsers."""

    SUPPORTED_EXTENSIONS: tuple[str, ...] = ()
    SUPPORTED_MEDIA_TYPES: tuple[str, ...] = ()

    @abstractmethod
    async def parse(self, data: bytes, file_name: str) -> IngestedBook:
        """Parse an uploaded file and return the extracted book."""

    @classmethod
    def can_handle(cls, file_name: str, media_type: Optional[str] = None) -> bool:
        if media_type and media_type.lower() in cls.SUPPORTED_MEDIA_TYPES:
            return True
        suffix = PurePosixPath(file_name.replace("\\", "/")).suffix.lower()
        return suffix in cls.SUPPORTED_EXTENSIONS


def get_parser(file_name: str, media_type: Optional[str] = None) -> BaseParser:
    """Return the parser for an upload, before any of its bytes are read."""
    from folio.parsers.epub_parser import EpubParser

    parsers: list[type[BaseParser]] = [EpubParser]
    for parser_cls in parsers:
        if parser_cls.can_handle(file_name, media_type):
            return parser_cls()

    supported = []
    for p in parsers:
        supported.extend(p.SUPPORTED_EXTENSIONS)
    raise UnsupportedFormat(
        f"Unsupported format: {file_name}. Supported: {', '.join(supported)}"
    )
