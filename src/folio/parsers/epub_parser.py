"""EPUB ingestion: archive -> title, author, plain-text content and cover."""

from __future__ import annotations

import logging
import re
from pathlib import PurePosixPath
from typing import Optional

from folio.library.models import IngestedBook

from .archive import ArchiveReader
from .base import BaseParser, get_parser
from .container import resolve_opf_path
from .content import extract_content
from .cover import resolve_cover
from .errors import EpubError, IngestionFailed
from .package import load_package

log = logging.getLogger(__name__)

UNKNOWN_AUTHOR = "Unknown Author"


def title_from_filename(file_name: str) -> str:
    name = PurePosixPath(file_name.replace("\\", "/")).name
    return re.sub(r"\.epub$", "", name, flags=re.IGNORECASE).strip() or "Untitled"


class EpubParser(BaseParser):
    SUPPORTED_EXTENSIONS = (".epub",)
    SUPPORTED_MEDIA_TYPES = ("application/epub+zip",)

    async def parse(self, data: bytes, file_name: str) -> IngestedBook:
        with ArchiveReader(data) as archive:
            opf_path = await resolve_opf_path(archive)
            package = await load_package(archive, opf_path)
            extraction = await extract_content(archive, package)
            cover = await resolve_cover(archive, package)

        title = package.metadata.title or title_from_filename(file_name)
        author = package.metadata.author or UNKNOWN_AUTHOR
        if extraction.skipped:
            log.info(
                "%s: skipped %d of %d spine items",
                file_name,
                len(extraction.skipped),
                len(package.spine),
            )
        return IngestedBook(
            title=title,
            author=author,
            content=extraction.text,
            cover=cover,
            skipped=extraction.skipped,
        )


async def ingest(
    data: bytes, file_name: str, media_type: Optional[str] = None
) -> IngestedBook:
    """Run the whole pipeline for one uploaded file.

    Raises IngestionFailed, chained to the stage error that stopped it.
    """
    try:
        parser = get_parser(file_name, media_type)
        book = await parser.parse(data, file_name)
    except EpubError as e:
        log.error("EPUB parsing error for %s: %s", file_name, e)
        raise IngestionFailed(e) from e
    log.info("Ingested %s (%d characters)", file_name, len(book.content))
    return book
