"""Add an uploaded EPUB to the library."""

from __future__ import annotations

from typing import Optional

from folio.parsers.epub_parser import ingest

from .models import Book
from .store import LibraryStore

UPLOAD_TAG = "Uploaded"


async def import_epub(
    store: LibraryStore,
    data: bytes,
    file_name: str,
    media_type: Optional[str] = None,
) -> Book:
    """Ingest ``data`` and add the result as a new book.

    Nothing is written to the store unless ingestion succeeds; failures
    propagate as IngestionFailed.
    """
    ingested = await ingest(data, file_name, media_type)
    return store.add_book(
        title=ingested.title,
        author=ingested.author,
        content=ingested.content,
        cover=ingested.cover,
        tags=[UPLOAD_TAG],
    )
