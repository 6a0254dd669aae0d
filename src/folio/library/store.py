"""The library: books, folders and reader settings, persisted on every change."""

from __future__ import annotations

import logging
import time
from dataclasses import fields
from typing import Any, Iterable, Optional

from folio.reader.pagination import (
    CHARS_PER_PAGE,
    UNREAD,
    Paginator,
    ReadingPosition,
    count_pages,
    rescale_position,
)

from .database import Database
from .models import Book, Bookmark, Folder, Highlight, ReaderSettings
from .samples import default_settings, sample_books, sample_folders

log = logging.getLogger(__name__)

BOOKS_KEY = "books"
FOLDERS_KEY = "folders"
SETTINGS_KEY = "readerSettings"

# Owned by the store or by the paired progress operations.
_PROTECTED_BOOK_FIELDS = frozenset(
    ["id", "date_added", "total_pages", "progress", "current_page"]
)
_BOOK_FIELDS = frozenset(f.name for f in fields(Book))
_SETTINGS_FIELDS = frozenset(f.name for f in fields(ReaderSettings))


def _id_list(ids: Iterable[str]) -> list[str]:
    # A bare string would otherwise be taken as a collection of one-letter ids.
    if isinstance(ids, str):
        raise TypeError("Expected a collection of ids, got a single string")
    return list(ids)


class LibraryStore:
    """Single-writer owner of the persisted library state.

    Every mutating call rewrites the books, folders and settings records in
    one storage transaction. Operations on an unknown id do nothing and
    return ``None`` (or ``False``).
    """

    def __init__(self, storage: Database, chars_per_page: int = CHARS_PER_PAGE) -> None:
        self._storage = storage
        self.chars_per_page = chars_per_page
        self._books = self._load_books()
        self._folders = self._load_folders()
        self._settings = self._load_settings()

        for book in self._books:
            self._repaginate(book)
        self._drop_dangling_references()
        self._persist()

    # ── Loading / persistence ───────────────────────

    def _load_books(self) -> list[Book]:
        raw = self._storage.read_record(BOOKS_KEY)
        if raw is None:
            log.info("No stored library, starting from the sample books")
            return sample_books()
        return [Book.from_dict(item) for item in raw]

    def _load_folders(self) -> list[Folder]:
        raw = self._storage.read_record(FOLDERS_KEY)
        if raw is None:
            return sample_folders()
        return [Folder.from_dict(item) for item in raw]

    def _load_settings(self) -> ReaderSettings:
        raw = self._storage.read_record(SETTINGS_KEY)
        if raw is None:
            return default_settings()
        try:
            return ReaderSettings.from_dict(raw)
        except (TypeError, ValueError) as e:
            log.warning("Stored reader settings are invalid (%s), using defaults", e)
            return default_settings()

    def _persist(self) -> None:
        self._storage.write_records(
            {
                BOOKS_KEY: [b.to_dict() for b in self._books],
                FOLDERS_KEY: [f.to_dict() for f in self._folders],
                SETTINGS_KEY: self._settings.to_dict(),
            }
        )

    def _repaginate(self, book: Book) -> None:
        total = count_pages(book.content, self.chars_per_page)
        if total != book.total_pages:
            position = rescale_position(book.current_page, book.progress, total)
            log.debug(
                "Repaginated %s: %d -> %d pages, page %d -> %d",
                book.id,
                book.total_pages,
                total,
                book.current_page,
                position.page,
            )
        elif book.current_page <= 0:
            position = UNREAD
        else:
            position = ReadingPosition.at(min(book.current_page, total), total)
        book.total_pages = total
        book.current_page = position.page
        book.progress = position.progress

    def _drop_dangling_references(self) -> None:
        known = {b.id for b in self._books}
        for folder in self._folders:
            kept = [i for i in folder.book_ids if i in known]
            if len(kept) != len(folder.book_ids):
                log.warning("Folder %s referenced missing books", folder.id)
                folder.book_ids = kept

    # ── Queries ─────────────────────────────────────

    @property
    def books(self) -> list[Book]:
        return list(self._books)

    @property
    def folders(self) -> list[Folder]:
        return list(self._folders)

    @property
    def settings(self) -> ReaderSettings:
        return self._settings

    def get_book(self, book_id: str) -> Optional[Book]:
        for book in self._books:
            if book.id == book_id:
                return book
        return None

    def get_folder(self, folder_id: str) -> Optional[Folder]:
        for folder in self._folders:
            if folder.id == folder_id:
                return folder
        return None

    def search_books(self, query: str, folder_id: Optional[str] = None) -> list[Book]:
        """Case-insensitive match on title, author or any tag."""
        books = self.books if folder_id is None else self.books_in_folder(folder_id)
        if not query:
            return books
        q = query.lower()
        return [
            b
            for b in books
            if q in b.title.lower()
            or q in b.author.lower()
            or any(q in tag.lower() for tag in b.tags)
        ]

    def books_in_folder(self, folder_id: str) -> list[Book]:
        folder = self.get_folder(folder_id)
        if folder is None:
            return []
        members = set(folder.book_ids)
        return [b for b in self._books if b.id in members]

    def folders_for_book(self, book_id: str) -> list[Folder]:
        return [f for f in self._folders if book_id in f.book_ids]

    def folder_book_counts(self) -> dict[str, int]:
        return {f.id: len(self.books_in_folder(f.id)) for f in self._folders}

    def recently_added(
        self, days: int = 7, limit: int = 4, now: Optional[float] = None
    ) -> list[Book]:
        cutoff = (now if now is not None else time.time()) - days * 86400
        recent = [b for b in self._books if b.date_added >= cutoff]
        recent.sort(key=lambda b: b.date_added, reverse=True)
        return recent[:limit]

    def recently_read(self, limit: int = 4) -> list[Book]:
        return sorted(self._books, key=lambda b: b.last_read, reverse=True)[:limit]

    # ── Books ───────────────────────────────────────

    def add_book(
        self,
        *,
        title: str,
        author: str,
        content: str,
        cover: Optional[str] = None,
        tags: Iterable[str] = (),
        current_page: int = 0,
    ) -> Book:
        paginator = Paginator(content, self.chars_per_page)
        position = paginator.go_to(current_page) if current_page > 0 else UNREAD
        book = Book(
            title=title,
            author=author,
            content=content,
            cover=cover,
            tags=list(tags),
            total_pages=paginator.total_pages,
            current_page=position.page,
            progress=position.progress,
        )
        self._books.append(book)
        self._persist()
        log.info("Added book %s (%s)", book.id, book.title)
        return book

    def update_book(self, book_id: str, **changes: Any) -> Optional[Book]:
        protected = _PROTECTED_BOOK_FIELDS & changes.keys()
        if protected:
            raise ValueError(f"Cannot update {', '.join(sorted(protected))} directly")
        unknown = changes.keys() - _BOOK_FIELDS
        if unknown:
            raise ValueError(f"Unknown book fields: {', '.join(sorted(unknown))}")

        book = self.get_book(book_id)
        if book is None:
            return None
        for name, value in changes.items():
            if name == "tags":
                value = list(value)
            setattr(book, name, value)
        if "content" in changes:
            before = (book.current_page, book.progress)
            self._repaginate(book)
            if (book.current_page, book.progress) != before:
                book.last_read = time.time()
        self._persist()
        return book

    def delete_book(self, book_id: str) -> None:
        self.delete_books([book_id])

    def delete_books(self, book_ids: Iterable[str]) -> None:
        """Remove books and every folder reference to them."""
        ids = set(_id_list(book_ids))
        self._books = [b for b in self._books if b.id not in ids]
        for folder in self._folders:
            folder.book_ids = [i for i in folder.book_ids if i not in ids]
        self._persist()

    # ── Progress ────────────────────────────────────

    def record_progress(self, book_id: str, page: int) -> Optional[ReadingPosition]:
        """Move a book to ``page`` (clamped); page and progress change together."""
        book = self.get_book(book_id)
        if book is None:
            return None
        position = Paginator(book.content, self.chars_per_page).go_to(page)
        book.current_page = position.page
        book.progress = position.progress
        book.last_read = time.time()
        self._persist()
        return position

    def reset_progress(self, book_id: str) -> Optional[Book]:
        book = self.get_book(book_id)
        if book is None:
            return None
        book.current_page = UNREAD.page
        book.progress = UNREAD.progress
        book.last_read = time.time()
        self._persist()
        return book

    # ── Bookmarks / highlights ──────────────────────

    def toggle_bookmark(
        self,
        book_id: str,
        page: int,
        position: int = 0,
        note: Optional[str] = None,
    ) -> Optional[Bookmark]:
        """Add a bookmark on ``page``, or remove the one already there.

        Returns the new bookmark, or None when one was removed.
        """
        book = self.get_book(book_id)
        if book is None:
            return None
        existing = [bm for bm in book.bookmarks if bm.page == page]
        if existing:
            book.bookmarks = [bm for bm in book.bookmarks if bm.page != page]
            added = None
        else:
            added = Bookmark(page=page, position=position, note=note)
            book.bookmarks.append(added)
        self._persist()
        return added

    def add_highlight(
        self,
        book_id: str,
        text: str,
        color: str,
        page: int,
        position: int = 0,
        note: Optional[str] = None,
    ) -> Optional[Highlight]:
        book = self.get_book(book_id)
        if book is None:
            return None
        highlight = Highlight(
            text=text, color=color, page=page, position=position, note=note
        )
        book.highlights.append(highlight)
        self._persist()
        return highlight

    def remove_highlight(self, book_id: str, highlight_id: str) -> bool:
        book = self.get_book(book_id)
        if book is None:
            return False
        kept = [h for h in book.highlights if h.id != highlight_id]
        removed = len(kept) != len(book.highlights)
        book.highlights = kept
        self._persist()
        return removed

    # ── Folders ─────────────────────────────────────

    def add_folder(self, name: str) -> Folder:
        folder = Folder(name=name)
        self._folders.append(folder)
        self._persist()
        return folder

    def update_folder(
        self,
        folder_id: str,
        name: Optional[str] = None,
        book_ids: Optional[Iterable[str]] = None,
    ) -> Optional[Folder]:
        folder = self.get_folder(folder_id)
        if folder is None:
            return None
        if name is not None:
            folder.name = name
        if book_ids is not None:
            known = {b.id for b in self._books}
            ids = dict.fromkeys(_id_list(book_ids))
            folder.book_ids = [i for i in ids if i in known]
        self._persist()
        return folder

    def delete_folder(self, folder_id: str) -> None:
        """Remove the folder only; its books stay in the library."""
        self._folders = [f for f in self._folders if f.id != folder_id]
        self._persist()

    def add_books_to_folder(
        self, book_ids: Iterable[str], folder_id: str
    ) -> Optional[Folder]:
        ids = _id_list(book_ids)
        folder = self.get_folder(folder_id)
        if folder is None:
            return None
        known = {b.id for b in self._books}
        for book_id in ids:
            if book_id not in known:
                log.debug("Ignoring unknown book %s for folder %s", book_id, folder_id)
            elif book_id not in folder.book_ids:
                folder.book_ids.append(book_id)
        self._persist()
        return folder

    def remove_books_from_folder(
        self, book_ids: Iterable[str], folder_id: str
    ) -> Optional[Folder]:
        ids = set(_id_list(book_ids))
        folder = self.get_folder(folder_id)
        if folder is None:
            return None
        folder.book_ids = [i for i in folder.book_ids if i not in ids]
        self._persist()
        return folder

    # ── Settings ────────────────────────────────────

    def update_settings(self, **changes: Any) -> ReaderSettings:
        unknown = changes.keys() - _SETTINGS_FIELDS
        if unknown:
            raise ValueError(f"Unknown settings: {', '.join(sorted(unknown))}")
        self._settings = ReaderSettings.from_dict({**self._settings.to_dict(), **changes})
        self._persist()
        return self._settings
