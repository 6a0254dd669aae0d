"""Folio - terminal ebook reader."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

from textual import work
from textual.app import App

from folio.config import AppConfig, load_config
from folio.library.database import Database
from folio.library.importer import import_epub
from folio.library.models import Book
from folio.library.store import LibraryStore
from folio.parsers.errors import IngestionFailed
from folio.ui.screens.library_screen import LibraryScreen
from folio.ui.screens.reader_screen import ReaderScreen
from folio.ui.themes import APP_CSS

log = logging.getLogger(__name__)


class FolioApp(App):
    """A terminal ebook reader over the local library."""

    TITLE = "Folio"
    CSS = APP_CSS

    def __init__(
        self, config: AppConfig | None = None, open_file: str | None = None
    ) -> None:
        super().__init__()
        self.config = config or load_config()
        self.db = Database(self.config.db_path)
        self.store = LibraryStore(self.db, chars_per_page=self.config.chars_per_page)
        self._open_file = open_file

    def on_mount(self) -> None:
        self.push_screen(LibraryScreen())
        if self._open_file:
            self.import_file(self._open_file)

    @work(exclusive=False)
    async def import_file(self, file_path_str: str) -> None:
        file_path = Path(file_path_str).expanduser().resolve()
        if not file_path.exists():
            self.notify(f"File not found: {file_path}", severity="error")
            return

        try:
            book = await import_epub(self.store, file_path.read_bytes(), file_path.name)
        except IngestionFailed as e:
            log.warning("Import of %s failed: %s", file_path, e.reason)
            self.notify(str(e), severity="error")
            return

        self.notify(f'"{book.title}" added to your library')
        if isinstance(self.screen, LibraryScreen):
            self.screen.refresh_books()

    def open_book(self, book: Book) -> None:
        """Open a book in the reader. Called from LibraryScreen."""
        self.push_screen(ReaderScreen(book.id))

    async def action_quit(self) -> None:
        self.db.close()
        self.exit()


def _setup_logging(config: AppConfig) -> None:
    handler = logging.FileHandler(config.log_path, encoding="utf-8")
    handler.setFormatter(
        logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
    )
    level = logging.getLevelName(config.log_level)
    root = logging.getLogger("folio")
    root.setLevel(level if isinstance(level, int) else logging.INFO)
    root.addHandler(handler)


def main() -> None:
    config = load_config()
    _setup_logging(config)

    open_file: str | None = None
    if len(sys.argv) > 1:
        open_file = sys.argv[1]

    app = FolioApp(config=config, open_file=open_file)
    app.run()


if __name__ == "__main__":
    main()
