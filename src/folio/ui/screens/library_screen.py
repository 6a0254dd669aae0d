from __future__ import annotations

from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Iterable

from textual import on
from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import Horizontal, Vertical
from textual.screen import ModalScreen, Screen
from textual.widgets import (
    Button,
    DataTable,
    DirectoryTree,
    Footer,
    Header,
    Input,
    Label,
    Static,
)

from folio.parsers.epub_parser import EpubParser

if TYPE_CHECKING:
    from folio.app import FolioApp


class BookDirectoryTree(DirectoryTree):
    def filter_paths(self, paths: Iterable[Path]) -> Iterable[Path]:
        return sorted(
            [p for p in paths if p.is_dir() or EpubParser.can_handle(p.name)],
            key=lambda p: (not p.is_dir(), p.name.lower()),
        )


class FilePickerScreen(ModalScreen[str | None]):
    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
    ]

    DEFAULT_CSS = """
    FilePickerScreen {
        align: center middle;
    }
    #file-picker-dialog {
        width: 80%;
        height: 80%;
        background: $surface;
        border: solid $primary;
        padding: 1 2;
    }
    #file-picker-title {
        text-align: center;
        text-style: bold;
        margin-bottom: 1;
    }
    #file-tree {
        height: 1fr;
    }
    """

    def __init__(self, start_path: str = "~") -> None:
        super().__init__()
        self._start = str(Path(start_path).expanduser().resolve())

    def compose(self) -> ComposeResult:
        with Vertical(id="file-picker-dialog"):
            yield Label("Select an EPUB file", id="file-picker-title")
            yield BookDirectoryTree(self._start, id="file-tree")

    def on_mount(self) -> None:
        self.query_one("#file-tree", BookDirectoryTree).focus()

    @on(DirectoryTree.FileSelected)
    def on_file_selected(self, event: DirectoryTree.FileSelected) -> None:
        self.dismiss(str(event.path))

    def action_cancel(self) -> None:
        self.dismiss(None)


class ConfirmDeleteScreen(ModalScreen[bool]):
    BINDINGS = [
        Binding("escape", "cancel", "Cancel"),
        Binding("y", "confirm", "Yes"),
        Binding("n", "cancel", "No"),
    ]

    DEFAULT_CSS = """
    ConfirmDeleteScreen {
        align: center middle;
    }
    #confirm-delete-dialog {
        width: 60;
        height: 9;
        background: $surface;
        border: solid $error;
        padding: 1 2;
    }
    #confirm-delete-msg {
        text-align: center;
        margin: 1 0;
    }
    #confirm-delete-buttons {
        align: center middle;
        height: 3;
    }
    #confirm-delete-buttons Button {
        margin: 0 2;
    }
    """

    def __init__(self, book_title: str) -> None:
        super().__init__()
        self._book_title = book_title

    def compose(self) -> ComposeResult:
        with Vertical(id="confirm-delete-dialog"):
            yield Label(
                f'Delete "{self._book_title}" from library?',
                id="confirm-delete-msg",
            )
            with Horizontal(id="confirm-delete-buttons"):
                yield Button("Delete (y)", variant="error", id="cd-yes")
                yield Button("Cancel (n)", variant="default", id="cd-no")

    def on_button_pressed(self, event: Button.Pressed) -> None:
        self.dismiss(event.button.id == "cd-yes")

    def action_confirm(self) -> None:
        self.dismiss(True)

    def action_cancel(self) -> None:
        self.dismiss(False)


class LibraryScreen(Screen):
    BINDINGS = [
        Binding("A", "add_book", "Add", priority=True),
        Binding("D", "delete_book", "Delete", priority=True),
        Binding("f", "cycle_folder", "Folder"),
        Binding("r", "reset_progress", "Reset"),
        Binding("S", "toggle_search", "Search"),
        Binding("q", "quit_app", "Quit"),
    ]

    def __init__(self) -> None:
        super().__init__()
        # None shows the whole library, otherwise an index into store.folders
        self._folder_index: int | None = None
        self._searching = False

    @property
    def fa(self) -> FolioApp:
        return self.app  # type: ignore[return-value]

    def compose(self) -> ComposeResult:
        yield Header()
        yield Static("", id="library-header", markup=False)
        with Horizontal(id="search-bar"):
            yield Input(placeholder="Search books... (Esc to close)", id="search-input")
        yield DataTable(id="book-table")
        yield Footer()

    def on_mount(self) -> None:
        table = self.query_one("#book-table", DataTable)
        table.cursor_type = "row"
        table.add_columns("Title", "Author", "Progress", "Last Read", "Tags")
        self.refresh_books()
        table.focus()

    def on_screen_resume(self) -> None:
        self.refresh_books()
        if not self._searching:
            self.query_one("#book-table", DataTable).focus()

    def _current_folder_id(self) -> str | None:
        folders = self.fa.store.folders
        if self._folder_index is None or self._folder_index >= len(folders):
            return None
        return folders[self._folder_index].id

    def refresh_books(self) -> None:
        store = self.fa.store
        table = self.query_one("#book-table", DataTable)
        table.clear()

        query = self.query_one("#search-input", Input).value
        folder_id = self._current_folder_id()
        books = store.search_books(query, folder_id=folder_id)

        for book in books:
            table.add_row(
                book.title,
                book.author,
                f"{book.progress:.0%}",
                datetime.fromtimestamp(book.last_read).strftime("%Y-%m-%d"),
                ", ".join(book.tags),
                key=book.id,
            )

        folder = store.get_folder(folder_id) if folder_id else None
        folder_label = folder.name if folder else "All books"
        self.query_one("#library-header", Static).update(
            f" Folio Library  ({len(books)} books)  Folder: {folder_label}"
        )

    def _selected_book_id(self) -> str | None:
        table = self.query_one("#book-table", DataTable)
        if table.row_count == 0:
            return None
        row_key, _ = table.coordinate_to_cell_key(table.cursor_coordinate)
        return str(row_key.value)

    # ── Search ──────────────────────────────────

    def action_toggle_search(self) -> None:
        if self._searching:
            self._hide_search()
        else:
            self._searching = True
            self.query_one("#search-bar").styles.display = "block"
            inp = self.query_one("#search-input", Input)
            inp.value = ""
            inp.focus()

    def _hide_search(self) -> None:
        self._searching = False
        self.query_one("#search-bar").styles.display = "none"
        self.query_one("#search-input", Input).value = ""
        self.refresh_books()
        self.query_one("#book-table", DataTable).focus()

    @on(Input.Changed, "#search-input")
    def on_search_changed(self, event: Input.Changed) -> None:
        self.refresh_books()

    @on(Input.Submitted, "#search-input")
    def on_search_submitted(self, event: Input.Submitted) -> None:
        self.query_one("#book-table", DataTable).focus()

    def on_key(self, event) -> None:
        if self._searching and event.key == "escape":
            self._hide_search()
            event.stop()
            event.prevent_default()

    # ── Add / delete ────────────────────────────

    def action_add_book(self) -> None:
        self.app.push_screen(FilePickerScreen("~"), callback=self._on_file_picked)

    def _on_file_picked(self, result: str | None) -> None:
        if result:
            self.fa.import_file(result)

    def action_delete_book(self) -> None:
        book_id = self._selected_book_id()
        book = self.fa.store.get_book(book_id) if book_id else None
        if not book:
            return
        self.app.push_screen(
            ConfirmDeleteScreen(book.title),
            callback=lambda confirmed: self._on_delete_confirmed(confirmed, book.id),
        )

    def _on_delete_confirmed(self, confirmed: bool | None, book_id: str) -> None:
        if not confirmed:
            return
        book = self.fa.store.get_book(book_id)
        title = book.title if book else book_id
        self.fa.store.delete_book(book_id)
        self.refresh_books()
        self.notify(f"Removed: {title}")

    def action_reset_progress(self) -> None:
        book_id = self._selected_book_id()
        if book_id and self.fa.store.reset_progress(book_id):
            self.refresh_books()

    # ── Open / folders / quit ───────────────────

    @on(DataTable.RowSelected, "#book-table")
    def on_row_selected(self, event: DataTable.RowSelected) -> None:
        book = self.fa.store.get_book(str(event.row_key.value))
        if book:
            self.fa.open_book(book)

    def action_cycle_folder(self) -> None:
        count = len(self.fa.store.folders)
        if self._folder_index is None:
            self._folder_index = 0 if count else None
        elif self._folder_index + 1 < count:
            self._folder_index += 1
        else:
            self._folder_index = None
        self.refresh_books()

    async def action_quit_app(self) -> None:
        await self.fa.action_quit()
