from __future__ import annotations

from typing import TYPE_CHECKING

from textual.app import ComposeResult
from textual.binding import Binding
from textual.containers import VerticalScroll
from textual.screen import Screen
from textual.widgets import Footer, Static

from folio.library.models import Book
from folio.reader.pagination import Paginator
from folio.ui.themes import apply_reader_settings, next_theme

if TYPE_CHECKING:
    from folio.app import FolioApp


class ReaderScreen(Screen):
    BINDINGS = [
        Binding("escape", "go_back", "Back"),
        Binding("left", "prev_page", "←"),
        Binding("right", "next_page", "→"),
        Binding("space", "next_page", "Next", show=False),
        Binding("m", "toggle_bookmark", "Mark"),
        Binding("t", "cycle_theme", "Theme"),
        Binding("v", "toggle_mode", "Mode"),
        Binding("=", "wider", "+W"),
        Binding("minus", "narrower", "-W"),
    ]

    def __init__(self, book_id: str) -> None:
        super().__init__()
        self._book_id = book_id
        self._paginator: Paginator | None = None
        self._page = 1

    @property
    def fa(self) -> FolioApp:
        return self.app  # type: ignore[return-value]

    @property
    def book(self) -> Book | None:
        return self.fa.store.get_book(self._book_id)

    def compose(self) -> ComposeResult:
        yield Static("", id="reader-header", markup=False)
        with VerticalScroll(id="reader-body"):
            yield Static("Loading...", id="content-text", markup=False)
        yield Footer()

    def on_mount(self) -> None:
        book = self.book
        if book is None:
            self.notify("Book not found", severity="error")
            self.app.pop_screen()
            return
        self._paginator = Paginator(book.content, self.fa.store.chars_per_page)
        self._go_to(max(1, book.current_page))

    # ── Rendering ───────────────────────────────

    def _go_to(self, page: int) -> None:
        position = self.fa.store.record_progress(self._book_id, page)
        if position is None:
            return
        self._page = position.page
        self._render_page()

    def _render_page(self) -> None:
        book = self.book
        if book is None or self._paginator is None:
            return
        settings = self.fa.store.settings
        body = self.query_one("#reader-body", VerticalScroll)
        text = self.query_one("#content-text", Static)
        apply_reader_settings(body, text, settings)

        if settings.reading_mode == "scroll":
            text.update(book.content)
        else:
            text.update(self._paginator.page_content(self._page))
            body.scroll_home(animate=False)

        marked = any(bm.page == self._page for bm in book.bookmarks)
        parts = [
            f" {book.title}",
            f"P {self._page}/{self._paginator.total_pages}",
            f"{book.progress:.0%}",
            settings.theme,
        ]
        if marked:
            parts.append("★")
        self.query_one("#reader-header", Static).update("  │  ".join(parts))

    # ── Actions ─────────────────────────────────

    def action_next_page(self) -> None:
        if self._paginator:
            self._go_to(self._paginator.next_page(self._page).page)

    def action_prev_page(self) -> None:
        if self._paginator:
            self._go_to(self._paginator.previous_page(self._page).page)

    def action_toggle_bookmark(self) -> None:
        added = self.fa.store.toggle_bookmark(self._book_id, self._page)
        self.notify("Bookmark added" if added else "Bookmark removed")
        self._render_page()

    def action_cycle_theme(self) -> None:
        settings = self.fa.store.settings
        self.fa.store.update_settings(theme=next_theme(settings.theme))
        self._render_page()

    def action_toggle_mode(self) -> None:
        mode = "scroll" if self.fa.store.settings.reading_mode == "paged" else "paged"
        self.fa.store.update_settings(reading_mode=mode)
        self._render_page()

    def action_wider(self) -> None:
        self.fa.store.update_settings(text_width=self.fa.store.settings.text_width + 5)
        self._render_page()

    def action_narrower(self) -> None:
        self.fa.store.update_settings(text_width=self.fa.store.settings.text_width - 5)
        self._render_page()

    def action_go_back(self) -> None:
        self.app.pop_screen()
