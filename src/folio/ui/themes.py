"""Textual CSS and reader colour handling for folio."""

from __future__ import annotations

from textual.widget import Widget

from folio.library.models import THEMES, ReaderSettings

APP_CSS = """
/* ── Global ────────────────────────────────── */
Screen {
    background: $surface;
}

/* ── Library Screen ────────────────────────── */
#library-header {
    dock: top;
    height: 3;
    padding: 1 2;
    background: $primary;
    color: $text;
    text-style: bold;
}

#search-bar {
    dock: top;
    height: 3;
    padding: 0 2;
    background: $surface-darken-1;
    display: none;
}

#search-input {
    width: 100%;
}

#book-table {
    height: 1fr;
}

/* ── Reader Screen ─────────────────────────── */
#reader-header {
    dock: top;
    height: 1;
    background: $primary;
    color: $text;
    padding: 0 2;
    text-style: bold;
}

#reader-body {
    height: 1fr;
    align-horizontal: center;
}

#content-text {
    height: auto;
}
"""

# Terminal text alignment names differ from the reader's.
_TEXT_ALIGN = {"left": "left", "center": "center", "justified": "justify"}

THEME_ORDER = list(THEMES)


def next_theme(current: str) -> str:
    return THEME_ORDER[(THEME_ORDER.index(current) + 1) % len(THEME_ORDER)]


def apply_reader_settings(body: Widget, text: Widget, settings: ReaderSettings) -> None:
    """Map reader settings onto terminal cells.

    Pixel margins become columns at 10px per column; paragraph spacing and
    font settings have no terminal equivalent.
    """
    body.styles.background = settings.background_color
    text.styles.color = settings.text_color
    text.styles.max_width = settings.text_width
    text.styles.padding = (1, max(1, settings.margins // 10))
    text.styles.text_align = _TEXT_ALIGN[settings.text_align]
