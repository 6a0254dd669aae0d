"""Data models for the book library."""

from __future__ import annotations

import time
import uuid
from dataclasses import asdict, dataclass, field, fields
from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from folio.parsers.content import SkippedItem


def make_id() -> str:
    return uuid.uuid4().hex


def _known(cls: type, data: dict[str, Any]) -> dict[str, Any]:
    names = {f.name for f in fields(cls)}
    return {k: v for k, v in data.items() if k in names}


@dataclass
class Bookmark:
    page: int
    position: int = 0
    note: Optional[str] = None
    id: str = field(default_factory=make_id)
    created_at: float = field(default_factory=time.time)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Bookmark:
        return cls(**_known(cls, data))


@dataclass
class Highlight:
    text: str
    color: str
    page: int
    position: int = 0
    note: Optional[str] = None
    id: str = field(default_factory=make_id)
    created_at: float = field(default_factory=time.time)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Highlight:
        return cls(**_known(cls, data))


@dataclass
class Book:
    title: str
    author: str
    content: str
    cover: Optional[str] = None
    progress: float = 0.0  # 0.0 - 1.0, always current_page / total_pages
    current_page: int = 0  # 0 until the book is first opened
    total_pages: int = 1
    tags: list[str] = field(default_factory=list)
    highlights: list[Highlight] = field(default_factory=list)
    bookmarks: list[Bookmark] = field(default_factory=list)
    last_read: float = field(default_factory=time.time)
    date_added: float = field(default_factory=time.time)
    id: str = field(default_factory=make_id)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Book:
        values = _known(cls, data)
        values["highlights"] = [
            Highlight.from_dict(h) for h in values.get("highlights", [])
        ]
        values["bookmarks"] = [Bookmark.from_dict(b) for b in values.get("bookmarks", [])]
        values["tags"] = list(values.get("tags", []))
        return cls(**values)


@dataclass
class Folder:
    name: str
    book_ids: list[str] = field(default_factory=list)  # set semantics, no dupes
    id: str = field(default_factory=make_id)
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Folder:
        values = _known(cls, data)
        values["book_ids"] = list(dict.fromkeys(values.get("book_ids", [])))
        return cls(**values)


# name -> (background, text)
THEMES: dict[str, tuple[str, str]] = {
    "light": ("#ffffff", "#1a1a1a"),
    "sepia": ("#f4ecd8", "#5f4b32"),
    "dark": ("#1a1a1a", "#e0e0e0"),
    "night": ("#0a0a0a", "#c0c0c0"),
}

FONT_FAMILIES: dict[str, str] = {
    "Charter": "Charter, serif",
    "Georgia": "Georgia, serif",
    "Inter": "Inter, sans-serif",
    "Helvetica": "Helvetica, Arial, sans-serif",
    "Dyslexic": "Open-Dyslexic, sans-serif",
    "Monospace": "Courier New, monospace",
}

READING_MODES = ("paged", "scroll")
TEXT_ALIGNMENTS = ("left", "center", "justified")


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


@dataclass
class ReaderSettings:
    """Process-wide reader preferences."""

    font_size: int = 18  # px, 12-28
    font_family: str = "Charter"
    line_height: float = 1.6  # 1.0-2.0
    text_width: int = 65  # character columns
    theme: str = "light"
    reading_mode: str = "paged"
    margins: int = 40  # px, 10-80
    paragraph_spacing: int = 16  # px
    text_align: str = "left"

    def __post_init__(self) -> None:
        if self.font_family not in FONT_FAMILIES:
            raise ValueError(f"Unknown font family: {self.font_family}")
        if self.theme not in THEMES:
            raise ValueError(f"Unknown theme: {self.theme}")
        if self.reading_mode not in READING_MODES:
            raise ValueError(f"Unknown reading mode: {self.reading_mode}")
        if self.text_align not in TEXT_ALIGNMENTS:
            raise ValueError(f"Unknown text alignment: {self.text_align}")
        self.font_size = int(_clamp(self.font_size, 12, 28))
        self.line_height = float(_clamp(self.line_height, 1.0, 2.0))
        self.text_width = max(int(self.text_width), 20)
        self.margins = int(_clamp(self.margins, 10, 80))
        self.paragraph_spacing = max(int(self.paragraph_spacing), 0)

    @property
    def background_color(self) -> str:
        return THEMES[self.theme][0]

    @property
    def text_color(self) -> str:
        return THEMES[self.theme][1]

    @property
    def font_stack(self) -> str:
        return FONT_FAMILIES[self.font_family]

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ReaderSettings:
        return cls(**_known(cls, data))


@dataclass
class IngestedBook:
    """What the ingestion pipeline extracts from one EPUB."""

    title: str
    author: str
    content: str
    cover: Optional[str] = None
    skipped: list[SkippedItem] = field(default_factory=list)
