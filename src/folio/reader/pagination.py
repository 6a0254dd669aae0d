"""Fixed-size pagination of a book's plain text and the page/progress pairing.

A page is a run of ``chars_per_page`` characters. It does not follow layout,
so any change to the page size shifts every page boundary. Stored positions
are migrated with :func:`rescale_position`, which keeps the progress fraction
and moves to the nearest page under the new size.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

CHARS_PER_PAGE = 2400


def count_pages(content: str, chars_per_page: int = CHARS_PER_PAGE) -> int:
    if chars_per_page <= 0:
        raise ValueError("chars_per_page must be positive")
    return max(1, math.ceil(len(content) / chars_per_page))


@dataclass(frozen=True)
class ReadingPosition:
    page: int
    progress: float

    @classmethod
    def at(cls, page: int, total_pages: int) -> ReadingPosition:
        return cls(page=page, progress=page / total_pages)


UNREAD = ReadingPosition(page=0, progress=0.0)


def rescale_position(
    current_page: int, progress: float, total_pages: int
) -> ReadingPosition:
    """Map a stored position onto a (possibly different) page count."""
    if current_page <= 0:
        return UNREAD
    page = math.floor(min(max(progress, 0.0), 1.0) * total_pages + 0.5)
    page = min(max(page, 1), total_pages)
    return ReadingPosition.at(page, total_pages)


class Paginator:
    """Page addressing over one book's content."""

    def __init__(self, content: str, chars_per_page: int = CHARS_PER_PAGE) -> None:
        self.content = content
        self.chars_per_page = chars_per_page
        self.total_pages = count_pages(content, chars_per_page)

    def clamp(self, page: int) -> int:
        return min(max(page, 1), self.total_pages)

    def page_bounds(self, page: int) -> tuple[int, int]:
        page = self.clamp(page)
        start = (page - 1) * self.chars_per_page
        return start, min(start + self.chars_per_page, len(self.content))

    def page_content(self, page: int) -> str:
        start, end = self.page_bounds(page)
        return self.content[start:end]

    def page_for_offset(self, offset: int) -> int:
        return self.clamp(offset // self.chars_per_page + 1)

    # ── Navigation ──────────────────────────────────

    def go_to(self, page: int) -> ReadingPosition:
        return ReadingPosition.at(self.clamp(page), self.total_pages)

    def next_page(self, current: int) -> ReadingPosition:
        return self.go_to(current + 1)

    def previous_page(self, current: int) -> ReadingPosition:
        return self.go_to(current - 1)
