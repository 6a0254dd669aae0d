"""Tests for pagination and reading positions."""

from __future__ import annotations

import pytest

from folio.reader.pagination import (
    CHARS_PER_PAGE,
    UNREAD,
    Paginator,
    ReadingPosition,
    count_pages,
    rescale_position,
)


class TestCountPages:
    def test_empty_content_has_one_page(self):
        assert count_pages("") == 1

    def test_exact_boundary(self):
        assert count_pages("x" * CHARS_PER_PAGE) == 1
        assert count_pages("x" * (CHARS_PER_PAGE + 1)) == 2

    def test_custom_page_size(self):
        assert count_pages("x" * 10, chars_per_page=3) == 4

    def test_invalid_page_size(self):
        with pytest.raises(ValueError):
            count_pages("abc", chars_per_page=0)


class TestPaginator:
    def test_page_content(self):
        p = Paginator("abcdefghij", chars_per_page=4)
        assert p.total_pages == 3
        assert p.page_content(1) == "abcd"
        assert p.page_content(2) == "efgh"
        assert p.page_content(3) == "ij"
        assert p.page_bounds(2) == (4, 8)
        assert p.page_bounds(3) == (8, 10)

    def test_pages_cover_content_exactly(self):
        content = "The quick brown fox jumps over the lazy dog. " * 7
        p = Paginator(content, chars_per_page=50)
        assert "".join(p.page_content(n) for n in range(1, p.total_pages + 1)) == content

    def test_page_for_offset(self):
        p = Paginator("abcdefghij", chars_per_page=4)
        assert p.page_for_offset(0) == 1
        assert p.page_for_offset(3) == 1
        assert p.page_for_offset(4) == 2
        assert p.page_for_offset(9) == 3
        assert p.page_for_offset(500) == 3

    def test_go_to_pairs_page_and_progress(self):
        p = Paginator("x" * 40, chars_per_page=10)
        assert p.go_to(2) == ReadingPosition(page=2, progress=0.5)
        assert p.go_to(4) == ReadingPosition(page=4, progress=1.0)

    def test_go_to_is_idempotent(self):
        p = Paginator("x" * 95, chars_per_page=10)
        for n in (-3, 0, 1, 5, 10, 11, 1000):
            assert p.go_to(n) == p.go_to(n)

    @pytest.mark.parametrize("page", [-10, -1, 0, 11, 12, 10_000])
    def test_out_of_range_clamps(self, page):
        p = Paginator("x" * 100, chars_per_page=10)
        position = p.go_to(page)
        assert 1 <= position.page <= p.total_pages
        assert position.progress == position.page / p.total_pages

    def test_next_and_previous(self):
        p = Paginator("x" * 30, chars_per_page=10)
        assert p.next_page(0).page == 1
        assert p.next_page(1).page == 2
        assert p.next_page(3).page == 3
        assert p.previous_page(3).page == 2
        assert p.previous_page(1).page == 1

    def test_single_page_book(self):
        p = Paginator("Hello, world.")
        assert p.total_pages == 1
        assert p.go_to(5) == ReadingPosition(page=1, progress=1.0)


class TestRescalePosition:
    def test_unread_stays_unread(self):
        assert rescale_position(0, 0.0, 10) == UNREAD
        assert rescale_position(0, 0.7, 10) == UNREAD

    def test_keeps_progress_fraction(self):
        # 3 of 10 pages read; doubling the page count keeps 30%
        position = rescale_position(3, 0.3, 20)
        assert position == ReadingPosition(page=6, progress=0.3)

    def test_nearest_page(self):
        position = rescale_position(58, 0.32, 2)
        assert position == ReadingPosition(page=1, progress=0.5)

    def test_at_least_first_page(self):
        assert rescale_position(1, 0.01, 5).page == 1

    def test_finished_book_stays_finished(self):
        assert rescale_position(4, 1.0, 9) == ReadingPosition(page=9, progress=1.0)

    def test_out_of_range_progress(self):
        assert rescale_position(7, 3.5, 4).page == 4
