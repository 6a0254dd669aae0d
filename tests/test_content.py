"""Tests for spine text extraction."""

from __future__ import annotations

import pytest

from folio.parsers.archive import ArchiveReader
from folio.parsers.container import resolve_opf_path
from folio.parsers.content import extract_content, html_to_paragraphs
from folio.parsers.errors import InvalidEpub
from folio.parsers.package import load_package


async def _extract(data: bytes):
    archive = ArchiveReader(data)
    package = await load_package(archive, await resolve_opf_path(archive))
    return await extract_content(archive, package)


class TestHtmlToParagraphs:
    def test_block_elements(self):
        html = "<html><body><h1>Title</h1><p>First.</p><p>Second.</p></body></html>"
        assert html_to_paragraphs(html) == ["Title", "First.", "Second."]

    def test_whitespace_collapsed(self):
        html = "<body><p>Hello,\n     world.\t</p></body>"
        assert html_to_paragraphs(html) == ["Hello, world."]

    def test_script_and_style_dropped(self):
        html = (
            "<html><head><style>p { color: red; }</style></head><body>"
            "<script>var x = 1;</script><p>Visible.</p></body></html>"
        )
        assert html_to_paragraphs(html) == ["Visible."]

    def test_nested_blocks_use_innermost(self):
        html = "<body><div><p>Inner one.</p><p>Inner two.</p></div></body>"
        assert html_to_paragraphs(html) == ["Inner one.", "Inner two."]

    def test_flat_text_splits_on_sentence_end(self):
        html = "<body>One sentence. Two sentence.   Three without end</body>"
        assert html_to_paragraphs(html) == [
            "One sentence.",
            "Two sentence.",
            "Three without end",
        ]

    def test_empty_body(self):
        assert html_to_paragraphs("<html><body>   </body></html>") == []

    def test_loose_body_text_kept(self):
        html = (
            "<body><h1>Chapter One</h1>It was a dark and stormy night."
            "<br/>The rain fell.</body>"
        )
        assert html_to_paragraphs(html) == [
            "Chapter One",
            "It was a dark and stormy night.",
            "The rain fell.",
        ]

    def test_lead_text_before_child_block(self):
        html = "<body><div>Lead text here.<p>Child para.</p>Tail text.</div></body>"
        assert html_to_paragraphs(html) == ["Lead text here.", "Child para.", "Tail text."]

    def test_table_cells(self):
        html = (
            "<body><p>Intro.</p><table><tr><td>Cell text.</td>"
            "<td>Other cell.</td></tr></table></body>"
        )
        assert html_to_paragraphs(html) == ["Intro.", "Cell text.", "Other cell."]

    def test_definition_lists_and_spans(self):
        html = (
            "<body><dl><dt>Term</dt><dd>Meaning.</dd></dl>"
            "<span>Loose</span> <span>span run.</span></body>"
        )
        assert html_to_paragraphs(html) == ["Term", "Meaning.", "Loose span run."]

    def test_inline_markup_does_not_split_words(self):
        html = "<body><p><i>H</i>ello <b>world</b>.</p><!-- note --></body>"
        assert html_to_paragraphs(html) == ["Hello world."]


class TestExtractContent:
    @pytest.mark.asyncio
    async def test_spine_order_and_separators(self, make_epub):
        data = make_epub(
            chapters={
                "a.xhtml": "<p>Alpha one.</p><p>Alpha two.</p>",
                "b.xhtml": "<p>Beta.</p>",
            },
            spine=["ch2", "ch1"],
        )
        result = await _extract(data)
        assert result.text == "Beta.\n\nAlpha one.\n\nAlpha two."
        assert result.skipped == []

    @pytest.mark.asyncio
    async def test_non_html_spine_item_skipped(self, make_epub):
        data = make_epub(
            chapters={"a.xhtml": "<p>Text.</p>"},
            extra_manifest=[("css", "style.css", "text/css")],
            extra_files={"style.css": "p { margin: 0 }"},
            spine=["ch1", "css"],
        )
        result = await _extract(data)
        assert result.text == "Text."
        assert [s.item_id for s in result.skipped] == ["css"]

    @pytest.mark.asyncio
    async def test_missing_manifest_and_entry_recorded(self, make_epub):
        data = make_epub(
            chapters={"a.xhtml": "<p>Present.</p>"},
            extra_manifest=[("gone", "gone.xhtml", "application/xhtml+xml")],
            spine=["ghost", "ch1", "gone"],
        )
        result = await _extract(data)
        assert result.text == "Present."
        reasons = {s.item_id: s.reason for s in result.skipped}
        assert reasons == {"ghost": "not in manifest", "gone": "missing from archive"}

    @pytest.mark.asyncio
    async def test_undecodable_document_skipped(self, make_epub):
        data = make_epub(
            chapters={"good.xhtml": "<p>Readable.</p>"},
            extra_manifest=[("bad", "bad.xhtml", "application/xhtml+xml")],
            extra_files={"bad.xhtml": b"<p>\xff\xfe broken</p>"},
            spine=["bad", "ch1"],
        )
        result = await _extract(data)
        assert result.text == "Readable."
        assert len(result.skipped) == 1
        assert result.skipped[0].item_id == "bad"
        assert result.skipped[0].href == "bad.xhtml"

    @pytest.mark.asyncio
    async def test_text_outside_paragraphs_extracted(self, make_epub):
        data = make_epub(chapters={"c.xhtml": "<h1>One</h1>Body text without paragraphs."})
        result = await _extract(data)
        assert result.text == "One\n\nBody text without paragraphs."

    @pytest.mark.asyncio
    async def test_no_content(self, make_epub):
        data = make_epub(chapters={"empty.xhtml": "<script>only()</script>"})
        with pytest.raises(InvalidEpub, match="no content"):
            await _extract(data)

    @pytest.mark.asyncio
    async def test_empty_spine(self, make_epub):
        data = make_epub(chapters={"a.xhtml": "<p>Unreferenced.</p>"}, spine=[])
        with pytest.raises(InvalidEpub, match="no content"):
            await _extract(data)
