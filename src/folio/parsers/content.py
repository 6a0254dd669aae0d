"""Plain-text extraction of the spine documents, in reading order."""

from __future__ import annotations

import logging
import re
import warnings
from dataclasses import dataclass, field

from bs4 import BeautifulSoup, XMLParsedAsHTMLWarning
from bs4.element import NavigableString, PreformattedString, Tag

from .archive import ArchiveReader
from .errors import InvalidEpub
from .package import Package

warnings.filterwarnings("ignore", category=XMLParsedAsHTMLWarning)

log = logging.getLogger(__name__)

PARAGRAPH_SEPARATOR = "\n\n"

_BLOCK_TAGS = frozenset(
    [
        "p", "div", "h1", "h2", "h3", "h4", "h5", "h6", "li", "blockquote", "pre",
        "section", "article", "header", "footer", "aside", "nav", "main",
        "figure", "figcaption", "address", "hr",
        "ul", "ol", "dl", "dt", "dd",
        "table", "caption", "tr", "td", "th",
    ]
)
_SENTENCE_END = re.compile(r"(?<=\.)\s+")


@dataclass
class SkippedItem:
    item_id: str
    href: str
    reason: str


@dataclass
class ExtractionResult:
    text: str
    skipped: list[SkippedItem] = field(default_factory=list)


def _collapse(text: str) -> str:
    return re.sub(r"\s+", " ", text).strip()


class _ParagraphWalker:
    """Collects every text node in document order, breaking at blocks."""

    def __init__(self) -> None:
        self.paragraphs: list[str] = []
        self._pending: list[str] = []

    def _flush(self) -> None:
        text = _collapse("".join(self._pending))
        if text:
            self.paragraphs.append(text)
        self._pending = []

    def collect(self, body: Tag) -> list[str]:
        self._walk(body)
        self._flush()
        return self.paragraphs

    def _walk(self, node: Tag) -> None:
        for child in node.children:
            if isinstance(child, PreformattedString):
                # comments, CDATA, doctypes
                continue
            if isinstance(child, NavigableString):
                self._pending.append(str(child))
            elif child.name == "br":
                self._flush()
            elif child.name in _BLOCK_TAGS:
                self._flush()
                self._walk(child)
                self._flush()
            else:
                self._walk(child)


def html_to_paragraphs(html: str) -> list[str]:
    soup = BeautifulSoup(html, "lxml")

    for tag in soup.find_all(["script", "style"]):
        tag.decompose()

    body = soup.body or soup
    if body.find(list(_BLOCK_TAGS | {"br"})):
        paragraphs = _ParagraphWalker().collect(body)
    else:
        # No block structure left: a period followed by whitespace ends a
        # paragraph. This is an approximation, not real paragraph detection.
        text = _collapse(body.get_text(separator=" "))
        paragraphs = [p for p in _SENTENCE_END.split(text) if p]

    return paragraphs


async def extract_content(archive: ArchiveReader, package: Package) -> ExtractionResult:
    """Concatenate the text of every HTML spine document.

    A document that cannot be read is recorded in ``skipped`` and the walk
    continues with the next spine entry.
    """
    chunks: list[str] = []
    skipped: list[SkippedItem] = []

    for item_id in package.spine:
        item = package.manifest.get(item_id)
        if item is None:
            skipped.append(SkippedItem(item_id, "", "not in manifest"))
            continue
        if not item.is_html:
            skipped.append(SkippedItem(item_id, item.href, "not an HTML document"))
            continue

        path = package.resolve(item.href)
        entry = archive.entry(path)
        if entry is None:
            log.warning("Spine item %s points to missing entry %s", item_id, path)
            skipped.append(SkippedItem(item_id, item.href, "missing from archive"))
            continue

        try:
            html = await entry.read_text()
            paragraphs = html_to_paragraphs(html)
        except Exception as e:
            log.warning("Failed to extract %s: %s", path, e)
            skipped.append(SkippedItem(item_id, item.href, str(e)))
            continue

        if paragraphs:
            chunks.append(PARAGRAPH_SEPARATOR.join(paragraphs))

    text = PARAGRAPH_SEPARATOR.join(chunks).strip()
    if not text:
        raise InvalidEpub("no content")
    return ExtractionResult(text=text, skipped=skipped)
