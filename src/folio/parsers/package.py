"""Typed view of the OPF package document: metadata, manifest and spine."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass, field
from typing import Optional
from urllib.parse import unquote

from lxml import etree

from .archive import ArchiveReader
from .errors import InvalidEpub

DC_NS = "http://purl.org/dc/elements/1.1/"

_XML_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)


@dataclass
class Metadata:
    title: str = ""
    author: str = ""


@dataclass
class ManifestItem:
    id: str
    href: str
    media_type: str
    properties: frozenset[str] = frozenset()

    @property
    def is_html(self) -> bool:
        return "html" in self.media_type.lower()

    @property
    def is_image(self) -> bool:
        return self.media_type.lower().startswith("image/")


@dataclass
class Package:
    """Parsed OPF document."""

    metadata: Metadata
    manifest: dict[str, ManifestItem] = field(default_factory=dict)
    spine: list[str] = field(default_factory=list)
    opf_path: str = ""
    cover_id: Optional[str] = None  # EPUB 2 <meta name="cover">

    @property
    def base_dir(self) -> str:
        return self.opf_path[: self.opf_path.rfind("/") + 1]

    def resolve(self, href: str) -> str:
        """Archive entry name for a manifest href relative to the OPF."""
        href = unquote(href.split("#", 1)[0])
        return posixpath.normpath(self.base_dir + href)


def _local(tag: str) -> str:
    return f"//*[local-name()='{tag}']"


def _text(node: etree._Element) -> str:
    return re.sub(r"\s+", " ", node.xpath("string()")).strip()


def _first_text(root: etree._Element, name: str) -> str:
    # Namespace-qualified Dublin Core element wins over a bare local name.
    for nodes in (
        root.xpath("//dc:" + name, namespaces={"dc": DC_NS}),
        root.xpath(_local(name)),
    ):
        if nodes:
            return _text(nodes[0])
    return ""


def parse_package(raw: bytes, opf_path: str = "") -> Package:
    try:
        root = etree.fromstring(raw, parser=_XML_PARSER)
    except etree.XMLSyntaxError as e:
        raise InvalidEpub("malformed OPF") from e

    metadata = Metadata(
        title=_first_text(root, "title"),
        author=_first_text(root, "creator"),
    )

    manifest: dict[str, ManifestItem] = {}
    for item in root.xpath(_local("manifest") + "/*[local-name()='item']"):
        item_id = item.get("id")
        href = item.get("href")
        media_type = item.get("media-type")
        if not (item_id and href and media_type):
            continue
        manifest[item_id] = ManifestItem(
            id=item_id,
            href=href,
            media_type=media_type,
            properties=frozenset((item.get("properties") or "").split()),
        )

    spine: list[str] = []
    for itemref in root.xpath(_local("spine") + "/*[local-name()='itemref']"):
        idref = itemref.get("idref")
        if idref:
            spine.append(idref)

    cover_id = None
    for meta in root.xpath(_local("meta")):
        if meta.get("name") == "cover" and meta.get("content"):
            cover_id = meta.get("content")
            break

    return Package(
        metadata=metadata,
        manifest=manifest,
        spine=spine,
        opf_path=opf_path,
        cover_id=cover_id,
    )


async def load_package(archive: ArchiveReader, opf_path: str) -> Package:
    entry = archive.entry(opf_path)
    if entry is None:
        raise InvalidEpub("OPF file not found")
    return parse_package(await entry.read_bytes(), opf_path)
