"""Locate the OPF package document through META-INF/container.xml."""

from __future__ import annotations

from lxml import etree

from .archive import ArchiveReader
from .errors import InvalidEpub

CONTAINER_PATH = "META-INF/container.xml"

_XML_PARSER = etree.XMLParser(resolve_entities=False, no_network=True)


def parse_container(raw: bytes) -> str:
    """Return the ``full-path`` of the first ``rootfile`` element."""
    try:
        root = etree.fromstring(raw, parser=_XML_PARSER)
    except etree.XMLSyntaxError as e:
        raise InvalidEpub("rootfile missing") from e

    rootfiles = root.xpath("//*[local-name()='rootfile']")
    if not rootfiles:
        raise InvalidEpub("rootfile missing")
    full_path = (rootfiles[0].get("full-path") or "").strip()
    if not full_path:
        raise InvalidEpub("rootfile missing")
    return full_path


async def resolve_opf_path(archive: ArchiveReader) -> str:
    entry = archive.entry(CONTAINER_PATH)
    if entry is None:
        raise InvalidEpub("container.xml not found")
    return parse_container(await entry.read_bytes())
