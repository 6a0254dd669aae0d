"""Best-effort cover image lookup."""

from __future__ import annotations

import base64
import logging
from typing import Optional

from .archive import ArchiveReader
from .errors import ArchiveError
from .package import ManifestItem, Package

log = logging.getLogger(__name__)


def find_cover_item(package: Package) -> Optional[ManifestItem]:
    images = [item for item in package.manifest.values() if item.is_image]
    for item in images:
        if "cover" in item.id.lower() or "cover" in item.href.lower():
            return item
    for item in images:
        if "cover-image" in item.properties:
            return item
    if package.cover_id:
        item = package.manifest.get(package.cover_id)
        if item is not None and item.is_image:
            return item
    return None


def to_data_uri(media_type: str, payload: bytes) -> str:
    return f"data:{media_type};base64,{base64.b64encode(payload).decode('ascii')}"


async def resolve_cover(archive: ArchiveReader, package: Package) -> Optional[str]:
    """Return the cover as a self-contained data URI, or None."""
    item = find_cover_item(package)
    if item is None:
        return None

    path = package.resolve(item.href)
    entry = archive.entry(path)
    if entry is None:
        log.debug("Cover %s not present in archive", path)
        return None
    try:
        payload = await entry.read_bytes()
    except ArchiveError as e:
        log.warning("Failed to extract cover image %s: %s", path, e)
        return None
    if not payload:
        return None
    return to_data_uri(item.media_type, payload)
