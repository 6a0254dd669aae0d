"""Shared fixtures for tests."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path
from typing import Callable, Optional, Union

import pytest

from folio.config import AppConfig
from folio.library.database import Database
from folio.library.store import LibraryStore

CONTAINER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<container version="1.0" xmlns="urn:oasis:names:tc:opendocument:xmlns:container">
  <rootfiles>
    <rootfile full-path="{opf_path}" media-type="application/oebps-package+xml"/>
  </rootfiles>
</container>
"""


def xhtml(body: str, title: str = "Chapter") -> str:
    return (
        '<?xml version="1.0" encoding="utf-8"?>\n'
        '<html xmlns="http://www.w3.org/1999/xhtml">'
        f"<head><title>{title}</title></head><body>{body}</body></html>"
    )


def opf(
    manifest: list[tuple[str, str, str]],
    spine: list[str],
    title: Optional[str] = "Test Book",
    author: Optional[str] = "Test Author",
    extra_metadata: str = "",
) -> str:
    meta = '<dc:identifier id="uid">urn:uuid:test</dc:identifier>'
    if title is not None:
        meta += f"<dc:title>{title}</dc:title>"
    if author is not None:
        meta += f"<dc:creator>{author}</dc:creator>"
    items = "".join(
        f'<item id="{i}" href="{h}" media-type="{m}"/>' for i, h, m in manifest
    )
    refs = "".join(f'<itemref idref="{i}"/>' for i in spine)
    return (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<package xmlns="http://www.idpf.org/2007/opf" version="3.0" '
        'unique-identifier="uid">'
        '<metadata xmlns:dc="http://purl.org/dc/elements/1.1/">'
        f"{meta}{extra_metadata}</metadata>"
        f"<manifest>{items}</manifest><spine>{refs}</spine></package>"
    )


def zip_bytes(files: dict[str, Union[str, bytes]]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("mimetype", "application/epub+zip", compress_type=zipfile.ZIP_STORED)
        for name, data in files.items():
            zf.writestr(name, data, compress_type=zipfile.ZIP_DEFLATED)
    return buf.getvalue()


EpubFactory = Callable[..., bytes]


@pytest.fixture
def make_epub() -> EpubFactory:
    """Build an EPUB in memory from chapter bodies.

    ``chapters`` maps hrefs (relative to the OPF directory) to body HTML.
    """

    def _make(
        chapters: Optional[dict[str, str]] = None,
        title: Optional[str] = "Test Book",
        author: Optional[str] = "Test Author",
        opf_path: str = "OEBPS/content.opf",
        extra_manifest: Optional[list[tuple[str, str, str]]] = None,
        extra_files: Optional[dict[str, Union[str, bytes]]] = None,
        spine: Optional[list[str]] = None,
        extra_metadata: str = "",
        with_container: bool = True,
    ) -> bytes:
        chapters = chapters if chapters is not None else {"ch1.xhtml": "<p>Hello, world.</p>"}
        base = opf_path[: opf_path.rfind("/") + 1]
        manifest = [
            (f"ch{n}", href, "application/xhtml+xml")
            for n, href in enumerate(chapters, start=1)
        ]
        manifest += extra_manifest or []
        files: dict[str, Union[str, bytes]] = {}
        if with_container:
            files["META-INF/container.xml"] = CONTAINER_XML.format(opf_path=opf_path)
        files[opf_path] = opf(
            manifest,
            spine if spine is not None else [m[0] for m in manifest[: len(chapters)]],
            title=title,
            author=author,
            extra_metadata=extra_metadata,
        )
        for href, body in chapters.items():
            files[base + href] = xhtml(body)
        for name, data in (extra_files or {}).items():
            files[base + name] = data
        return zip_bytes(files)

    return _make


@pytest.fixture
def db(tmp_path: Path) -> Database:
    db_path = tmp_path / "test.db"
    database = Database(db_path)
    yield database
    database.close()


@pytest.fixture
def store(db: Database) -> LibraryStore:
    return LibraryStore(db)


@pytest.fixture
def config(tmp_path: Path) -> AppConfig:
    return AppConfig(
        data_dir=tmp_path / "data",
        config_dir=tmp_path / "config",
    )
