"""In-memory access to the ZIP container of an EPUB."""

from __future__ import annotations

import asyncio
import io
import zipfile
import zlib
from typing import Optional

from .errors import ArchiveError


class ArchiveEntry:
    """A single stored member of an archive."""

    def __init__(self, zf: zipfile.ZipFile, info: zipfile.ZipInfo) -> None:
        self._zf = zf
        self._info = info

    @property
    def name(self) -> str:
        return self._info.filename

    def as_bytes(self) -> bytes:
        try:
            return self._zf.read(self._info)
        # RuntimeError: encrypted member; NotImplementedError: unknown codec
        except (
            zipfile.BadZipFile,
            zlib.error,
            EOFError,
            RuntimeError,
            NotImplementedError,
        ) as e:
            raise ArchiveError(f"corrupt entry {self.name}: {e}") from e

    def as_text(self, encoding: str = "utf-8") -> str:
        return self.as_bytes().decode(encoding)

    async def read_bytes(self) -> bytes:
        await asyncio.sleep(0)
        return self.as_bytes()

    async def read_text(self, encoding: str = "utf-8") -> str:
        await asyncio.sleep(0)
        return self.as_text(encoding)


class ArchiveReader:
    """Named-entry lookup over an EPUB held in memory.

    Lookups are exact: names are case-sensitive and slash-delimited, as they
    are stored in the central directory.
    """

    def __init__(self, data: bytes) -> None:
        try:
            self._zf = zipfile.ZipFile(io.BytesIO(data))
        except (zipfile.BadZipFile, zipfile.LargeZipFile, EOFError, OSError) as e:
            raise ArchiveError(f"not a ZIP container: {e}") from e
        self._index = {info.filename: info for info in self._zf.infolist()}

    def names(self) -> list[str]:
        return list(self._index)

    def entry(self, path: str) -> Optional[ArchiveEntry]:
        info = self._index.get(path)
        if info is None or info.is_dir():
            return None
        return ArchiveEntry(self._zf, info)

    def close(self) -> None:
        self._zf.close()

    def __enter__(self) -> ArchiveReader:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
