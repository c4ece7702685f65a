"""
Blob values: immutable, typed binary content carried by a request payload.
"""

import asyncio
import mimetypes
import os
from pathlib import Path
from typing import Union

from payload_store.errors import BlobReadError


class Blob:
    """In-memory binary value with a media type."""

    __slots__ = ("_data", "type")

    def __init__(self, data: Union[bytes, bytearray, str] = b"", type: str = ""):
        if isinstance(data, str):
            data = data.encode("utf-8")
        self._data = bytes(data)
        self.type = type

    @property
    def size(self) -> int:
        return len(self._data)

    async def read(self) -> bytes:
        return self._data

    async def text(self) -> str:
        return (await self.read()).decode("utf-8")

    def __eq__(self, other: object) -> bool:
        if type(other) is not Blob or type(self) is not Blob:
            return NotImplemented
        return self._data == other._data and self.type == other.type

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        return f"Blob(size={self.size}, type={self.type!r})"


class PathBlob(Blob):
    """File-backed blob. Content is read in full on each ``read()``."""

    __slots__ = ("path",)

    def __init__(self, path: Union[str, os.PathLike], type: str = ""):
        self.path = Path(path)
        if not type:
            type = mimetypes.guess_type(self.path.name)[0] or ""
        super().__init__(b"", type)

    @property
    def size(self) -> int:
        return self.path.stat().st_size

    async def read(self) -> bytes:
        try:
            return await asyncio.to_thread(self.path.read_bytes)
        except OSError as e:
            raise BlobReadError(f"Unable to read blob from {self.path}: {e}", details={"path": str(self.path)}) from e

    def __repr__(self) -> str:
        return f"PathBlob(path={str(self.path)!r}, type={self.type!r})"
