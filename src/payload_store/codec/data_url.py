"""
Data-URL codec: ``data:<media-type>;base64,<payload>``.
"""

import base64
import binascii
from typing import Optional

from payload_store.errors import DataURLFormatError
from payload_store.models.blob import Blob

DEFAULT_MEDIA_TYPE = "application/octet-stream"
_PREFIX = "data:"
_MARKER = ";base64,"


def primary_media_type(media_type: Optional[str]) -> str:
    """Strip MIME parameters: ``text/plain;charset=utf-8`` -> ``text/plain``."""
    return (media_type or "").split(";", 1)[0].strip() or DEFAULT_MEDIA_TYPE


async def encode(blob: Blob, media_type: Optional[str] = None) -> str:
    """Read ``blob`` in full and return it as a base64 data URL.

    Raises ``BlobReadError`` when the blob source cannot be read.
    """
    data = await blob.read()
    media_type = primary_media_type(media_type or blob.type)
    return f"{_PREFIX}{media_type}{_MARKER}{base64.b64encode(data).decode('ascii')}"


def parse(data_url: str) -> tuple[str, bytes]:
    """Split a data URL into its media type and decoded bytes."""
    if not isinstance(data_url, str) or not data_url.startswith(_PREFIX):
        raise DataURLFormatError("Data URL must start with 'data:'")
    head, sep, payload = data_url[len(_PREFIX):].partition(",")
    if not sep:
        raise DataURLFormatError("Data URL has no ',' separator")
    media_type, sep, params = head.partition(";")
    if not sep or params.rpartition(";")[2] != "base64":
        raise DataURLFormatError("Data URL is not base64 encoded")
    media_type = media_type.strip()
    if not media_type:
        raise DataURLFormatError("Data URL has no media type")
    try:
        data = base64.b64decode(payload, validate=True)
    except binascii.Error as e:
        raise DataURLFormatError(f"Invalid base64 payload: {e}") from e
    return media_type, data


def decode(data_url: str) -> Blob:
    media_type, data = parse(data_url)
    return Blob(data, type=media_type)
