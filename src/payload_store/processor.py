"""
Request payload processor.

Turns a live request payload into something a JSON document store can hold,
and back:

- ``FormData`` payload  <->  ``multipart``: list of part records
- ``Blob`` payload      <->  ``blob``: data URL string
- string or no payload  ->   stored as is

Both directions return a shallow copy when they change anything; the
caller's envelope is left alone.
"""

import logging
from typing import Any, Optional

from pydantic import ValidationError

from payload_store.codec import data_url
from payload_store.codec.multipart import decode_multipart, encode_multipart
from payload_store.config import ProcessorConfig, RestorePolicy
from payload_store.errors import DataURLFormatError, PayloadRestoreError
from payload_store.models.blob import Blob
from payload_store.models.form import FormData

logger = logging.getLogger(__name__)

PAYLOAD = "payload"
BLOB = "blob"
MULTIPART = "multipart"


def is_storable(envelope: dict[str, Any]) -> bool:
    """True when the envelope holds no live binary payload."""
    payload = envelope.get(PAYLOAD)
    return payload is None or isinstance(payload, str)


async def to_storable(envelope: dict[str, Any]) -> dict[str, Any]:
    """Replace a Blob or FormData payload with its storable form.

    Raises ``BlobReadError`` if any blob in the payload cannot be read.
    """
    payload = envelope.get(PAYLOAD)
    if payload is None or isinstance(payload, str):
        return envelope

    if isinstance(payload, FormData):
        data = dict(envelope)
        del data[PAYLOAD]
        records = await encode_multipart(payload)
        if records is not None:
            data[MULTIPART] = [record.to_storable() for record in records]
        return data

    if isinstance(payload, Blob):
        data = dict(envelope)
        del data[PAYLOAD]
        data[BLOB] = await data_url.encode(payload, payload.type)
        return data

    logger.debug(f"Payload of type {type(payload).__name__} left as is")
    return envelope


def from_storable(envelope: dict[str, Any], config: Optional[ProcessorConfig] = None) -> dict[str, Any]:
    """Restore ``payload`` from a stored ``multipart`` or ``blob`` field.

    A value that fails to decode is handled per ``config.restore_policy``:
    dropped with a warning (default), kept in place with a warning, or
    raised as ``PayloadRestoreError``.
    """
    if envelope.get(MULTIPART) is not None:
        field = MULTIPART
    elif envelope.get(BLOB):
        field = BLOB
    else:
        return envelope

    policy = (config or ProcessorConfig()).restore_policy
    data = dict(envelope)
    try:
        if field == MULTIPART:
            payload: Any = decode_multipart(data[MULTIPART], policy)
        else:
            payload = data_url.decode(data[BLOB])
    except (DataURLFormatError, ValidationError) as e:
        if policy is RestorePolicy.RAISE:
            raise PayloadRestoreError(f"Unable to restore payload: {e}", details={"field": field}) from e
        logger.warning(f"Unable to restore payload from {field!r}: {e}")
        if policy is RestorePolicy.DROP:
            del data[field]
        return data

    del data[field]
    data[PAYLOAD] = payload
    return data
