"""
Multipart transforms: FormData fields to storable part records and back.

Encode is sequential: each field, including its blob read, completes before
the next one starts, so the record list always matches the source order.
"""

import logging
from typing import Any, Iterable, Optional, Union

from payload_store.codec import data_url
from payload_store.config import RestorePolicy
from payload_store.errors import DataURLFormatError
from payload_store.models.blob import Blob
from payload_store.models.form import FieldValue, FormData
from payload_store.models.part import PartRecord

logger = logging.getLogger(__name__)

RecordLike = Union[PartRecord, dict[str, Any]]


async def encode_part(
    name: str, value: FieldValue, is_text_blob: bool = False, filename: Optional[str] = None,
) -> PartRecord:
    """Transform one form field into a storable record."""
    if isinstance(value, str):
        return PartRecord(name=name, value=value, is_file=False)
    if not isinstance(value, Blob):
        raise TypeError(f"Field {name!r} must be str or Blob, got {type(value).__name__}")

    media_type = data_url.primary_media_type(value.type)
    encoded = await data_url.encode(value, media_type)
    if is_text_blob:
        return PartRecord(name=name, value=encoded, is_file=False, type=media_type)
    return PartRecord(name=name, value=encoded, is_file=True, file_name=filename)


def decode_part(
    record: RecordLike, text_parts: set[str], policy: RestorePolicy = RestorePolicy.DROP,
) -> tuple[FieldValue, Optional[str]]:
    """Restore one record to ``(value, filename)``.

    Text-blob names are added to ``text_parts``. A record whose data URL does
    not decode comes back as ``""`` (``DROP``), as its raw stored string
    (``PRESERVE``), or raises (``RAISE``). A preserved value is plain text,
    so saving the form again stores it as a text field, not a file.
    """
    if not isinstance(record, PartRecord):
        record = PartRecord.model_validate(record)

    if record.is_text_blob_field:
        text_parts.add(record.name)
    elif not record.is_file:
        return record.value, None

    try:
        value: FieldValue = data_url.decode(record.value)
    except DataURLFormatError as e:
        if policy is RestorePolicy.RAISE:
            raise
        logger.warning(f"Unable to restore multipart field {record.name!r}: {e}")
        if policy is RestorePolicy.PRESERVE:
            return record.value, None
        return "", None
    return value, record.file_name if record.is_file else None


async def encode_multipart(
    form: FormData, text_parts: Optional[Iterable[str]] = None,
) -> Optional[list[PartRecord]]:
    """Encode every field of ``form`` in order.

    Returns ``None`` for a container that cannot be iterated.
    """
    entries = getattr(form, "entries", None)
    if not callable(entries):
        return None
    if text_parts is None:
        text_parts = getattr(form, "text_parts", None) or ()
    marked = set(text_parts)

    records: list[PartRecord] = []
    for name, value, filename in entries():
        records.append(await encode_part(name, value, name in marked, filename))
    return records


def decode_multipart(
    records: Optional[Iterable[RecordLike]], policy: RestorePolicy = RestorePolicy.DROP,
) -> FormData:
    """Build a new FormData from stored records. ``None`` or ``[]`` gives an empty one."""
    if records is not None and not isinstance(records, (list, tuple)):
        raise DataURLFormatError(
            f"Multipart value must be a list of part records, got {type(records).__name__}",
            code="multipart_format_error",
        )
    form = FormData()
    for record in records or ():
        part = record if isinstance(record, PartRecord) else PartRecord.model_validate(record)
        value, filename = decode_part(part, form.text_parts, policy)
        form.append(part.name, value, filename)
    return form
