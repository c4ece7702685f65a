"""
Multipart form container.
"""

from __future__ import annotations

from typing import Iterator, NamedTuple, Optional, Union

from payload_store.models.blob import Blob

FieldValue = Union[str, Blob]


class FormEntry(NamedTuple):
    name: str
    value: FieldValue
    filename: Optional[str] = None


class FormData:
    """Ordered multipart fields. A name may repeat.

    ``text_parts`` names the blob fields that hold text rather than files.
    An empty text field and an empty file look the same once stored, so the
    distinction has to travel with the container.
    """

    def __init__(self, text_parts: Optional[set[str]] = None) -> None:
        self._entries: list[FormEntry] = []
        self.text_parts: set[str] = set(text_parts) if text_parts else set()

    def append(self, name: str, value: FieldValue, filename: Optional[str] = None) -> None:
        if isinstance(value, str):
            if filename is not None:
                raise TypeError(f"filename given for text field {name!r}")
        elif not isinstance(value, Blob):
            raise TypeError(f"Field {name!r} must be str or Blob, got {type(value).__name__}")
        self._entries.append(FormEntry(name, value, filename))

    def entries(self) -> Iterator[FormEntry]:
        return iter(list(self._entries))

    def get(self, name: str) -> Optional[FieldValue]:
        for entry in self._entries:
            if entry.name == name:
                return entry.value
        return None

    def get_all(self, name: str) -> list[FieldValue]:
        return [entry.value for entry in self._entries if entry.name == name]

    def keys(self) -> list[str]:
        return [entry.name for entry in self._entries]

    def __iter__(self) -> Iterator[FormEntry]:
        return self.entries()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, name: object) -> bool:
        return any(entry.name == name for entry in self._entries)

    def __repr__(self) -> str:
        return f"FormData(fields={self.keys()!r}, text_parts={sorted(self.text_parts)!r})"
