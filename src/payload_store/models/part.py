"""
Part record, the storable form of one multipart field.
"""

from typing import Any, Optional
from pydantic import BaseModel, ConfigDict, Field


class PartRecord(BaseModel):
    """One multipart field as persisted: ``{name, value, isFile, fileName?, type?}``"""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    value: str
    is_file: bool = Field(False, alias="isFile")
    file_name: Optional[str] = Field(None, alias="fileName")
    type: Optional[str] = None           # media type of a blob-as-text field
    is_text_blob: Optional[bool] = Field(None, alias="isTextBlob")  # legacy records only

    @property
    def is_text_blob_field(self) -> bool:
        return not self.is_file and (self.type is not None or bool(self.is_text_blob))

    def to_storable(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
