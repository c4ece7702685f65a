"""
payload-store — persist HTTP request payloads in text-only document stores.

Blob and multipart payloads become data URLs and part records on the way in,
and are restored to live objects on the way out.
"""

from payload_store.processor import to_storable, from_storable, is_storable
from payload_store.models.blob import Blob, PathBlob
from payload_store.models.form import FormData, FormEntry
from payload_store.models.part import PartRecord
from payload_store.config import ProcessorConfig, RestorePolicy, load_config
from payload_store.errors import PayloadStoreError, BlobReadError, DataURLFormatError, PayloadRestoreError

__version__ = "0.1.0"
__all__ = [
    "to_storable",
    "from_storable",
    "is_storable",
    "Blob",
    "PathBlob",
    "FormData",
    "FormEntry",
    "PartRecord",
    "ProcessorConfig",
    "RestorePolicy",
    "load_config",
    "PayloadStoreError",
    "BlobReadError",
    "DataURLFormatError",
    "PayloadRestoreError",
]
