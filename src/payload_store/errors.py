"""
payload-store error types.
"""

from typing import Any, Optional


class PayloadStoreError(Exception):
    def __init__(self, code: str, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.code = code
        self.details = details


class BlobReadError(PayloadStoreError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("blob_read_error", message, details)


class DataURLFormatError(PayloadStoreError, ValueError):
    def __init__(self, message: str, code: str = "data_url_format_error"):
        super().__init__(code, message)


class PayloadRestoreError(PayloadStoreError):
    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__("payload_restore_error", message, details)
