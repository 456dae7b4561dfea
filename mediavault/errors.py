# Filename: mediavault/errors.py
from typing import Dict, Optional
from fastapi import status


class MediaVaultError(Exception):
    """Base error rendered as ``{"error": message}`` with ``status_code``."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, headers: Optional[Dict[str, str]] = None):
        self.message = message or self.default_message
        self.headers = headers
        super().__init__(self.message)


class MissingFile(MediaVaultError):
    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "No file provided"


class FileTooLarge(MediaVaultError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, limit_bytes: int):
        self.limit_bytes = limit_bytes
        super().__init__(f"File too large. Limit is {limit_bytes // (1024 * 1024)}MB")


class UnsupportedType(MediaVaultError):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Extension {extension or '(none)'} not allowed")


class InvalidFilename(MediaVaultError):
    """Raised for names that could escape the storage root."""

    status_code = status.HTTP_400_BAD_REQUEST
    default_message = "Invalid filename"


class StoredFileNotFound(MediaVaultError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "File not found"


class RangeNotSatisfiable(MediaVaultError):
    status_code = status.HTTP_416_RANGE_NOT_SATISFIABLE
    default_message = "Requested range not satisfiable"

    def __init__(self, total_size: int):
        self.total_size = total_size
        super().__init__(headers={"Content-Range": f"bytes */{total_size}"})


class ServerError(MediaVaultError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
