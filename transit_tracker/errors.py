"""
Error types for the transit project pipeline.

Read-path failures (store down, bad geometry file) are absorbed by the
fallback chain and only logged. Write-path failures are raised to the caller.
"""

from typing import Optional


class TransitTrackerError(Exception):
    """Base exception for transit tracker errors."""
    pass


class StoreError(TransitTrackerError):
    """Exception for remote project store failures."""
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class StoreWriteError(StoreError):
    """An explicit create/update/delete against the store failed."""
    pass


class GeometryFileError(TransitTrackerError):
    """A static geometry file could not be fetched or parsed."""
    def __init__(self, message: str, filename: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.filename = filename
        self.status_code = status_code
