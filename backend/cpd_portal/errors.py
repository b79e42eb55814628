from __future__ import annotations
from typing import Optional
from werkzeug.exceptions import BadRequest, Forbidden


class ValidationError(BadRequest):
    """400 raised for rejected input; `details` is surfaced next to `error`."""

    def __init__(self, description: str, details: Optional[str] = None):
        super().__init__(description=description)
        self.details = details


class VendorRecordMissing(Forbidden):
    """Authenticated caller has no vendor row. Clients key their guidance off this message."""
    description = 'Vendor record not found'
    details = 'No vendor record found for this user'


class StorageError(Exception):
    """Object store rejected or failed an upload."""


class EmailDeliveryError(Exception):
    """Email provider returned a non-success response."""

__all__ = ['ValidationError', 'VendorRecordMissing', 'StorageError', 'EmailDeliveryError']
