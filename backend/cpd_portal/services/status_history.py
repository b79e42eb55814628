from __future__ import annotations
from typing import Optional
from cpd_portal.models.base import isoformat_utc
from cpd_portal.models.vendor_request import VendorRequest, StatusHistory


def add_status_history(request: VendorRequest, status: str, changed_by: str, notes: Optional[str] = None) -> StatusHistory:
    """Append a status history entry to the request within the current DB session.

    Parameters:
      request: the VendorRequest whose status changed (may still be pending insert)
      status: the new status value
      changed_by: identity-provider user id of the actor
      notes: optional free text
    """
    entry = StatusHistory(status=status, changed_by=changed_by, notes=notes)
    request.status_history.append(entry)
    # No commit here; caller's transaction boundary controls durability.
    return entry


def history_json(entry: StatusHistory):
    return {
        'id': entry.id,
        'request_id': entry.request_id,
        'status': entry.status,
        'changed_by': entry.changed_by,
        'notes': entry.notes,
        'created_at': isoformat_utc(entry.created_at),
    }

__all__ = ['add_status_history', 'history_json']
