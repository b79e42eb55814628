"""Vendor request lifecycle: list, get, create, update and withdraw.

Every query is filtered by the caller's vendor id, so a row owned by another
vendor is indistinguishable from a missing one (both 404).

Known race: an update and a withdraw on the same row can both observe
`pending` and both commit; the later write wins. Both actions come from the
owning vendor, so no row locking is applied.
"""
from __future__ import annotations
from typing import Any, List, Optional

from flask import abort, current_app
from sqlalchemy import select

from cpd_portal.auth import AuthContext
from cpd_portal.models.base import isoformat_utc
from cpd_portal.models.vendor import Vendor
from cpd_portal.models.vendor_request import VendorRequest
from cpd_portal.schemas.vendor_requests import parse_create_payload, parse_update_payload
from cpd_portal.services.status_history import add_status_history, history_json
from cpd_portal.utils.fsm import TransitionValidator
from cpd_portal.utils.validation import validate_date_order, validate_status

# approve/reject are driven by the administrative workflow, never by this API
REQUEST_FSM = TransitionValidator({
    VendorRequest.STATUS_PENDING: {
        VendorRequest.STATUS_WITHDRAWN,
        VendorRequest.STATUS_APPROVED,
        VendorRequest.STATUS_REJECTED,
    },
    VendorRequest.STATUS_APPROVED: set(),
    VendorRequest.STATUS_REJECTED: set(),
    VendorRequest.STATUS_WITHDRAWN: set(),
})


def list_requests(session, vendor: Vendor, status: Optional[str] = None) -> List[VendorRequest]:
    q = select(VendorRequest).where(VendorRequest.vendor_id == vendor.id)
    if status:
        q = q.where(VendorRequest.status == validate_status(status, VendorRequest.ALL_STATUSES))
    q = q.order_by(VendorRequest.created_at.desc(), VendorRequest.id.desc())
    return list(session.execute(q).scalars())


def get_request(session, vendor: Vendor, request_id: str) -> VendorRequest:
    row = session.execute(
        select(VendorRequest).where(VendorRequest.id == request_id, VendorRequest.vendor_id == vendor.id)
    ).scalar_one_or_none()
    if row is None:
        abort(404, description='Request not found')
    return row


def create_request(session, auth: AuthContext, vendor: Vendor, data: Any, notifier=None) -> VendorRequest:
    payload = parse_create_payload(data)
    row = VendorRequest(
        vendor_id=vendor.id,
        event_name=payload.event_name,
        event_start_date=payload.event_start_date,
        event_end_date=payload.event_end_date,
        expected_cpd_points=payload.expected_cpd_points,
        # vendor record wins; client values only fill gaps
        vendor_company_name=vendor.company_name or payload.vendor_company_name,
        contact_name=vendor.contact_name or payload.contact_name,
        contact_email=vendor.contact_email or payload.contact_email,
        contact_phone=vendor.contact_phone or payload.contact_phone,
        poster_file_url=payload.poster_file_url,
        expected_promotion_date=payload.expected_promotion_date,
        status=VendorRequest.STATUS_PENDING,
    )
    session.add(row)
    add_status_history(row, VendorRequest.STATUS_PENDING, auth.user_id)
    session.commit()
    if notifier is not None:
        try:
            notifier.request_created(row)
        except Exception:
            current_app.logger.exception('Notification failed for request %s', row.id)
    return row


def update_request(session, vendor: Vendor, request_id: str, data: Any) -> VendorRequest:
    row = get_request(session, vendor, request_id)
    if row.status != VendorRequest.STATUS_PENDING:
        abort(403, description='Can only update pending requests')
    changes = parse_update_payload(data).changes()
    validate_date_order(
        changes.get('event_start_date', row.event_start_date),
        changes.get('event_end_date', row.event_end_date),
    )
    for field, value in changes.items():
        setattr(row, field, value)
    session.commit()
    return row


def withdraw_request(session, auth: AuthContext, vendor: Vendor, request_id: str) -> VendorRequest:
    row = get_request(session, vendor, request_id)
    REQUEST_FSM.assert_can_transition(row.status, VendorRequest.STATUS_WITHDRAWN, action='withdraw')
    row.status = VendorRequest.STATUS_WITHDRAWN
    add_status_history(row, VendorRequest.STATUS_WITHDRAWN, auth.user_id)
    session.commit()
    return row


def request_json(row: VendorRequest, include_history: bool = False):
    body = {
        'id': row.id,
        'vendor_id': row.vendor_id,
        'event_name': row.event_name,
        'event_start_date': isoformat_utc(row.event_start_date),
        'event_end_date': isoformat_utc(row.event_end_date),
        'expected_cpd_points': float(row.expected_cpd_points) if row.expected_cpd_points is not None else None,
        'vendor_company_name': row.vendor_company_name,
        'contact_name': row.contact_name,
        'contact_email': row.contact_email,
        'contact_phone': row.contact_phone,
        'poster_file_url': row.poster_file_url,
        'expected_promotion_date': isoformat_utc(row.expected_promotion_date),
        'status': row.status,
        'admin_notes': row.admin_notes,
        'rejection_reason': row.rejection_reason,
        'approved_by': row.approved_by,
        'approved_at': isoformat_utc(row.approved_at),
        'attendance_file_url': row.attendance_file_url,
        'attendance_uploaded_at': isoformat_utc(row.attendance_uploaded_at),
        'created_at': isoformat_utc(row.created_at),
        'updated_at': isoformat_utc(row.updated_at),
    }
    if include_history:
        body['vendor_request_status_history'] = [history_json(h) for h in row.status_history]
    return body

__all__ = [
    'REQUEST_FSM', 'list_requests', 'get_request', 'create_request',
    'update_request', 'withdraw_request', 'request_json',
]
