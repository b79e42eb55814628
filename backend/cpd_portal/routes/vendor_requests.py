from __future__ import annotations
from flask import Blueprint, request, current_app
from cpd_portal import get_db
from cpd_portal.auth import AuthContext
from cpd_portal.decorators.auth import require_auth
from cpd_portal.services.vendors import resolve_vendor
from cpd_portal.services.vendor_requests import (
    list_requests, get_request, create_request, update_request, withdraw_request, request_json,
)

requests_bp = Blueprint('vendor_requests', __name__)


@requests_bp.get('/vendor-requests')
@require_auth
def list_vendor_requests(auth: AuthContext):
    session = get_db()
    vendor = resolve_vendor(session, auth)
    rows = list_requests(session, vendor, request.args.get('status'))
    return [request_json(r) for r in rows]


@requests_bp.get('/vendor-requests/<request_id>')
@require_auth
def get_vendor_request(request_id: str, auth: AuthContext):
    session = get_db()
    vendor = resolve_vendor(session, auth)
    row = get_request(session, vendor, request_id)
    return request_json(row, include_history=True)


@requests_bp.post('/vendor-requests')
@require_auth
def create_vendor_request(auth: AuthContext):
    session = get_db()
    vendor = resolve_vendor(session, auth)
    row = create_request(
        session, auth, vendor, request.get_json(silent=True),
        notifier=current_app.extensions['notifier'],
    )
    return request_json(row), 201


@requests_bp.patch('/vendor-requests/<request_id>')
@require_auth
def update_vendor_request(request_id: str, auth: AuthContext):
    session = get_db()
    vendor = resolve_vendor(session, auth)
    row = update_request(session, vendor, request_id, request.get_json(silent=True))
    return request_json(row)


@requests_bp.delete('/vendor-requests/<request_id>')
@require_auth
def withdraw_vendor_request(request_id: str, auth: AuthContext):
    session = get_db()
    vendor = resolve_vendor(session, auth)
    row = withdraw_request(session, auth, vendor, request_id)
    return request_json(row)
