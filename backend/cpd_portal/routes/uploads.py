from __future__ import annotations
from flask import Blueprint, request, current_app, abort, send_file
from cpd_portal import get_db
from cpd_portal.auth import AuthContext
from cpd_portal.decorators.auth import require_auth
from cpd_portal.services.storage import LocalObjectStore
from cpd_portal.services.uploads import store_poster, store_attendance
from cpd_portal.services.vendors import resolve_vendor
from cpd_portal.services.vendor_requests import request_json
from cpd_portal.errors import ValidationError, StorageError

uploads_bp = Blueprint('uploads', __name__)


@uploads_bp.post('/vendor-upload-poster')
@require_auth
def upload_poster(auth: AuthContext):
    vendor = resolve_vendor(get_db(), auth)
    url = store_poster(
        vendor,
        request.files.get('file'),
        current_app.extensions['object_store'],
        current_app.config['POSTER_BUCKET'],
        current_app.config['MAX_UPLOAD_BYTES'],
    )
    return {'success': True, 'fileUrl': url}


@uploads_bp.post('/vendor-upload')
@require_auth
def upload_attendance(auth: AuthContext):
    session = get_db()
    vendor = resolve_vendor(session, auth)
    request_id = request.form.get('requestId')
    if not request_id:
        raise ValidationError('Request ID required')
    url, row = store_attendance(
        session,
        vendor,
        request_id,
        request.files.get('file'),
        current_app.extensions['object_store'],
        current_app.config['ATTENDANCE_BUCKET'],
        current_app.config['MAX_UPLOAD_BYTES'],
    )
    return {'success': True, 'fileUrl': url, 'request': request_json(row)}


@uploads_bp.get('/storage/<bucket>/<path:path>')
def serve_local_object(bucket: str, path: str):
    # Public URLs of the filesystem backend resolve here; other backends serve their own
    store = current_app.extensions['object_store']
    if not isinstance(store, LocalObjectStore):
        abort(404)
    try:
        target = store.local_path(bucket, path)
        return send_file(target)
    except (StorageError, FileNotFoundError, IsADirectoryError):
        abort(404)
