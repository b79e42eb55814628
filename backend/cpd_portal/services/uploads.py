"""Validation and storage of vendor uploads (event posters, attendance sheets)."""
from __future__ import annotations
import re
import time
import uuid
from typing import Iterable, Optional, Tuple

from flask import abort
from werkzeug.datastructures import FileStorage

from cpd_portal.errors import ValidationError
from cpd_portal.models.base import utcnow
from cpd_portal.models.vendor import Vendor
from cpd_portal.models.vendor_request import VendorRequest
from cpd_portal.services.storage import ObjectStore
from cpd_portal.services.vendor_requests import get_request

POSTER_CONTENT_TYPES = frozenset({'image/jpeg', 'image/jpg', 'image/png', 'image/gif', 'image/webp'})
ATTENDANCE_CONTENT_TYPES = frozenset({
    'text/csv',
    'application/csv',
    'application/vnd.ms-excel',
    'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
})
ATTENDANCE_EXTENSIONS = frozenset({'csv', 'xlsx'})
XLSX_CONTENT_TYPE = 'application/vnd.openxmlformats-officedocument.spreadsheetml.sheet'

_EXT_RE = re.compile(r'^[a-z0-9]{1,8}$')


def file_extension(filename: Optional[str]) -> Optional[str]:
    if not filename or '.' not in filename:
        return None
    ext = filename.rsplit('.', 1)[1].lower()
    return ext if _EXT_RE.match(ext) else None


def require_file(file: Optional[FileStorage]) -> FileStorage:
    if file is None or not file.filename:
        raise ValidationError('File is required')
    return file


def read_limited(file: FileStorage, max_bytes: int) -> bytes:
    """Read the upload, refusing anything larger than max_bytes."""
    data = file.stream.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise ValidationError(f'File size exceeds {max_bytes // (1024 * 1024)}MB limit')
    return data


def build_object_path(vendor_id: str, ext: str) -> str:
    """`{vendor_id}/{epoch_ms}_{random}.{ext}`; the random suffix keeps same-millisecond uploads apart."""
    return f"{vendor_id}/{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}.{ext}"


def _check_type(file: FileStorage, allowed_types: Iterable[str], allowed_exts: Iterable[str], message: str):
    if file.mimetype in allowed_types:
        return
    if file_extension(file.filename) in allowed_exts:
        return
    raise ValidationError(message)


def store_poster(vendor: Vendor, file: Optional[FileStorage], store: ObjectStore, bucket: str, max_bytes: int) -> str:
    file = require_file(file)
    if file.mimetype not in POSTER_CONTENT_TYPES:
        raise ValidationError('Invalid file type. Only image files (JPEG, PNG, GIF, WebP) are allowed.')
    data = read_limited(file, max_bytes)
    path = build_object_path(vendor.id, file_extension(file.filename) or 'jpg')
    return store.upload(bucket, path, data, file.mimetype, overwrite=False)


def store_attendance(session, vendor: Vendor, request_id: str, file: Optional[FileStorage], store: ObjectStore,
                     bucket: str, max_bytes: int) -> Tuple[str, VendorRequest]:
    file = require_file(file)
    _check_type(file, ATTENDANCE_CONTENT_TYPES, ATTENDANCE_EXTENSIONS,
                'Invalid file type. Only CSV and XLSX files are allowed.')
    data = read_limited(file, max_bytes)
    row = get_request(session, vendor, request_id)
    if row.status != VendorRequest.STATUS_APPROVED:
        abort(403, description='Can only upload attendance for approved requests')
    ext = file_extension(file.filename)
    if ext not in ATTENDANCE_EXTENSIONS:
        ext = 'xlsx' if file.mimetype == XLSX_CONTENT_TYPE else 'csv'
    url = store.upload(bucket, build_object_path(vendor.id, ext), data, file.mimetype or 'application/octet-stream', overwrite=False)
    row.attendance_file_url = url
    row.attendance_uploaded_at = utcnow()
    session.commit()
    return url, row

__all__ = [
    'POSTER_CONTENT_TYPES', 'ATTENDANCE_CONTENT_TYPES', 'file_extension', 'read_limited',
    'build_object_path', 'store_poster', 'store_attendance',
]
