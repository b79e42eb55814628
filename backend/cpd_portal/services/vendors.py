from __future__ import annotations
from typing import Optional
from flask import current_app
from sqlalchemy import select
from cpd_portal.auth import AuthContext
from cpd_portal.errors import VendorRecordMissing
from cpd_portal.models.base import isoformat_utc
from cpd_portal.models.vendor import Vendor


def find_vendor(session, auth: AuthContext) -> Optional[Vendor]:
    return session.execute(select(Vendor).where(Vendor.user_id == auth.user_id)).scalar_one_or_none()


def resolve_vendor(session, auth: AuthContext) -> Vendor:
    """Return the caller's vendor row or abort 403 before any business logic runs."""
    vendor = find_vendor(session, auth)
    if vendor is None:
        current_app.logger.warning('Vendor lookup failed: user_id=%s email=%s', auth.user_id, auth.email)
        raise VendorRecordMissing()
    return vendor


def vendor_json(v: Vendor):
    return {
        'id': v.id,
        'user_id': v.user_id,
        'company_name': v.company_name,
        'contact_name': v.contact_name,
        'contact_email': v.contact_email,
        'contact_phone': v.contact_phone,
        'created_at': isoformat_utc(v.created_at),
        'updated_at': isoformat_utc(v.updated_at),
    }

__all__ = ['find_vendor', 'resolve_vendor', 'vendor_json']
