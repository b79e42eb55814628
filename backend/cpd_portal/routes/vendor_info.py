from flask import Blueprint, abort
from cpd_portal import get_db
from cpd_portal.auth import AuthContext
from cpd_portal.decorators.auth import require_auth
from cpd_portal.services.vendors import find_vendor, vendor_json

vendor_info_bp = Blueprint('vendor_info', __name__)


@vendor_info_bp.get('/vendor-info')
@require_auth
def get_vendor_info(auth: AuthContext):
    vendor = find_vendor(get_db(), auth)
    if vendor is None:
        abort(404, description='Vendor record not found')
    return vendor_json(vendor)
