from flask import Flask
from cpd_portal import get_db
from cpd_portal.models.vendor_request import VendorRequest, StatusHistory
from tests.test_utils_seed import ensure_vendor, ensure_request, new_user_id
from tests.test_lifecycle_helpers import jwt_headers, create_request_and_assert, assert_withdraw


def _vendor_headers(**vendor_fields):
    vendor = ensure_vendor(**vendor_fields)
    return vendor, jwt_headers(vendor.user_id)


def test_create_then_get_returns_pending_with_history(app_context: Flask):
    client = app_context.test_client()
    vendor, headers = _vendor_headers()
    created = create_request_and_assert(client, headers)
    assert created['vendor_id'] == vendor.id
    assert created['expected_cpd_points'] == 3.5
    assert created['event_start_date'] == '2025-06-01'

    resp = client.get(f"/vendor-requests/{created['id']}", headers=headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['status'] == 'pending'
    history = body['vendor_request_status_history']
    assert [h['status'] for h in history] == ['pending']
    assert history[0]['changed_by'] == vendor.user_id


def test_create_snapshots_vendor_contact_over_client_values(app_context: Flask):
    client = app_context.test_client()
    vendor, headers = _vendor_headers(company_name='Real Co', contact_name='Real Name', contact_phone=None)
    body = create_request_and_assert(
        client, headers,
        vendor_company_name='Client Co', contact_name='Client Name',
        contact_email='client@example.com', contact_phone='+852 9999 0000',
    )
    assert body['vendor_company_name'] == 'Real Co'
    assert body['contact_name'] == 'Real Name'
    assert body['contact_email'] == vendor.contact_email
    # vendor has no phone on file, so the client value fills the gap
    assert body['contact_phone'] == '+852 9999 0000'


def test_create_keeps_optional_fields(app_context: Flask):
    client = app_context.test_client()
    _, headers = _vendor_headers()
    body = create_request_and_assert(
        client, headers,
        poster_file_url='http://files.test/storage/vendor-posters/x.png',
        expected_promotion_date='2025-05-01',
    )
    assert body['poster_file_url'].endswith('x.png')
    assert body['expected_promotion_date'] == '2025-05-01'
    assert body['attendance_file_url'] is None


def test_list_is_scoped_ordered_and_filterable(app_context: Flask):
    client = app_context.test_client()
    vendor, headers = _vendor_headers()
    other, other_headers = _vendor_headers()
    first = create_request_and_assert(client, headers, event_name='First')
    second = create_request_and_assert(client, headers, event_name='Second')
    create_request_and_assert(client, other_headers, event_name='Other vendor')
    assert_withdraw(client, first['id'], headers)

    resp = client.get('/vendor-requests', headers=headers)
    assert resp.status_code == 200
    rows = resp.get_json()
    assert [r['id'] for r in rows] == [second['id'], first['id']]
    assert all(r['vendor_id'] == vendor.id for r in rows)

    resp = client.get('/vendor-requests?status=withdrawn', headers=headers)
    assert [r['id'] for r in resp.get_json()] == [first['id']]

    resp = client.get('/vendor-requests?status=pending', headers=headers)
    assert [r['id'] for r in resp.get_json()] == [second['id']]


def test_list_empty_for_vendor_without_requests(app_context: Flask):
    client = app_context.test_client()
    _, headers = _vendor_headers()
    resp = client.get('/vendor-requests', headers=headers)
    assert resp.status_code == 200
    assert resp.get_json() == []


def test_update_pending_request(app_context: Flask):
    client = app_context.test_client()
    _, headers = _vendor_headers()
    created = create_request_and_assert(client, headers)
    resp = client.patch(f"/vendor-requests/{created['id']}", json={
        'event_name': 'Renamed Conference',
        'expected_cpd_points': '6',
        'event_end_date': '2025-06-03',
        'contact_phone': '',
    }, headers=headers)
    assert resp.status_code == 200, resp.get_json()
    body = resp.get_json()
    assert body['event_name'] == 'Renamed Conference'
    assert body['expected_cpd_points'] == 6.0
    assert body['event_end_date'] == '2025-06-03'
    assert body['contact_phone'] is None
    assert body['status'] == 'pending'


def test_update_ignores_status_and_workflow_fields(app_context: Flask):
    client = app_context.test_client()
    vendor, headers = _vendor_headers()
    other = ensure_vendor()
    created = create_request_and_assert(client, headers)
    resp = client.patch(f"/vendor-requests/{created['id']}", json={
        'status': 'approved',
        'approved_by': 'someone',
        'vendor_id': other.id,
        'attendance_file_url': 'http://evil.example/x.csv',
        'event_name': 'Still Pending',
    }, headers=headers)
    assert resp.status_code == 200
    body = resp.get_json()
    assert body['status'] == 'pending'
    assert body['approved_by'] is None
    assert body['vendor_id'] == vendor.id
    assert body['attendance_file_url'] is None
    assert body['event_name'] == 'Still Pending'


def test_withdraw_records_history(app_context: Flask):
    client = app_context.test_client()
    vendor, headers = _vendor_headers()
    created = create_request_and_assert(client, headers)
    assert_withdraw(client, created['id'], headers)
    body = client.get(f"/vendor-requests/{created['id']}", headers=headers).get_json()
    assert body['status'] == 'withdrawn'
    assert [h['status'] for h in body['vendor_request_status_history']] == ['pending', 'withdrawn']
    stored = get_db().query(StatusHistory).filter_by(request_id=created['id']).count()
    assert stored == 2


def test_two_creates_are_independently_withdrawable(app_context: Flask):
    client = app_context.test_client()
    _, headers = _vendor_headers()
    a = create_request_and_assert(client, headers)
    b = create_request_and_assert(client, headers)
    assert a['id'] != b['id']
    assert_withdraw(client, a['id'], headers)
    still_pending = client.get(f"/vendor-requests/{b['id']}", headers=headers).get_json()
    assert still_pending['status'] == 'pending'
    assert_withdraw(client, b['id'], headers)


def test_get_includes_admin_fields_for_decided_request(app_context: Flask):
    client = app_context.test_client()
    vendor, headers = _vendor_headers()
    row = ensure_request(vendor, status=VendorRequest.STATUS_REJECTED, rejection_reason='Out of scope')
    body = client.get(f'/vendor-requests/{row.id}', headers=headers).get_json()
    assert body['status'] == 'rejected'
    assert body['rejection_reason'] == 'Out of scope'


def test_create_response_matches_stored_row(app_context: Flask):
    client = app_context.test_client()
    _, headers = _vendor_headers()
    created = create_request_and_assert(client, headers, expected_cpd_points='7.999')
    assert created['expected_cpd_points'] == 8.0
    fetched = client.get(f"/vendor-requests/{created['id']}", headers=headers).get_json()
    fetched.pop('vendor_request_status_history')
    assert fetched == created
    assert created['created_at'].endswith('+00:00')
