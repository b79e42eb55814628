"""Reusable test helpers for the vendor request lifecycle.

Patterns unified:
 - Auth header creation using identity-provider shaped JWT claims.
 - Creation + withdraw sequencing with assertion helpers.
"""
from __future__ import annotations
from typing import Dict, Optional
from flask_jwt_extended import create_access_token

VALID_PAYLOAD = {
    'event_name': 'Annual Conference',
    'event_start_date': '2025-06-01',
    'event_end_date': '2025-06-02',
    'expected_cpd_points': 3.5,
}


def jwt_headers(user_id: str, role: str = 'vendor', email: Optional[str] = None) -> Dict[str, str]:
    token = create_access_token(identity=user_id, additional_claims={
        'email': email or f'{user_id[:8]}@vendor.example',
        'role': 'authenticated',
        'user_metadata': {'role': role},
    })
    return {'Authorization': f'Bearer {token}'}


def create_request_and_assert(client, headers: Dict[str, str], **overrides):
    payload = dict(VALID_PAYLOAD)
    payload.update(overrides)
    resp = client.post('/vendor-requests', json=payload, headers=headers)
    assert resp.status_code == 201, resp.get_json()
    body = resp.get_json()
    assert body['status'] == 'pending'
    assert body['id']
    return body


def assert_withdraw(client, request_id: str, headers: Dict[str, str], expected_status: int = 200):
    resp = client.delete(f'/vendor-requests/{request_id}', headers=headers)
    assert resp.status_code == expected_status, resp.get_json()
    if expected_status == 200:
        assert resp.get_json()['status'] == 'withdrawn'
    return resp

__all__ = ['VALID_PAYLOAD', 'jwt_headers', 'create_request_and_assert', 'assert_withdraw']
