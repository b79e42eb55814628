"""Best-effort email notifications sent after a vendor request is created.

Delivery problems are logged and swallowed here; nothing raised by a sender or
a user directory reaches the request that triggered the notification.
"""
from __future__ import annotations
from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

import requests
from flask import current_app, render_template

from cpd_portal.auth import ROLE_ADMIN
from cpd_portal.errors import EmailDeliveryError


def long_date(value: Optional[date]) -> str:
    """Format as `1 June 2025`."""
    if value is None:
        return ''
    return f"{value.day} {value:%B %Y}"


def long_datetime(value: Optional[datetime]) -> str:
    if value is None:
        return ''
    return f"{long_date(value)}, {value:%H:%M}"


class ResendEmailSender:
    API_URL = 'https://api.resend.com/emails'

    def __init__(self, api_key: str, from_email: str, timeout: float = 10, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.from_email = from_email
        self.timeout = timeout
        self.http = session or requests.Session()

    def send(self, to: str, subject: str, html: str) -> Optional[str]:
        if not self.api_key:
            current_app.logger.warning('RESEND_API_KEY not set, skipping email send')
            return None
        resp = self.http.post(
            self.API_URL,
            json={'from': self.from_email, 'to': to, 'subject': subject, 'html': html},
            headers={'Authorization': f'Bearer {self.api_key}'},
            timeout=self.timeout,
        )
        if not resp.ok:
            raise EmailDeliveryError(f'Email send failed: {resp.text}')
        message_id = resp.json().get('id')
        current_app.logger.info('Email sent successfully: %s', message_id)
        return message_id


class SupabaseUserDirectory:
    """Lists identity-provider users through the auth admin API."""
    PER_PAGE = 200

    def __init__(self, base_url: str, service_key: str, timeout: float = 10, session: Optional[requests.Session] = None):
        self.base_url = base_url.rstrip('/')
        self.service_key = service_key
        self.timeout = timeout
        self.http = session or requests.Session()

    def _users(self) -> Iterable[Dict[str, Any]]:
        page = 1
        while True:
            resp = self.http.get(
                f"{self.base_url}/auth/v1/admin/users",
                params={'page': page, 'per_page': self.PER_PAGE},
                headers={'Authorization': f'Bearer {self.service_key}', 'apikey': self.service_key},
                timeout=self.timeout,
            )
            resp.raise_for_status()
            users = resp.json().get('users') or []
            yield from users
            if len(users) < self.PER_PAGE:
                return
            page += 1

    def admin_emails(self) -> List[str]:
        emails = []
        for user in self._users():
            metadata = user.get('user_metadata') or user.get('raw_user_meta_data') or {}
            if metadata.get('role') == ROLE_ADMIN and user.get('email'):
                emails.append(user['email'])
        return emails


class StaticUserDirectory:
    """Fixed admin list from ADMIN_NOTIFICATION_EMAILS, used without an identity-provider admin key."""

    def __init__(self, emails: Iterable[str]):
        self.emails = list(emails)

    def admin_emails(self) -> List[str]:
        return list(self.emails)


class RequestNotifier:
    def __init__(self, sender, directory):
        self.sender = sender
        self.directory = directory

    def request_created(self, request) -> None:
        self._send_confirmation(request)
        self._notify_admins(request)

    def _send_confirmation(self, request):
        if not request.contact_email:
            return
        try:
            self.sender.send(
                to=request.contact_email,
                subject=f'CPD Request Received - {request.event_name}',
                html=render_template('email/request_confirmation.html', request=request),
            )
        except Exception:
            current_app.logger.exception('Failed to send confirmation email for request %s', request.id)

    def _notify_admins(self, request):
        try:
            admin_emails = self.directory.admin_emails()
        except Exception:
            current_app.logger.exception('Failed to list users for admin notifications')
            return
        if not admin_emails:
            current_app.logger.warning('No admin users found to send notifications to')
            return
        current_app.logger.info('Sending admin notifications to %d admin(s)', len(admin_emails))
        try:
            html = render_template('email/admin_notification.html', request=request)
        except Exception:
            current_app.logger.exception('Failed to render admin notification for request %s', request.id)
            return
        subject = f'New CPD Request Requires Approval - {request.event_name}'
        for email in admin_emails:
            try:
                self.sender.send(to=email, subject=subject, html=html)
            except Exception:
                current_app.logger.exception('Failed to send admin notification to %s', email)


def build_notifier(config: Dict[str, Any]) -> RequestNotifier:
    timeout = config.get('HTTP_TIMEOUT_SECONDS', 10)
    sender = ResendEmailSender(config.get('RESEND_API_KEY', ''), config['FROM_EMAIL'], timeout)
    if config.get('SUPABASE_URL') and config.get('SUPABASE_SERVICE_ROLE_KEY'):
        directory = SupabaseUserDirectory(config['SUPABASE_URL'], config['SUPABASE_SERVICE_ROLE_KEY'], timeout)
    else:
        directory = StaticUserDirectory(config.get('ADMIN_NOTIFICATION_EMAILS') or [])
    return RequestNotifier(sender, directory)

__all__ = [
    'ResendEmailSender', 'SupabaseUserDirectory', 'StaticUserDirectory',
    'RequestNotifier', 'build_notifier', 'long_date', 'long_datetime',
]
