"""Environment-backed configuration.

Values are read once at app creation; `create_app(config)` overrides win.
"""
from __future__ import annotations
import os
from typing import Any, Dict, List

DEFAULT_MAX_UPLOAD_BYTES = 50 * 1024 * 1024  # 50 MiB


def _csv(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(',') if item.strip()]


def load_settings() -> Dict[str, Any]:
    settings: Dict[str, Any] = {
        'DATABASE_URL': os.getenv('DATABASE_URL', 'sqlite:///dev.db'),
        # Tokens are issued by the identity provider; verify with its shared secret
        'JWT_SECRET_KEY': os.getenv('SUPABASE_JWT_SECRET') or os.getenv('JWT_SECRET_KEY', 'dev-secret'),
        'JWT_TOKEN_LOCATION': ['headers'],
        'JWT_ALGORITHM': 'HS256',
        'LOG_LEVEL': os.getenv('LOG_LEVEL', 'INFO'),
        'STORAGE_BACKEND': os.getenv('STORAGE_BACKEND', 'local'),
        'LOCAL_STORAGE_DIR': os.getenv('LOCAL_STORAGE_DIR', 'storage'),
        'PUBLIC_STORAGE_URL': os.getenv('PUBLIC_STORAGE_URL', 'http://localhost:5000/storage'),
        'SUPABASE_URL': os.getenv('SUPABASE_URL', ''),
        'SUPABASE_SERVICE_ROLE_KEY': os.getenv('SUPABASE_SERVICE_ROLE_KEY', ''),
        'POSTER_BUCKET': os.getenv('POSTER_BUCKET', 'vendor-posters'),
        'ATTENDANCE_BUCKET': os.getenv('ATTENDANCE_BUCKET', 'vendor-attendance'),
        'MAX_UPLOAD_BYTES': int(os.getenv('MAX_UPLOAD_BYTES', DEFAULT_MAX_UPLOAD_BYTES)),
        'RESEND_API_KEY': os.getenv('RESEND_API_KEY', ''),
        'FROM_EMAIL': os.getenv('FROM_EMAIL', 'noreply@hkra.org.hk'),
        'ADMIN_NOTIFICATION_EMAILS': _csv(os.getenv('ADMIN_NOTIFICATION_EMAILS', '')),
        'HTTP_TIMEOUT_SECONDS': float(os.getenv('HTTP_TIMEOUT_SECONDS', '10')),
    }
    audience = os.getenv('JWT_DECODE_AUDIENCE')
    if audience:
        settings['JWT_DECODE_AUDIENCE'] = audience
    return settings

__all__ = ['load_settings', 'DEFAULT_MAX_UPLOAD_BYTES']
