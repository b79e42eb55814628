from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, Optional

ROLE_ADMIN = 'admin'


@dataclass(frozen=True)
class AuthContext:
    """Caller identity resolved once per request from the verified bearer token."""
    user_id: str
    role: Optional[str] = None
    email: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> 'AuthContext':
        # Identity provider keeps the portal role in user metadata
        metadata = claims.get('user_metadata') or {}
        role = metadata.get('role') if isinstance(metadata, dict) else None
        return cls(user_id=str(claims['sub']), role=role, email=claims.get('email'))

__all__ = ['AuthContext', 'ROLE_ADMIN']
