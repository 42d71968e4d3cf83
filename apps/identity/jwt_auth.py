"""
JWT cookie authentication for the hub API.

Tokens are signed with settings.JWT_SECRET. The access token is short
lived and names the user, its organization and role; the refresh token
only names the user.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional, Tuple
from uuid import UUID

import jwt
from django.conf import settings

JWT_ALGORITHM = 'HS256'
ACCESS_TOKEN_EXPIRE_MINUTES = 15
REFRESH_TOKEN_EXPIRE_DAYS = 7

ACCESS_COOKIE = 'access_token'
REFRESH_COOKIE = 'refresh_token'


def _secret() -> str:
    return getattr(settings, 'JWT_SECRET', None) or settings.SECRET_KEY


def _encode(payload: dict, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    payload = {**payload, 'iat': now, 'exp': now + lifetime}
    return jwt.encode(payload, _secret(), algorithm=JWT_ALGORITHM)


def create_token_pair(user) -> Tuple[str, str]:
    """(access_token, refresh_token) for `user`."""
    access = _encode(
        {
            'sub': str(user.id),
            'org_id': str(user.org_id) if user.org_id else None,
            'role': user.role,
            'type': 'access',
        },
        timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES),
    )
    refresh = _encode(
        {'sub': str(user.id), 'type': 'refresh'},
        timedelta(days=REFRESH_TOKEN_EXPIRE_DAYS),
    )
    return access, refresh


def decode_token(token: str, expected_type: str = 'access') -> Optional[dict]:
    """Payload of a valid token of `expected_type`, else None."""
    try:
        payload = jwt.decode(token, _secret(), algorithms=[JWT_ALGORITHM])
    except jwt.InvalidTokenError:
        return None
    if payload.get('type') != expected_type:
        return None
    return payload


def get_user_id_from_token(token: str, expected_type: str = 'access') -> Optional[UUID]:
    payload = decode_token(token, expected_type)
    if not payload or 'sub' not in payload:
        return None
    try:
        return UUID(payload['sub'])
    except ValueError:
        return None


def get_cookie_settings(max_age: int, secure: bool) -> dict:
    return {
        'httponly': True,
        'secure': secure,
        'samesite': 'Lax',
        'path': '/',
        'max_age': max_age,
    }


def access_cookie_settings(secure: bool = False) -> dict:
    return get_cookie_settings(ACCESS_TOKEN_EXPIRE_MINUTES * 60, secure)


def refresh_cookie_settings(secure: bool = False) -> dict:
    return get_cookie_settings(REFRESH_TOKEN_EXPIRE_DAYS * 24 * 60 * 60, secure)
