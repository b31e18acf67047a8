"""Signed session tokens, sent as a bearer header or an HttpOnly cookie."""
import json
import hmac
import hashlib
import base64
from datetime import datetime, timedelta, timezone
from typing import Optional, Dict
from fastapi import Request, Response
from .. import config

SESSION_COOKIE_NAME = "tripvote_session"


def _sign_data(data: str) -> str:
    """Sign data using HMAC-SHA256."""
    signature = hmac.new(
        config.SECRET_KEY.encode(),
        data.encode(),
        hashlib.sha256
    ).hexdigest()
    return f"{data}.{signature}"


def _verify_signed_data(signed_data: str) -> Optional[str]:
    """Verify and extract data from signed string."""
    if "." not in signed_data:
        return None
    data, signature = signed_data.rsplit(".", 1)
    expected_signature = hmac.new(
        config.SECRET_KEY.encode(),
        data.encode(),
        hashlib.sha256
    ).hexdigest()
    if not hmac.compare_digest(signature, expected_signature):
        return None
    return data


def create_token(user_id: int, role: str, now: Optional[datetime] = None) -> str:
    """Issue a signed token carrying the user id and role."""
    now = now or datetime.now(timezone.utc)
    expires = now + timedelta(days=config.SESSION_TTL_DAYS)
    session_data = {
        "user_id": user_id,
        "role": role,
        "expires_at": expires.isoformat(),
    }
    signed = _sign_data(json.dumps(session_data))
    return base64.urlsafe_b64encode(signed.encode()).decode()


def decode_token(token: str) -> Optional[Dict]:
    """Return the session payload, or None if the token is forged, malformed or expired."""
    try:
        decoded = base64.urlsafe_b64decode(token.encode()).decode()
    except (ValueError, UnicodeDecodeError):
        return None

    data = _verify_signed_data(decoded)
    if not data:
        return None

    try:
        session_data = json.loads(data)
        expires_at = datetime.fromisoformat(session_data["expires_at"])
    except (ValueError, KeyError, TypeError):
        return None
    if expires_at < datetime.now(timezone.utc):
        return None
    return session_data


def read_token(request: Request) -> Optional[str]:
    """Bearer header first, then the session cookie."""
    auth_header = request.headers.get("authorization", "")
    if auth_header.startswith("Bearer "):
        return auth_header.split(" ", 1)[1].strip() or None
    return request.cookies.get(SESSION_COOKIE_NAME)


def get_session(request: Request) -> Optional[Dict]:
    """Get and verify the session attached to the request."""
    token = read_token(request)
    if not token:
        return None
    return decode_token(token)


def set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=SESSION_COOKIE_NAME,
        value=token,
        max_age=config.SESSION_TTL_DAYS * 24 * 60 * 60,
        httponly=True,
        secure=False,  # Set to True in production with HTTPS
        samesite="lax",
        path="/",
    )


def clear_session(response: Response) -> None:
    """Clear the session cookie."""
    response.delete_cookie(
        key=SESSION_COOKIE_NAME,
        httponly=True,
        secure=False,
        samesite="lax",
        path="/",
    )
