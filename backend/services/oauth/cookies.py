"""Signed, short-lived cookies carrying the OAuth state and PKCE verifier."""

from typing import Optional

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer

from config import SECRET_KEY, OAUTH_COOKIE_MAX_AGE


def state_cookie_name(provider: str) -> str:
    return f"oauth_state_{provider}"


def verifier_cookie_name(provider: str) -> str:
    return f"oauth_code_verifier_{provider}"


def _serializer(secret_key: str = None) -> URLSafeTimedSerializer:
    return URLSafeTimedSerializer(secret_key=secret_key or SECRET_KEY, salt="brd-analyzer-oauth")


def sign_value(value: str) -> str:
    return _serializer().dumps(value)


def unsign_value(signed: Optional[str], max_age: int = OAUTH_COOKIE_MAX_AGE) -> Optional[str]:
    """The original value, or None when missing, tampered with or expired"""
    if not signed:
        return None
    try:
        value = _serializer().loads(signed, max_age=max_age)
    except (SignatureExpired, BadSignature):
        return None
    return value if isinstance(value, str) else None
