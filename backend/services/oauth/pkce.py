import base64
import hashlib
import secrets


def _b64url(data: bytes) -> str:
    return base64.urlsafe_b64encode(data).rstrip(b"=").decode("ascii")


def generate_state() -> str:
    """CSRF state for the authorization request"""
    return secrets.token_hex(32)


def generate_code_verifier() -> str:
    return _b64url(secrets.token_bytes(32))


def generate_code_challenge(verifier: str) -> str:
    """S256 challenge: base64url(SHA-256(verifier)), unpadded"""
    return _b64url(hashlib.sha256(verifier.encode("ascii")).digest())
