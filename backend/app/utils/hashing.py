"""Hashing utilities for provider tokens and OAuth state."""
import hashlib
import secrets


def hash_token(token: str, salt: str) -> str:
    """
    Hash an access token using SHA-256 with salt.

    Args:
        token: The raw provider access token
        salt: Application-wide token salt

    Returns:
        Hex digest of the hashed token
    """
    salted_token = f"{token}{salt}"
    return hashlib.sha256(salted_token.encode()).hexdigest()


def generate_state() -> str:
    """Generate a one-time OAuth state nonce."""
    return secrets.token_hex(16)


def generate_session_id() -> str:
    """Generate an opaque server-side session id."""
    return secrets.token_urlsafe(32)
