"""
Security Utilities

Credential hashing (bcrypt) and session token issuing/decoding (JWT).

Tokens are self-contained: there is no server-side session table and no
revocation list. A token stays valid until its expiry; verification is
strict (no leeway for clock skew).
"""

import logging
from datetime import UTC, datetime, timedelta
from typing import Any

import bcrypt
import jwt

from placement.core.config import settings

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TYPE = "access"


def hash_password(password: str) -> str:
    """
    Hash a plaintext password with a per-password random salt.

    Args:
        password: The plaintext password

    Returns:
        bcrypt hash as a UTF-8 string
    """
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    """
    Compare a plaintext password against a stored bcrypt hash.

    Never raises: a malformed hash or an over-long password simply
    fails verification.
    """
    try:
        return bcrypt.checkpw(password.encode("utf-8"), password_hash.encode("utf-8"))
    except ValueError:
        logger.warning("Password verification failed: malformed hash or input")
        return False


def create_access_token(
    subject: str,
    role: str,
    expires_delta: timedelta | None = None,
    additional_claims: dict[str, Any] | None = None,
) -> str:
    """
    Issue a signed bearer token binding an account id and role.

    Args:
        subject: Account id (stringified)
        role: Account role value
        expires_delta: Lifetime override (defaults to the configured horizon)
        additional_claims: Extra non-authoritative claims (e.g. display name)

    Returns:
        Encoded JWT
    """
    now = datetime.now(UTC)
    expire = now + (expires_delta or timedelta(days=settings.access_token_expire_days))

    payload: dict[str, Any] = dict(additional_claims or {})
    payload.update(
        {
            "sub": subject,
            "role": role,
            "type": ACCESS_TOKEN_TYPE,
            "iat": now,
            "exp": expire,
        }
    )
    return jwt.encode(payload, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict[str, Any] | None:
    """
    Decode and validate a JWT.

    Returns:
        The claims, or None when the signature is invalid, the token is
        malformed, or it has expired.
    """
    try:
        return jwt.decode(
            token,
            settings.jwt_secret_key,
            algorithms=[settings.jwt_algorithm],
            options={"require": ["sub", "exp", "role"]},
        )
    except jwt.ExpiredSignatureError:
        logger.info("Rejected expired token")
        return None
    except jwt.InvalidTokenError as e:
        logger.warning(f"Rejected invalid token: {e}")
        return None
