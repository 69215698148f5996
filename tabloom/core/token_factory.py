"""Pure functions for creating and decoding login tokens (HS256 JWT).

Used by the auth provider. Decoding never raises: an unusable token is
simply ``None``.
"""

import base64
import hashlib
import hmac
import json
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Optional

ISSUER = "tabloom"
_HEADER = {"alg": "HS256", "typ": "JWT"}


@dataclass(frozen=True)
class TokenPayload:
    """Decoded token claims."""
    sub: str
    role: str
    exp: datetime


def create_token(
    subject: str,
    role: str,
    secret: str,
    algorithm: str = "HS256",
    expires_hours: int = 24,
) -> str:
    """Create a signed token for *subject* (a user id) carrying *role*."""
    if algorithm != "HS256":
        raise ValueError(f"Unsupported algorithm: {algorithm}")

    now = int(time.time())
    claims = {
        "sub": subject,
        "role": role,
        "iat": now,
        "exp": now + expires_hours * 3600,
        "iss": ISSUER,
    }
    signing_input = (
        _b64encode(json.dumps(_HEADER).encode())
        + b"."
        + _b64encode(json.dumps(claims).encode())
    )
    return (signing_input + b"." + _b64encode(_sign(signing_input, secret))).decode()


def decode_token(token: str, secret: str, algorithm: str = "HS256") -> Optional[TokenPayload]:
    """Validate signature, header, issuer and expiry.

    Returns:
        ``TokenPayload`` if valid, ``None`` otherwise.
    """
    if algorithm != "HS256":
        return None
    try:
        header_b64, claims_b64, sig_b64 = token.encode().split(b".")
        expected = _sign(header_b64 + b"." + claims_b64, secret)
        if not hmac.compare_digest(expected, _b64decode(sig_b64)):
            return None

        header = json.loads(_b64decode(header_b64))
        if header.get("alg") != "HS256":
            return None

        claims = json.loads(_b64decode(claims_b64))
        if claims.get("iss") != ISSUER:
            return None
        exp = int(claims.get("exp", 0))
        if time.time() > exp:
            return None
        if not claims.get("sub"):
            return None

        return TokenPayload(
            sub=claims["sub"],
            role=claims.get("role", ""),
            exp=datetime.fromtimestamp(exp, tz=timezone.utc),
        )
    except (ValueError, TypeError, AttributeError, UnicodeError):
        # json.JSONDecodeError and binascii.Error are ValueError subclasses
        return None


def _sign(signing_input: bytes, secret: str) -> bytes:
    return hmac.new(secret.encode(), signing_input, hashlib.sha256).digest()


def _b64encode(data: bytes) -> bytes:
    return base64.urlsafe_b64encode(data).rstrip(b"=")


def _b64decode(data: bytes) -> bytes:
    return base64.urlsafe_b64decode(data + b"=" * (-len(data) % 4))
