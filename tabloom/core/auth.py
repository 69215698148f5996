"""Authentication dependencies.

``require_auth`` resolves the bearer token into an ``AuthContext`` or
raises 401. Token issuing and checking live behind ``AuthProvider`` so
tests and deployments can swap the secret through
``app.dependency_overrides[get_auth_provider]``.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from .config import settings
from .token_factory import TokenPayload, create_token, decode_token
from ..database import get_db
from ..exceptions import AuthenticationError

logger = logging.getLogger(__name__)

_bearer_scheme = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class AuthContext:
    """Identity of the caller of an authenticated endpoint."""

    user_id: str
    role: str

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"


class AuthProvider:
    """Issues and verifies login tokens with one signing configuration."""

    def __init__(self, secret: str, algorithm: str = "HS256", expires_hours: int = 24):
        self.secret = secret
        self.algorithm = algorithm
        self.expires_hours = expires_hours

    def issue(self, user_id: str, role: str) -> str:
        return create_token(
            subject=user_id,
            role=role,
            secret=self.secret,
            algorithm=self.algorithm,
            expires_hours=self.expires_hours,
        )

    def verify(self, token: str) -> Optional[TokenPayload]:
        return decode_token(token, self.secret, self.algorithm)


def get_auth_provider() -> AuthProvider:
    """Provider built from current settings."""
    return AuthProvider(
        secret=settings.jwt_secret_key,
        algorithm=settings.jwt_algorithm,
        expires_hours=settings.jwt_expires_hours,
    )


def require_auth(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(_bearer_scheme),
    provider: AuthProvider = Depends(get_auth_provider),
    db: Session = Depends(get_db),
) -> AuthContext:
    """Require a valid bearer token belonging to an existing user."""
    from ..services.auth_service import get_user_by_id

    if credentials is None:
        raise AuthenticationError("Missing authentication token")

    payload = provider.verify(credentials.credentials)
    if payload is None:
        raise AuthenticationError("Invalid or expired token")

    user = get_user_by_id(db, payload.sub)
    if user is None:
        logger.warning("Token for unknown user", extra={"user_id": payload.sub})
        raise AuthenticationError("Invalid or expired token")

    return AuthContext(user_id=user.id, role=user.role)
