"""Authentication API endpoints.

    POST /api/auth/register  first-admin bootstrap, closed once an admin exists
    POST /api/auth/login     authenticate and receive a token
    GET  /api/auth/me        current user
"""

import logging

from fastapi import APIRouter, Depends
from pydantic import field_validator
from sqlalchemy.orm import Session

from ..core.auth import AuthContext, AuthProvider, get_auth_provider, require_auth
from ..database import get_db
from ..exceptions import AuthenticationError
from ..schemas.base import ApiModel
from ..services import auth_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/auth", tags=["Authentication"])

MIN_PASSWORD_LENGTH = 6


def _check_email(v: str) -> str:
    v = v.strip().lower()
    local, _, domain = v.partition("@")
    if not local or "." not in domain or domain.startswith(".") or domain.endswith("."):
        raise ValueError("Invalid email format")
    return v


class RegisterRequest(ApiModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
        return v


class LoginRequest(ApiModel):
    email: str
    password: str

    @field_validator("email")
    @classmethod
    def validate_email(cls, v: str) -> str:
        return _check_email(v)

    @field_validator("password")
    @classmethod
    def validate_password(cls, v: str) -> str:
        if not v:
            raise ValueError("Password is required")
        return v


class UserResponse(ApiModel):
    id: str
    email: str
    role: str


class AuthResponse(ApiModel):
    token: str
    user: UserResponse


class MeResponse(ApiModel):
    user: UserResponse


@router.post("/register", response_model=AuthResponse, status_code=201)
def register(
    body: RegisterRequest,
    db: Session = Depends(get_db),
    provider: AuthProvider = Depends(get_auth_provider),
):
    user = auth_service.register_admin(db, body.email, body.password)
    return AuthResponse(
        token=provider.issue(user.id, user.role),
        user=UserResponse.model_validate(user),
    )


@router.post("/login", response_model=AuthResponse)
def login(
    body: LoginRequest,
    db: Session = Depends(get_db),
    provider: AuthProvider = Depends(get_auth_provider),
):
    user = auth_service.authenticate(db, body.email, body.password)
    logger.info("User logged in", extra={"user_id": user.id})
    return AuthResponse(
        token=provider.issue(user.id, user.role),
        user=UserResponse.model_validate(user),
    )


@router.get("/me", response_model=MeResponse)
def me(
    auth: AuthContext = Depends(require_auth),
    db: Session = Depends(get_db),
):
    user = auth_service.get_user_by_id(db, auth.user_id)
    if user is None:
        raise AuthenticationError("User not found")
    return MeResponse(user=UserResponse.model_validate(user))
