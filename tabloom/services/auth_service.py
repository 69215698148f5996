"""Authentication service: first-admin registration and login.

Passwords are hashed with bcrypt via passlib and never logged.
"""

import logging
from typing import Optional

from passlib.hash import bcrypt
from sqlalchemy.orm import Session

from ..exceptions import AuthenticationError, ConflictError, ForbiddenError
from ..models.user import User

logger = logging.getLogger(__name__)

ADMIN_ROLE = "admin"


def register_admin(db: Session, email: str, password: str) -> User:
    """Create the single admin account.

    Raises:
        ForbiddenError: An admin already exists; nothing is written.
        ConflictError: The email is already in use.
    """
    email = email.strip().lower()

    if db.query(User).filter(User.role == ADMIN_ROLE).first() is not None:
        logger.warning("Registration attempted after admin bootstrap")
        raise ForbiddenError("Admin already exists. Registration disabled.")

    if db.query(User).filter(User.email == email).first() is not None:
        raise ConflictError("Email already in use", field="email")

    user = User(email=email, password_hash=bcrypt.hash(password), role=ADMIN_ROLE)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Registered admin user", extra={"user_id": user.id})
    return user


def authenticate(db: Session, email: str, password: str) -> User:
    """Return the user for valid credentials.

    Unknown email and wrong password fail identically.
    """
    user = db.query(User).filter(User.email == email.strip().lower()).first()
    if user is None or not bcrypt.verify(password, user.password_hash):
        logger.warning("Failed login attempt")
        raise AuthenticationError("Invalid credentials")
    return user


def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()
