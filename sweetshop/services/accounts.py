import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from sweetshop.auth import jwt_handler
from sweetshop.auth.dependencies import ADMIN_ROLE, USER_ROLE
from sweetshop.auth.passwords import hash_password, verify_password
from sweetshop.core import config
from sweetshop.core.errors import AccountNotFound, Conflict, InternalStoreError, InvalidCredential
from sweetshop.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class AuthResult:
    token: str
    user: User


def assign_role(email: str) -> str:
    # Case-sensitive on purpose: "ADMIN@x.com" registers as a regular user.
    return ADMIN_ROLE if config.ADMIN_EMAIL_MARKER in email else USER_ROLE


def issue_token(user: User) -> str:
    return jwt_handler.create_access_token(
        subject=user.email,
        claims={"id": user.id, "email": user.email, "role": user.role},
    )


def register(db: Session, email: str, password: str) -> AuthResult:
    try:
        if db.query(User.id).filter(User.email == email).first() is not None:
            raise Conflict()

        user = User(email=email, hashed_password=hash_password(password), role=assign_role(email))
        db.add(user)
        db.commit()
        db.refresh(user)
    except IntegrityError as exc:
        # Lost a race against another registration for the same email.
        db.rollback()
        raise Conflict() from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.exception('Registration failed for %s', email)
        raise InternalStoreError() from exc

    logger.info('Registered %s with role %s', user.email, user.role)
    return AuthResult(token=issue_token(user), user=user)


def login(db: Session, email: str, password: str) -> AuthResult:
    try:
        user = db.query(User).filter(User.email == email).first()
    except SQLAlchemyError as exc:
        logger.exception('Login lookup failed for %s', email)
        raise InternalStoreError() from exc

    if user is None:
        logger.info('Login rejected for unknown account %s', email)
        raise AccountNotFound()
    if not verify_password(password, user.hashed_password):
        logger.info('Login rejected for %s: wrong password', email)
        raise InvalidCredential()

    return AuthResult(token=issue_token(user), user=user)
