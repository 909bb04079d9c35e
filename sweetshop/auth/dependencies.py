from dataclasses import dataclass

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from sweetshop.auth import jwt_handler
from sweetshop.core.errors import Forbidden, Unauthenticated

ADMIN_ROLE = "admin"
USER_ROLE = "user"

security = HTTPBearer(auto_error=False)


@dataclass(frozen=True)
class Identity:
    id: int
    email: str
    role: str


def authenticate(token: str | None) -> Identity:
    """Resolve a bearer token into the identity it asserts.

    Tokens are stateless, so no store lookup happens here: a token stays valid
    until it expires even if the account behind it changes.
    """
    if not token:
        raise Unauthenticated()
    try:
        payload = jwt_handler.decode_access_token(token)
    except Exception as exc:
        raise Forbidden("Invalid or expired token") from exc

    try:
        return Identity(id=int(payload["id"]), email=str(payload["email"]), role=str(payload["role"]))
    except (KeyError, TypeError, ValueError) as exc:
        raise Forbidden("Invalid token claims") from exc


def require_role(identity: Identity, role: str) -> None:
    if identity.role != role:
        raise Forbidden("Access denied. Admin privileges required." if role == ADMIN_ROLE else "Access denied.")


def get_current_identity(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
) -> Identity:
    return authenticate(credentials.credentials if credentials else None)


def require_admin(identity: Identity = Depends(get_current_identity)) -> Identity:
    require_role(identity, ADMIN_ROLE)
    return identity
