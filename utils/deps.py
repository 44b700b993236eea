from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from utils.errors import AuthError, ForbiddenError
from utils.security import decode_token

bearer_scheme = HTTPBearer(auto_error=False)

ADMIN_ROLE = "admin"


def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)):
    """
    Principal claims of the bearer token: branchId, name, role, clientId.
    """
    if credentials is None or not credentials.scheme.lower() == "bearer":
        raise AuthError("Access token required")
    payload = decode_token(credentials.credentials)
    if not payload:
        raise ForbiddenError("Invalid or expired token")
    return payload


def is_admin(payload: dict) -> bool:
    return payload.get("role") == ADMIN_ROLE


def role_required(role: str):
    def wrapper(payload=Depends(get_current_user)):
        if payload.get("role") != role:
            raise ForbiddenError("Not enough privileges")
        return payload
    return wrapper
