# file: PORTAL/core/security.py
import logging
from typing import Optional, Union

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from pydantic import BaseModel

from PORTAL.core.config import AppConfig

# ---------------------------
# Logging
# ---------------------------
logger = logging.getLogger("core.security")

security = HTTPBearer(auto_error=False)


# ---------------------------
# Authentication result
# ---------------------------
class AuthenticatedUser(BaseModel):
    user_id: str
    email: Optional[str] = None
    name: Optional[str] = None
    role: str = "user"


class Unauthenticated(BaseModel):
    reason: str


AuthResult = Union[AuthenticatedUser, Unauthenticated]


class UserInfo(BaseModel):
    id: str
    name: Optional[str] = None
    email: Optional[str] = None
    role: str = "user"


def decode_token(token: str, config: AppConfig) -> AuthResult:
    """Turn a bearer token into an AuthResult. Never raises."""
    try:
        payload = jwt.decode(token, config.secret_key, algorithms=[config.jwt_algorithm])
    except JWTError as e:
        logger.debug("JWT decode failed: %s", e)
        return Unauthenticated(reason="Invalid token")

    sub = payload.get("sub")
    if not sub:
        logger.warning("Invalid JWT payload: missing sub")
        return Unauthenticated(reason="Invalid token payload")

    return AuthenticatedUser(
        user_id=str(sub),
        email=payload.get("email"),
        name=payload.get("name"),
        role=payload.get("role", "user"),
    )


# ---------------------------
# Dependencies
# ---------------------------
async def get_auth_result(
    request: Request,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> AuthResult:
    if credentials is None or not credentials.credentials:
        return Unauthenticated(reason="Not authenticated")
    return decode_token(credentials.credentials, request.app.state.config)


async def get_current_user(auth: AuthResult = Depends(get_auth_result)) -> AuthenticatedUser:
    if isinstance(auth, Unauthenticated):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=auth.reason,
            headers={"WWW-Authenticate": "Bearer"},
        )
    return auth


async def current_user_id(user: AuthenticatedUser = Depends(get_current_user)) -> str:
    return user.user_id


async def current_user_record(user: AuthenticatedUser = Depends(get_current_user)) -> UserInfo:
    return UserInfo(id=user.user_id, name=user.name, email=user.email, role=user.role)
