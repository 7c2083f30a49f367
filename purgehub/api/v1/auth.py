"""Bearer-token auth dependencies (get_current_user, require_admin, require_principal)."""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from purgehub.core.database import get_db
from purgehub.core.security import decode_access_token
from purgehub.schemas.auth import AdminContext, CurrentUser, MeResponse
from purgehub.services.policy import check_authorization

router = APIRouter()
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> CurrentUser:
    """Dependency: require a valid platform Bearer JWT and return the caller. Raises 401 if missing or invalid."""
    if credentials is None:
        raise _unauthorized("Not authenticated")
    try:
        payload = decode_access_token(credentials.credentials)
    except jwt.PyJWTError:
        raise _unauthorized("Invalid or expired token")
    try:
        user_id = UUID(str(payload.get("sub")))
    except (TypeError, ValueError):
        raise _unauthorized("Invalid token payload")
    email = payload.get("email") or None
    return CurrentUser(id=user_id, email=email)


def require_admin(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> AdminContext:
    """Dependency: require the admin role. Raises 403 for non-admin."""
    flags = check_authorization(db, current_user)
    if not flags.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin only",
        )
    return AdminContext(user=current_user, flags=flags, token=credentials.credentials)


def require_principal(
    ctx: Annotated[AdminContext, Depends(require_admin)],
) -> AdminContext:
    """Dependency: require admin and the super_admin role."""
    if not ctx.flags.is_principal:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Principal admin only",
        )
    return ctx


@router.get("/me", response_model=MeResponse)
def get_me(
    current_user: Annotated[CurrentUser, Depends(get_current_user)],
    db: Annotated[Session, Depends(get_db)],
) -> MeResponse:
    """Who am I, and which console controls should be shown (hints; every action is re-checked)."""
    flags = check_authorization(db, current_user)
    return MeResponse(
        id=current_user.id,
        email=current_user.email,
        is_admin=flags.is_admin,
        is_principal=flags.is_principal,
    )
