"""Shared fixtures for unit tests: in-memory database, platform tokens, fake auth admin API."""

import uuid
from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from sqlalchemy import create_engine, event
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from purgehub.core.config import get_settings
from purgehub.models import Base, Profile
from purgehub.models.role import ROLE_ADMIN, ROLE_SUPER_ADMIN
from purgehub.schemas.auth import AdminContext, AuthorizationFlags, AuthUser, CurrentUser
from purgehub.services.errors import AuthApiError
from purgehub.services.roles import grant_role


def make_session() -> Session:
    """Fresh SQLite in-memory database with every table and foreign keys enforced."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine, "connect")
    def _enable_fk(dbapi_connection, _record) -> None:
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    Base.metadata.create_all(engine)
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)()


def make_token(
    user_id: UUID,
    email: str | None = None,
    expires_in: timedelta = timedelta(hours=1),
    secret: str | None = None,
) -> str:
    """Sign a token the way the platform does (HS256, aud=authenticated)."""
    settings = get_settings()
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "aud": settings.JWT_AUDIENCE,
        "role": "authenticated",
        "iat": now,
        "exp": now + expires_in,
    }
    if email:
        payload["email"] = email
    return jwt.encode(
        payload,
        secret or settings.SUPABASE_JWT_SECRET.get_secret_value(),
        algorithm=settings.JWT_ALGORITHM,
    )


def add_profile(
    session: Session,
    username: str,
    user_id: UUID | None = None,
    display_name: str | None = None,
    **kwargs: object,
) -> Profile:
    profile = Profile(
        user_id=user_id or uuid.uuid4(),
        username=username,
        display_name=display_name,
        **kwargs,
    )
    session.add(profile)
    session.commit()
    return profile


def add_account(
    session: Session,
    username: str,
    admin: bool = False,
    principal: bool = False,
    **kwargs: object,
) -> Profile:
    """Profile plus role rows."""
    profile = add_profile(session, username, **kwargs)
    if admin:
        grant_role(session, profile.user_id, ROLE_ADMIN)
    if principal:
        grant_role(session, profile.user_id, ROLE_SUPER_ADMIN)
    return profile


def admin_context(
    user_id: UUID,
    is_admin: bool = True,
    is_principal: bool = False,
    email: str | None = None,
) -> AdminContext:
    return AdminContext(
        user=CurrentUser(id=user_id, email=email),
        flags=AuthorizationFlags(is_admin=is_admin, is_principal=is_principal),
        token=make_token(user_id, email),
    )


class FakeAuthAdminClient:
    """In-memory stand-in for AuthAdminClient; records deletions in call order."""

    def __init__(self, users: list[AuthUser] | None = None) -> None:
        self.users: dict[UUID, AuthUser] = {u.id: u for u in users or []}
        self.deleted: list[UUID] = []
        self.fail_delete = False
        self.on_delete = None

    def add(self, user_id: UUID, email: str | None) -> AuthUser:
        user = AuthUser(id=user_id, email=email)
        self.users[user_id] = user
        return user

    async def ping(self) -> bool:
        return True

    async def get_user(self, user_id: UUID) -> AuthUser | None:
        return self.users.get(user_id)

    async def delete_user(self, user_id: UUID) -> None:
        if self.on_delete is not None:
            self.on_delete(user_id)
        if self.fail_delete:
            raise AuthApiError("Auth service returned 500: unavailable", 500)
        self.users.pop(user_id, None)
        self.deleted.append(user_id)
