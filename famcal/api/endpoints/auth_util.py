from dataclasses import dataclass
from typing import Annotated

from fastapi import Cookie, Depends, Response

from famcal.api.endpoints.di import Di
from famcal.api.settings import ServerSettings
from famcal.application.exceptions import Forbidden, Unauthorized
from famcal.application.session.resolve_session import ResolveSession
from famcal.domain.datetime import UtcDatetime
from famcal.domain.session import Session
from famcal.domain.user import User

SESSION_COOKIE_NAME = "famcal_session"


@dataclass(frozen=True)
class AuthedSession:
    session: Session
    user: User


SessionCookie = Annotated[str | None, Cookie(alias=SESSION_COOKIE_NAME)]


def get_optional_session(di: Di, session_id: SessionCookie = None) -> AuthedSession | None:
    found = ResolveSession(di.session_repo()).handle(session_id or "")

    return AuthedSession(*found) if found else None


OptionalSession = Annotated[AuthedSession | None, Depends(get_optional_session)]


def get_current_session(authed: OptionalSession) -> AuthedSession:
    if authed:
        return authed

    raise Unauthorized("Session is missing, invalid, or expired")


CurrentSession = Annotated[AuthedSession, Depends(get_current_session)]


def get_current_user(authed: CurrentSession) -> User:
    return authed.user


CurrentUser = Annotated[User, Depends(get_current_user)]


def get_admin_user(user: CurrentUser) -> User:
    if user.is_admin:
        return user

    raise Forbidden(f"User {user.id} is not an admin")


AdminUser = Annotated[User, Depends(get_admin_user)]


def set_session_cookie(
    response: Response, session: Session, settings: ServerSettings
) -> None:
    max_age = max(0, int((session.expires_at - UtcDatetime.now()).total_seconds()))

    response.set_cookie(
        SESSION_COOKIE_NAME,
        session.id,
        max_age=max_age,
        expires=session.expires_at,
        path="/",
        secure=settings.secure_cookies,
        httponly=True,
        samesite="strict",
    )


def clear_session_cookie(response: Response, settings: ServerSettings) -> None:
    response.delete_cookie(
        SESSION_COOKIE_NAME,
        path="/",
        secure=settings.secure_cookies,
        httponly=True,
        samesite="strict",
    )
