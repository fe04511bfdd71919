from typing import Any

from fastapi import APIRouter, Response

from famcal.api.endpoints.auth_util import (
    CurrentSession,
    SessionCookie,
    clear_session_cookie,
    set_session_cookie,
)
from famcal.api.endpoints.body import JsonBody
from famcal.api.endpoints.di import Di
from famcal.api.endpoints.views import user_view
from famcal.application.session.logout import Logout
from famcal.application.session.start_session import LoginSucceeded
from famcal.application.user.local_user_login import LocalUserLogin
from famcal.application.user.set_password import SetPasswordFromToken

router = APIRouter(prefix="/api/auth")


class LoginForm(JsonBody):
    username: str
    password: str = ""


class SetPasswordForm(JsonBody):
    setup_token: str
    password: str


def start_session_response(  # type: ignore[misc]
    di: Di, response: Response, result: LoginSucceeded
) -> dict[str, Any]:
    set_session_cookie(response, result.session, di.server_settings())

    return {
        "user": user_view(result.user),
        "csrfToken": result.session.csrf_token,
    }


# Endpoints that hash passwords must stay sync, FastAPI runs them in a
# threadpool.


@router.post("/login")
def login(  # type: ignore[misc]
    di: Di, response: Response, form: LoginForm
) -> dict[str, Any]:
    cmd = LocalUserLogin(
        di.user_repo(),
        di.session_repo(),
        di.setup_token_repo(),
        di.session_settings().ttl,
    )

    result = cmd.handle(form.username, form.password)

    if isinstance(result, LoginSucceeded):
        return start_session_response(di, response, result)

    return {
        "needsPasswordSet": True,
        "setupToken": result.setup_token,
        "username": result.username,
        "displayName": result.display_name,
    }


@router.post("/set-password")
def set_password(  # type: ignore[misc]
    di: Di, response: Response, form: SetPasswordForm
) -> dict[str, Any]:
    cmd = SetPasswordFromToken(
        di.user_repo(),
        di.session_repo(),
        di.setup_token_repo(),
        di.session_settings().ttl,
    )

    result = cmd.handle(form.setup_token, form.password)

    return start_session_response(di, response, result)


@router.post("/logout")
def logout(
    di: Di, response: Response, session_id: SessionCookie = None
) -> dict[str, bool]:
    Logout(di.session_repo()).handle(session_id)

    clear_session_cookie(response, di.server_settings())

    return {"ok": True}


@router.get("/csrf")
def csrf(authed: CurrentSession) -> dict[str, str]:
    return {"csrfToken": authed.session.csrf_token}
