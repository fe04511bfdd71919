from typing import Any, Literal

from fastapi import APIRouter, Depends

from famcal.api.endpoints.auth_util import AdminUser
from famcal.api.endpoints.body import JsonBody
from famcal.api.endpoints.csrf import verify_csrf_token
from famcal.api.endpoints.di import Di
from famcal.api.endpoints.views import admin_user_view
from famcal.application.user.create_user import CreateUser
from famcal.application.user.delete_user import DeleteUser
from famcal.application.user.reset_password import ResetPassword
from famcal.application.user.update_user import UpdateUser
from famcal.domain.user import Role, UserId

router = APIRouter(
    prefix="/api/admin", dependencies=[Depends(verify_csrf_token)]
)

RoleName = Literal["user", "admin"]


class CreateUserForm(JsonBody):
    username: str
    display_name: str | None = None
    password: str | None = None
    role: RoleName = "user"


class UpdateUserForm(JsonBody):
    username: str | None = None
    display_name: str | None = None
    role: RoleName | None = None
    birthday: str | None = None
    payment_handle: str | None = None
    reset_onboarding: bool = False


class ResetPasswordForm(JsonBody):
    password: str


@router.get("/users")
async def list_users(di: Di, _: AdminUser) -> dict[str, Any]:  # type: ignore[misc]
    users = di.user_repo().list_users()

    return {"users": [admin_user_view(user) for user in users]}


@router.post("/users")
def create_user(di: Di, _: AdminUser, form: CreateUserForm) -> dict[str, str]:
    cmd = CreateUser(di.user_repo())

    user = cmd.handle(
        form.username,
        display_name=form.display_name,
        # An empty password means the user picks one on their first login
        password=form.password or None,
        role=Role(form.role),
    )

    return {"id": str(user.id)}


@router.patch("/users/{user_id}")
def update_user(  # type: ignore[misc]
    di: Di, _: AdminUser, user_id: UserId, form: UpdateUserForm
) -> dict[str, Any]:
    cmd = UpdateUser(di.user_repo())

    user = cmd.handle(
        user_id,
        username=form.username,
        display_name=form.display_name,
        role=Role(form.role) if form.role else None,
        birthday=form.birthday,
        payment_handle=form.payment_handle,
        reset_onboarding=form.reset_onboarding,
    )

    return {"user": admin_user_view(user)}


@router.delete("/users/{user_id}")
def delete_user(di: Di, _: AdminUser, user_id: UserId) -> dict[str, bool]:
    DeleteUser(di.user_repo()).handle(user_id)

    return {"ok": True}


@router.post("/users/{user_id}/reset-password")
def reset_password(
    di: Di, _: AdminUser, user_id: UserId, form: ResetPasswordForm
) -> dict[str, bool]:
    ResetPassword(di.user_repo()).handle(user_id, form.password)

    return {"ok": True}
