from typing import Any

from fastapi import APIRouter, Depends

from famcal.api.endpoints.auth_util import CurrentUser
from famcal.api.endpoints.body import JsonBody
from famcal.api.endpoints.csrf import verify_csrf_token
from famcal.api.endpoints.di import Di
from famcal.api.endpoints.views import user_view
from famcal.application.user.update_profile import UpdateProfile

router = APIRouter(prefix="/api/me", dependencies=[Depends(verify_csrf_token)])


class ProfileForm(JsonBody):
    display_name: str | None = None
    birthday: str | None = None
    payment_handle: str | None = None


@router.get("")
async def me(user: CurrentUser) -> dict[str, Any]:  # type: ignore[misc]
    return {"user": user_view(user)}


@router.put("/profile")
def update_profile(  # type: ignore[misc]
    di: Di, user: CurrentUser, form: ProfileForm
) -> dict[str, Any]:
    cmd = UpdateProfile(di.user_repo())

    updated = cmd.handle(
        user.id,
        display_name=form.display_name,
        birthday=form.birthday,
        payment_handle=form.payment_handle,
    )

    return {"user": user_view(updated)}
