from fastapi import APIRouter, Depends

from famcal.api.endpoints.auth_util import CurrentUser
from famcal.api.endpoints.body import JsonBody
from famcal.api.endpoints.csrf import verify_csrf_token
from famcal.api.endpoints.di import Di
from famcal.application.update.create_update import CreateUpdate
from famcal.application.update.delete_update import DeleteUpdate
from famcal.application.update.edit_update import EditUpdate
from famcal.domain.update import UpdateId

router = APIRouter(
    prefix="/api/updates", dependencies=[Depends(verify_csrf_token)]
)


class UpdateForm(JsonBody):
    date: str
    title: str
    body: str | None = None
    color_id: str | None = None


@router.post("")
def create_update(di: Di, user: CurrentUser, form: UpdateForm) -> dict[str, str]:
    cmd = CreateUpdate(di.update_repo())

    update = cmd.handle(
        user,
        date=form.date,
        title=form.title,
        body=form.body,
        color_id=form.color_id,
    )

    return {"id": str(update.id)}


@router.put("/{update_id}")
def edit_update(
    di: Di, user: CurrentUser, update_id: UpdateId, form: UpdateForm
) -> dict[str, bool]:
    cmd = EditUpdate(di.update_repo())

    cmd.handle(
        user,
        update_id,
        date=form.date,
        title=form.title,
        body=form.body,
        color_id=form.color_id,
    )

    return {"ok": True}


@router.delete("/{update_id}")
def delete_update(
    di: Di, user: CurrentUser, update_id: UpdateId
) -> dict[str, bool]:
    DeleteUpdate(di.update_repo()).handle(user, update_id)

    return {"ok": True}
