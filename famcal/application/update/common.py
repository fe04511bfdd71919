from famcal.application.exceptions import Forbidden, NotFound
from famcal.domain.repo.update_repo import IUpdateRepo
from famcal.domain.update import Update, UpdateId
from famcal.domain.user import User


def get_editable_update(
    update_repo: IUpdateRepo, user: User, update_id: UpdateId
) -> Update:
    """Updates can only be changed by their author, or by an admin."""

    update = update_repo.get_update_by_id(update_id)

    if not update:
        raise NotFound("Update not found")

    if update.user_id != user.id and not user.is_admin:
        raise Forbidden("You are not allowed to modify this update")

    return update
