import logging
from dataclasses import replace

from famcal.application.exceptions import InvalidRequest
from famcal.application.update.common import get_editable_update
from famcal.domain.datetime import UtcDatetime
from famcal.domain.repo.update_repo import IUpdateRepo
from famcal.domain.update import Update, UpdateId
from famcal.domain.user import User


class EditUpdate:
    def __init__(self, update_repo: IUpdateRepo) -> None:
        self.update_repo = update_repo
        self.logger = logging.getLogger("famcal")

    def handle(
        self,
        user: User,
        update_id: UpdateId,
        *,
        date: str,
        title: str,
        body: str | None = None,
        color_id: str | None = None,
    ) -> Update:
        update = get_editable_update(self.update_repo, user, update_id)

        try:
            update = replace(
                update,
                date=date,
                title=title,
                body=body,
                color_id=color_id,
                updated_at=UtcDatetime.now(),
            )

        except ValueError as ex:
            raise InvalidRequest(str(ex)) from ex

        self.update_repo.update(update)

        self.logger.info("User %s edited update %s", user.id, update.id)

        return update
