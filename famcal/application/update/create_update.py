import logging
from uuid import uuid4

from famcal.application.exceptions import InvalidRequest
from famcal.domain.repo.update_repo import IUpdateRepo
from famcal.domain.update import Update
from famcal.domain.user import User


class CreateUpdate:
    def __init__(self, update_repo: IUpdateRepo) -> None:
        self.update_repo = update_repo
        self.logger = logging.getLogger("famcal")

    def handle(
        self,
        user: User,
        *,
        date: str,
        title: str,
        body: str | None = None,
        color_id: str | None = None,
    ) -> Update:
        try:
            update = Update(
                id=uuid4(),
                user_id=user.id,
                date=date,
                title=title,
                body=body,
                color_id=color_id,
            )

        except ValueError as ex:
            raise InvalidRequest(str(ex)) from ex

        self.update_repo.create(update)

        self.logger.info("User %s posted update %s", user.id, update.id)

        return update
