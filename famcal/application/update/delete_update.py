import logging

from famcal.application.update.common import get_editable_update
from famcal.domain.repo.update_repo import IUpdateRepo
from famcal.domain.update import UpdateId
from famcal.domain.user import User


class DeleteUpdate:
    def __init__(self, update_repo: IUpdateRepo) -> None:
        self.update_repo = update_repo
        self.logger = logging.getLogger("famcal")

    def handle(self, user: User, update_id: UpdateId) -> None:
        update = get_editable_update(self.update_repo, user, update_id)

        self.update_repo.delete(update.id)

        self.logger.info("User %s deleted update %s", user.id, update.id)
