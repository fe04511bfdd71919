import logging

from famcal.domain.repo.user_repo import IUserRepo
from famcal.domain.user import UserId


class DeleteUser:
    """
    Delete an account, along with everything it owns. The repository refuses
    to delete the last admin.
    """

    def __init__(self, user_repo: IUserRepo) -> None:
        self.user_repo = user_repo
        self.logger = logging.getLogger("famcal")

    def handle(self, user_id: UserId) -> None:
        self.user_repo.delete_user(user_id)

        self.logger.info("Deleted account %s", user_id)
