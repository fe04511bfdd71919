import logging

from famcal.application.exceptions import InvalidRequest
from famcal.domain.password_hash import PasswordHash
from famcal.domain.repo.user_repo import IUserRepo
from famcal.domain.user import UserId


class ResetPassword:
    """
    Force a new password onto an account. This should only be called by
    admins. Every session and setup token of the user is revoked, so a stolen
    session cannot outlive a password reset.
    """

    def __init__(self, user_repo: IUserRepo) -> None:
        self.user_repo = user_repo
        self.logger = logging.getLogger("famcal")

    def handle(self, user_id: UserId, password: str) -> None:
        try:
            hash = PasswordHash.from_password(password)

        except ValueError as ex:
            raise InvalidRequest(str(ex)) from ex

        self.user_repo.reset_password_hash(user_id, hash)

        self.logger.info("Reset password for user %s", user_id)
