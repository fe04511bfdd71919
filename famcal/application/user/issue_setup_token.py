import logging

from famcal.domain.repo.setup_token_repo import ISetupTokenRepo
from famcal.domain.setup_token import PasswordSetupToken
from famcal.domain.user import User


class IssueSetupToken:
    """
    Create a password setup token for a user that doesn't have a password
    yet. Issuing a new token invalidates any token issued before it.
    """

    def __init__(self, setup_token_repo: ISetupTokenRepo) -> None:
        self.setup_token_repo = setup_token_repo
        self.logger = logging.getLogger("famcal")

    def handle(self, user: User) -> PasswordSetupToken:
        token = PasswordSetupToken.new(user.id)

        self.setup_token_repo.replace_token_for_user(token)

        self.logger.info("Issued password setup token for user %s", user.id)

        return token
