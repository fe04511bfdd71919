import logging
from uuid import uuid4

from famcal.application.exceptions import InvalidRequest
from famcal.domain.password_hash import PasswordHash
from famcal.domain.repo.user_repo import IUserRepo
from famcal.domain.user import (
    Credential,
    HasPassword,
    NoPassword,
    Role,
    User,
    normalize_display_name,
    normalize_username,
)


class CreateUser:
    """
    Create a new account. This should only be called by admins. Accounts can
    be created without a password, in which case the user picks one the first
    time they log in.
    """

    def __init__(self, user_repo: IUserRepo) -> None:
        self.user_repo = user_repo
        self.logger = logging.getLogger("famcal")

    def handle(
        self,
        username: str,
        *,
        display_name: str | None = None,
        password: str | None = None,
        role: Role = Role.USER,
    ) -> User:
        try:
            username = normalize_username(username)

            if display_name is not None:
                display_name = normalize_display_name(display_name)

            credential: Credential = (
                HasPassword(PasswordHash.from_password(password))
                if password is not None
                else NoPassword()
            )

        except ValueError as ex:
            raise InvalidRequest(str(ex)) from ex

        user = User(
            id=uuid4(),
            username=username,
            credential=credential,
            role=role,
            display_name=display_name,
        )

        self.user_repo.create_user(user)

        self.logger.info("Created %s account %s", role.value, user.id)

        return user
