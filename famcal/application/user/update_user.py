import logging

from famcal.application.exceptions import InvalidRequest, NotFound
from famcal.domain.repo.user_repo import IUserRepo
from famcal.domain.user import (
    Role,
    User,
    UserId,
    normalize_display_name,
    normalize_iso_date,
    normalize_payment_handle,
    normalize_username,
)


class UpdateUser:
    """
    Admin edit of an account. Only the fields that are passed are changed.

    Passing `reset_onboarding` clears the birthday, payment handle, and last
    login time, which makes the user go through onboarding again the next time
    they log in. It is applied before any other field, so it can be combined
    with setting a new display name, for example.
    """

    def __init__(self, user_repo: IUserRepo) -> None:
        self.user_repo = user_repo
        self.logger = logging.getLogger("famcal")

    def handle(
        self,
        user_id: UserId,
        *,
        username: str | None = None,
        display_name: str | None = None,
        role: Role | None = None,
        birthday: str | None = None,
        payment_handle: str | None = None,
        reset_onboarding: bool = False,
    ) -> User:
        try:
            if username is not None:
                username = normalize_username(username)

            if display_name is not None:
                display_name = normalize_display_name(display_name)

            if birthday is not None:
                birthday = normalize_iso_date(birthday)

            if payment_handle is not None:
                payment_handle = normalize_payment_handle(payment_handle)

        except ValueError as ex:
            raise InvalidRequest(str(ex)) from ex

        # The whole row is written back, so it must not change between the
        # read and the write (ie, the user finishing onboarding).
        with self.user_repo.transaction():
            user = self.user_repo.get_user_by_id(user_id)

            if not user:
                raise NotFound("User not found")

            if reset_onboarding:
                user.birthday = None
                user.payment_handle = None
                user.last_login_at = None

            if username is not None:
                user.username = username

            if display_name is not None:
                user.display_name = display_name

            if birthday is not None:
                user.birthday = birthday

            if payment_handle is not None:
                user.payment_handle = payment_handle

            if role is not None:
                user.role = role

            self.user_repo.update_user(user)

        self.logger.info("Updated account %s", user.id)

        return user
