import logging

from famcal.application.exceptions import InvalidRequest, NotFound
from famcal.domain.datetime import UtcDatetime
from famcal.domain.repo.user_repo import IUserRepo
from famcal.domain.user import (
    Role,
    User,
    UserId,
    normalize_display_name,
    normalize_iso_date,
    normalize_payment_handle,
)


class UpdateProfile:
    """
    Update the profile of the logged in user. Only the fields that are passed
    are changed, everything else is left as is.

    New users are asked to fill out their birthday and payment handle before
    they can use the calendar. Once both are set, onboarding is finished by
    stamping the user's last login time.
    """

    def __init__(self, user_repo: IUserRepo) -> None:
        self.user_repo = user_repo
        self.logger = logging.getLogger("famcal")

    def handle(
        self,
        user_id: UserId,
        *,
        display_name: str | None = None,
        birthday: str | None = None,
        payment_handle: str | None = None,
    ) -> User:
        if display_name is None and birthday is None and payment_handle is None:
            raise InvalidRequest("Expected at least one profile field")

        try:
            if display_name is not None:
                display_name = normalize_display_name(display_name)

            if birthday is not None:
                birthday = normalize_iso_date(birthday)

            if payment_handle is not None:
                payment_handle = normalize_payment_handle(payment_handle)

        except ValueError as ex:
            raise InvalidRequest(str(ex)) from ex

        with self.user_repo.transaction():
            self.user_repo.update_profile(
                user_id,
                display_name=display_name,
                birthday=birthday,
                payment_handle=payment_handle,
            )

            user = self.user_repo.get_user_by_id(user_id)

            if not user:
                raise NotFound("User not found")

            if (
                user.role == Role.USER
                and user.last_login_at is None
                and user.has_required_profile
            ):
                user.last_login_at = UtcDatetime.now()
                self.user_repo.update_last_login(user.id, user.last_login_at)

                self.logger.info("User %s finished onboarding", user.id)

        return user
