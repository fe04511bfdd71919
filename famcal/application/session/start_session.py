import logging
from dataclasses import dataclass, replace
from datetime import timedelta

from famcal.domain.datetime import UtcDatetime
from famcal.domain.repo.session_repo import ISessionRepo
from famcal.domain.repo.user_repo import IUserRepo
from famcal.domain.session import Session
from famcal.domain.user import User


@dataclass(frozen=True)
class LoginSucceeded:
    user: User
    session: Session


class StartSession:
    """
    Log a user in on a fresh session. Users are limited to one active session:
    every existing session of the user is deleted before the new one is
    inserted, so logging in elsewhere logs out the old browser. If two logins
    race, the last one to commit wins.

    If the user doesn't need to go through onboarding, their last login time
    is stamped as well. Call this inside of a transaction if it needs to be
    atomic with other writes, otherwise it opens its own.
    """

    def __init__(
        self,
        user_repo: IUserRepo,
        session_repo: ISessionRepo,
        session_ttl: timedelta,
    ) -> None:
        self.user_repo = user_repo
        self.session_repo = session_repo
        self.session_ttl = session_ttl
        self.logger = logging.getLogger("famcal")

    def handle(self, user: User) -> LoginSucceeded:
        session = Session.new(user.id, self.session_ttl)

        with self.session_repo.transaction():
            self.session_repo.delete_sessions_for_user(user.id)
            self.session_repo.create(session)

            if not user.needs_setup:
                now = UtcDatetime.now()
                self.user_repo.update_last_login(user.id, now)
                user = replace(user, last_login_at=now)

        self.logger.info("User %s started a new session", user.id)

        return LoginSucceeded(user, session)
