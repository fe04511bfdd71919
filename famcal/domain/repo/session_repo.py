from abc import abstractmethod

from famcal.domain.datetime import UtcDatetime
from famcal.domain.repo.transaction import ITransactional
from famcal.domain.session import Session, SessionId
from famcal.domain.user import User, UserId


class ISessionRepo(ITransactional):
    @abstractmethod
    def create(self, session: Session) -> None:
        ...

    @abstractmethod
    def get_session_and_user(
        self, id: SessionId
    ) -> tuple[Session, User] | None:
        """
        Return the session along with a fresh copy of its owner. Expiry is
        not checked here.
        """

    @abstractmethod
    def get_sessions_for_user(self, user_id: UserId) -> list[Session]:
        ...

    @abstractmethod
    def delete_session(self, id: SessionId) -> None:
        ...

    @abstractmethod
    def delete_sessions_for_user(self, user_id: UserId) -> None:
        ...

    @abstractmethod
    def delete_expired(self, now: UtcDatetime) -> int:
        """Delete expired sessions, returning how many were removed."""
