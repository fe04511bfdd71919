from abc import abstractmethod

from famcal.domain.datetime import UtcDatetime
from famcal.domain.password_hash import PasswordHash
from famcal.domain.repo.transaction import ITransactional
from famcal.domain.user import User, UserId


class IUserRepo(ITransactional):
    @abstractmethod
    def get_user_by_username(self, username: str) -> User | None:
        """Lookup a user by name, ignoring case."""

    @abstractmethod
    def get_user_by_id(self, id: UserId) -> User | None:
        pass

    @abstractmethod
    def list_users(self) -> list[User]:
        pass

    @abstractmethod
    def create_user(self, user: User) -> UserId:
        """Raise `UsernameTaken` if the username is already in use."""

    @abstractmethod
    def update_user(self, user: User) -> None:
        """
        Persist everything except the credential. Raise `NotFound`,
        `UsernameTaken`, or `CannotRemoveLastAdmin` if the update would leave
        the system without an admin.
        """

    @abstractmethod
    def delete_user(self, id: UserId) -> None:
        """
        Delete a user along with their sessions, setup tokens, and updates.
        Raise `NotFound`, or `CannotDeleteLastAdmin` for the sole admin.
        """

    @abstractmethod
    def set_password_hash(self, id: UserId, hash: PasswordHash) -> None:
        pass

    @abstractmethod
    def reset_password_hash(self, id: UserId, hash: PasswordHash) -> None:
        """
        Like `set_password_hash`, but also revokes every session and setup
        token belonging to the user.
        """

    @abstractmethod
    def update_profile(
        self,
        id: UserId,
        *,
        display_name: str | None = None,
        birthday: str | None = None,
        payment_handle: str | None = None,
    ) -> None:
        """Update only the fields that are not `None`."""

    @abstractmethod
    def update_last_login(self, id: UserId, at: UtcDatetime) -> None:
        pass

    @abstractmethod
    def count_admins(self) -> int:
        pass
