from abc import abstractmethod

from famcal.domain.repo.transaction import ITransactional
from famcal.domain.update import Update, UpdateId
from famcal.domain.user import User


class IUpdateRepo(ITransactional):
    @abstractmethod
    def create(self, update: Update) -> None:
        ...

    @abstractmethod
    def get_update_by_id(self, id: UpdateId) -> Update | None:
        ...

    @abstractmethod
    def update(self, update: Update) -> None:
        ...

    @abstractmethod
    def delete(self, id: UpdateId) -> None:
        ...

    @abstractmethod
    def get_updates_in_range(
        self, start: str, end: str
    ) -> list[tuple[Update, User]]:
        """
        Updates dated on or after `start` and before `end` (ISO dates), along
        with their authors, oldest first.
        """
