from abc import abstractmethod

from famcal.domain.datetime import UtcDatetime
from famcal.domain.repo.transaction import ITransactional
from famcal.domain.setup_token import PasswordSetupToken, SetupTokenId
from famcal.domain.user import UserId


class ISetupTokenRepo(ITransactional):
    @abstractmethod
    def replace_token_for_user(self, token: PasswordSetupToken) -> None:
        """Store `token`, deleting any other tokens the user has."""

    @abstractmethod
    def get_token(self, id: SetupTokenId) -> PasswordSetupToken | None:
        ...

    @abstractmethod
    def delete_token(self, id: SetupTokenId) -> None:
        ...

    @abstractmethod
    def delete_tokens_for_user(self, user_id: UserId) -> None:
        ...

    @abstractmethod
    def delete_expired(self, now: UtcDatetime) -> int:
        ...
