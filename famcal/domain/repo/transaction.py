from abc import ABC, abstractmethod
from contextlib import AbstractContextManager


class ITransactional(ABC):
    @abstractmethod
    def transaction(self) -> AbstractContextManager[None]:
        """
        Group writes so they are committed (or rolled back) together. Repos
        that share a connection share the transaction, and nesting a
        transaction inside another one joins the outer transaction.
        """
