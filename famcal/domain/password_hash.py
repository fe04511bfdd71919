from typing import ClassVar, Self

from passlib.context import CryptContext

# Argon2id, tuned so a verify costs tens of milliseconds
_context = CryptContext(
    schemes=["argon2"],
    argon2__type="ID",
    argon2__memory_cost=19 * 1024,
    argon2__time_cost=2,
    argon2__parallelism=1,
)


class PasswordHash:
    hash: str

    MIN_PASSWORD_LEN: ClassVar[int] = 12
    MAX_PASSWORD_LEN: ClassVar[int] = 256

    def __init__(self, hash: str) -> None:
        self.hash = hash

    @classmethod
    def validate_password(cls, password: str) -> None:
        if len(password) < cls.MIN_PASSWORD_LEN:
            raise ValueError(
                f"Password must be at least {cls.MIN_PASSWORD_LEN} characters"
            )

        if len(password) > cls.MAX_PASSWORD_LEN:
            raise ValueError(
                f"Password cannot be longer than {cls.MAX_PASSWORD_LEN} characters"
            )

    @classmethod
    def from_password(cls, password: str) -> Self:
        cls.validate_password(password)

        return cls(_context.hash(password))

    def verify(self, password: str) -> bool:
        return _context.verify(password, self.hash)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, PasswordHash) and other.hash == self.hash

    def __hash__(self) -> int:
        return hash(self.hash)

    def __str__(self) -> str:
        return self.hash


def verify_dummy_password() -> None:
    """
    Burn roughly the same time as a real verification. Used when the account
    being logged into doesn't exist, so the response time doesn't reveal it.
    """

    _context.dummy_verify()
