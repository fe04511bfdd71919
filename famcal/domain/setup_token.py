from dataclasses import dataclass, field
from datetime import timedelta
from secrets import token_urlsafe
from typing import ClassVar, Self

from famcal.domain.datetime import UtcDatetime
from famcal.domain.session import TOKEN_BYTES
from famcal.domain.user import UserId

SetupTokenId = str


@dataclass(frozen=True)
class PasswordSetupToken:
    """
    A short lived, single use token that lets an account without a password
    pick one. It is handed out by the login endpoint instead of a session.
    """

    id: SetupTokenId
    user_id: UserId
    expires_at: UtcDatetime
    created_at: UtcDatetime = field(default_factory=UtcDatetime.now)

    TTL: ClassVar[timedelta] = timedelta(minutes=15)

    @classmethod
    def new(cls, user_id: UserId) -> Self:
        now = UtcDatetime.now()

        return cls(
            id=token_urlsafe(TOKEN_BYTES),
            user_id=user_id,
            created_at=now,
            expires_at=now.after(cls.TTL),
        )

    def is_expired(self, now: UtcDatetime | None = None) -> bool:
        return (now or UtcDatetime.now()) >= self.expires_at
