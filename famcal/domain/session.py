from dataclasses import dataclass, field
from datetime import timedelta
from secrets import token_urlsafe
from typing import Self

from famcal.domain.datetime import UtcDatetime
from famcal.domain.user import UserId

SessionId = str

# 32 random bytes, ie 256 bits of entropy per token
TOKEN_BYTES = 32


@dataclass(frozen=True)
class Session:
    """
    A logged in browser. The id is the value of the session cookie, and the
    CSRF token is handed to the page script, which must echo it back on every
    state changing request.
    """

    id: SessionId
    user_id: UserId
    csrf_token: str
    expires_at: UtcDatetime
    created_at: UtcDatetime = field(default_factory=UtcDatetime.now)

    @classmethod
    def new(cls, user_id: UserId, ttl: timedelta) -> Self:
        now = UtcDatetime.now()

        return cls(
            id=token_urlsafe(TOKEN_BYTES),
            user_id=user_id,
            csrf_token=token_urlsafe(TOKEN_BYTES),
            created_at=now,
            expires_at=now.after(ttl),
        )

    def is_expired(self, now: UtcDatetime | None = None) -> bool:
        return (now or UtcDatetime.now()) >= self.expires_at
