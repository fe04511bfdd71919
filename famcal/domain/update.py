import re
from dataclasses import dataclass, field
from typing import ClassVar
from uuid import UUID

from famcal.domain.datetime import UtcDatetime
from famcal.domain.user import UserId, normalize_iso_date

UpdateId = UUID


@dataclass
class Update:
    """A "life update" post pinned to a single day on the calendar."""

    id: UpdateId
    user_id: UserId
    date: str
    title: str
    body: str | None = None
    color_id: str | None = None
    created_at: UtcDatetime = field(default_factory=UtcDatetime.now)
    updated_at: UtcDatetime = field(default_factory=UtcDatetime.now)

    MAX_TITLE_LEN: ClassVar[int] = 120
    MAX_BODY_LEN: ClassVar[int] = 2000
    COLOR_ID_REGEX: ClassVar[re.Pattern[str]] = re.compile("^[a-z0-9-]{1,32}$")

    def __post_init__(self) -> None:
        self.date = normalize_iso_date(self.date)

        self.title = self.title.strip()

        if not self.title:
            raise ValueError("Title cannot be empty")

        if len(self.title) > self.MAX_TITLE_LEN:
            raise ValueError(f"Title is too long (max {self.MAX_TITLE_LEN} chars)")

        if self.body is not None:
            self.body = self.body.strip() or None

        if self.body and len(self.body) > self.MAX_BODY_LEN:
            raise ValueError(f"Body is too long (max {self.MAX_BODY_LEN} chars)")

        if self.color_id is not None and not self.COLOR_ID_REGEX.match(self.color_id):
            raise ValueError(
                f"Color id does not match regex: {self.COLOR_ID_REGEX.pattern}"
            )
