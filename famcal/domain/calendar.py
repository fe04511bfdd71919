import calendar
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Literal

from famcal.domain.update import Update
from famcal.domain.user import User, parse_iso_date

EventType = Literal["birthday", "update"]

# Keeps a single request from expanding into an unbounded number of events
MAX_RANGE_DAYS = 400


@dataclass(frozen=True)
class CalendarEvent:
    id: str
    type: EventType
    title: str
    start: str
    all_day: bool = True
    extended_props: dict[str, Any] = field(default_factory=dict)  # type: ignore[misc]


def birthday_occurrence(birthday: str, year: int) -> date:
    """
    Where a birthday lands in a given year. Leap day birthdays are celebrated
    on Feb 28 in non-leap years.
    """

    born = parse_iso_date(birthday)

    if (born.month, born.day) == (2, 29) and not calendar.isleap(year):
        return date(year, 2, 28)

    return date(year, born.month, born.day)


def birthday_events(users: list[User], start: date, end: date) -> list[CalendarEvent]:
    events: list[CalendarEvent] = []

    for user in users:
        if not user.birthday:
            continue

        for year in range(start.year, end.year + 1):
            day = birthday_occurrence(user.birthday, year)

            if not start <= day < end:
                continue

            title = f"{user.name} • Birthday"

            if user.payment_handle:
                title += f" • {user.payment_handle}"

            events.append(
                CalendarEvent(
                    id=f"bday:{user.id}:{day.isoformat()}",
                    type="birthday",
                    title=title,
                    start=day.isoformat(),
                    extended_props={
                        "userId": str(user.id),
                        "name": user.name,
                        "paymentHandle": user.payment_handle,
                    },
                )
            )

    return events


def update_event(update: Update, author: User) -> CalendarEvent:
    return CalendarEvent(
        id=f"upd:{update.id}",
        type="update",
        title=update.title,
        start=update.date,
        extended_props={
            "updateId": str(update.id),
            "userId": str(update.user_id),
            "author": author.name,
            "body": update.body,
            "colorId": update.color_id,
        },
    )
