from famcal.application.exceptions import InvalidRange, InvalidRequest
from famcal.domain.calendar import (
    MAX_RANGE_DAYS,
    CalendarEvent,
    birthday_events,
    update_event,
)
from famcal.domain.repo.update_repo import IUpdateRepo
from famcal.domain.repo.user_repo import IUserRepo
from famcal.domain.user import parse_iso_date


class ListCalendarEvents:
    """
    Build the events shown on the calendar between `start` (inclusive) and
    `end` (exclusive): everyone's birthday, followed by the life updates.
    """

    def __init__(self, user_repo: IUserRepo, update_repo: IUpdateRepo) -> None:
        self.user_repo = user_repo
        self.update_repo = update_repo

    def handle(self, start: str, end: str) -> list[CalendarEvent]:
        try:
            start_date = parse_iso_date(start)
            end_date = parse_iso_date(end)

        except ValueError as ex:
            raise InvalidRequest(str(ex)) from ex

        if end_date <= start_date:
            raise InvalidRange("End date must be after start date")

        if (end_date - start_date).days > MAX_RANGE_DAYS:
            raise InvalidRange(f"Range cannot be longer than {MAX_RANGE_DAYS} days")

        users = self.user_repo.list_users()

        events = birthday_events(users, start_date, end_date)

        for update, author in self.update_repo.get_updates_in_range(
            start_date.isoformat(), end_date.isoformat()
        ):
            events.append(update_event(update, author))

        return events
