from typing import Any

from fastapi import APIRouter

from famcal.api.endpoints.auth_util import CurrentUser
from famcal.api.endpoints.di import Di
from famcal.api.endpoints.views import event_view
from famcal.application.calendar.list_calendar_events import ListCalendarEvents

router = APIRouter(prefix="/api/calendar")


@router.get("")
def calendar(  # type: ignore[misc]
    di: Di, _: CurrentUser, start: str = "", end: str = ""
) -> dict[str, Any]:
    cmd = ListCalendarEvents(di.user_repo(), di.update_repo())

    events = cmd.handle(start, end)

    return {"events": [event_view(event) for event in events]}
