from typing import Any

from famcal.domain.calendar import CalendarEvent
from famcal.domain.datetime import UtcDatetime
from famcal.domain.user import User


def _timestamp(dt: UtcDatetime | None) -> str | None:
    return dt.isoformat_z() if dt else None


def user_view(user: User) -> dict[str, Any]:  # type: ignore[misc]
    """The user as seen by themselves. Never includes the password hash."""

    return {
        "id": str(user.id),
        "username": user.username,
        "displayName": user.display_name,
        "role": user.role.value,
        "birthday": user.birthday,
        "paymentHandle": user.payment_handle,
        "lastLoginAt": _timestamp(user.last_login_at),
        "needsSetup": user.needs_setup,
    }


def admin_user_view(user: User) -> dict[str, Any]:  # type: ignore[misc]
    return {
        **user_view(user),
        "createdAt": _timestamp(user.created_at),
        "mustSetPassword": user.must_set_password,
    }


def event_view(event: CalendarEvent) -> dict[str, Any]:  # type: ignore[misc]
    return {
        "id": event.id,
        "type": event.type,
        "title": event.title,
        "start": event.start,
        "allDay": event.all_day,
        "extendedProps": event.extended_props,
    }
