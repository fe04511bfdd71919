from dataclasses import MISSING, fields, is_dataclass
from typing import Any, TypeVar
from uuid import UUID, uuid4

from famcal.domain.datetime import UtcDatetime

T = TypeVar("T")


def get_default_value(field_type: Any) -> Any:  # type: ignore[misc]
    if field_type is UUID:
        return uuid4()

    if field_type is UtcDatetime:
        return UtcDatetime.now()

    if field_type is str:
        return ""

    raise TypeError(f"Cannot auto build field of type {field_type!r}")


def build(ty: type[T], **kwargs: Any) -> T:  # type: ignore[misc]
    """
    Create a dataclass, filling in required fields that aren't passed. Ids are
    random and timestamps are set to the current time.
    """

    if not is_dataclass(ty):
        raise TypeError("Type must be a dataclass")

    data = kwargs.copy()

    for field in fields(ty):
        if field.name in data:
            continue

        if field.default is MISSING and field.default_factory is MISSING:
            data[field.name] = get_default_value(field.type)

    return ty(**data)
