import re
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import ClassVar
from uuid import UUID

from famcal.domain.datetime import UtcDatetime
from famcal.domain.password_hash import PasswordHash

UserId = UUID


class Role(Enum):
    USER = "user"
    ADMIN = "admin"


@dataclass(frozen=True)
class NoPassword:
    """The account exists but has not set a password yet."""


@dataclass(frozen=True)
class HasPassword:
    hash: PasswordHash


Credential = NoPassword | HasPassword


USERNAME_REGEX = re.compile("^[a-z0-9._-]{3,32}$")
PAYMENT_HANDLE_REGEX = re.compile("^@[A-Za-z0-9_-]{1,30}$")
ISO_DATE_REGEX = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MAX_DISPLAY_NAME_LEN = 80


def normalize_username(username: str) -> str:
    username = username.strip().lower()

    if not USERNAME_REGEX.match(username):
        raise ValueError(
            f"Username does not match regex: {USERNAME_REGEX.pattern}"
        )

    return username


def normalize_display_name(display_name: str) -> str:
    display_name = display_name.strip()

    if not display_name:
        raise ValueError("Display name cannot be empty")

    if len(display_name) > MAX_DISPLAY_NAME_LEN:
        raise ValueError(
            f"Display name is too long (max {MAX_DISPLAY_NAME_LEN} chars)"
        )

    return display_name


def parse_iso_date(value: str) -> date:
    if not ISO_DATE_REGEX.match(value):
        raise ValueError("Date must be formatted as YYYY-MM-DD")

    try:
        return date.fromisoformat(value)

    except ValueError as ex:
        raise ValueError("Date is not a valid calendar date") from ex


def normalize_iso_date(value: str) -> str:
    return parse_iso_date(value).isoformat()


def normalize_payment_handle(handle: str) -> str:
    handle = handle.strip()

    if not PAYMENT_HANDLE_REGEX.match(handle):
        raise ValueError(
            f"Payment handle does not match regex: {PAYMENT_HANDLE_REGEX.pattern}"
        )

    return handle


@dataclass
class User:
    """
    A member of the calendar. `last_login_at` doubles as the onboarding
    marker: it stays `None` until a normal user has filled out their birthday
    and payment handle, and from then on it records the latest login.
    """

    id: UserId
    username: str
    credential: Credential = field(default_factory=NoPassword)
    role: Role = Role.USER
    display_name: str | None = None
    birthday: str | None = None
    payment_handle: str | None = None
    created_at: UtcDatetime = field(default_factory=UtcDatetime.now)
    last_login_at: UtcDatetime | None = None

    REQUIRED_PROFILE_FIELDS: ClassVar[tuple[str, ...]] = (
        "birthday",
        "payment_handle",
    )

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def must_set_password(self) -> bool:
        return isinstance(self.credential, NoPassword)

    @property
    def name(self) -> str:
        return self.display_name or self.username

    @property
    def has_required_profile(self) -> bool:
        return all(getattr(self, f) for f in self.REQUIRED_PROFILE_FIELDS)

    @property
    def needs_setup(self) -> bool:
        return (
            self.role == Role.USER
            and self.last_login_at is None
            and not self.has_required_profile
        )

    def verify_password(self, password: str) -> bool:
        if isinstance(self.credential, HasPassword):
            return self.credential.hash.verify(password)

        return False
