import pytest

from famcal.domain.datetime import UtcDatetime
from famcal.domain.password_hash import PasswordHash
from famcal.domain.user import (
    HasPassword,
    NoPassword,
    Role,
    User,
    normalize_display_name,
    normalize_iso_date,
    normalize_payment_handle,
    normalize_username,
)
from test.common import build


def test_username_must_match_pattern() -> None:
    tests = {
        "bob": "bob",
        " Bob ": "bob",
        "bob.smith-2_x": "bob.smith-2_x",
        "x" * 32: "x" * 32,
        "ab": None,
        "x" * 33: None,
        "has space": None,
        "bob!": None,
        "": None,
    }

    for username, expected in tests.items():
        if expected:
            assert normalize_username(username) == expected

        else:
            with pytest.raises(ValueError, match="Username does not match regex"):
                normalize_username(username)


def test_display_name() -> None:
    assert normalize_display_name("  Bob  ") == "Bob"
    assert normalize_display_name("x" * 80) == "x" * 80

    with pytest.raises(ValueError, match="cannot be empty"):
        normalize_display_name("   ")

    with pytest.raises(ValueError, match="too long"):
        normalize_display_name("x" * 81)


def test_iso_date() -> None:
    assert normalize_iso_date("2024-02-29") == "2024-02-29"

    for date in ("2023-02-29", "2024-13-01", "2024-1-1", "01/02/2024", ""):
        with pytest.raises(ValueError):
            normalize_iso_date(date)


def test_payment_handle() -> None:
    assert normalize_payment_handle(" @bob_smith-1 ") == "@bob_smith-1"
    assert normalize_payment_handle("@" + "x" * 30) == "@" + "x" * 30

    for handle in ("bob", "@", "@" + "x" * 31, "@bob smith", "@bob!"):
        with pytest.raises(ValueError, match="Payment handle does not match"):
            normalize_payment_handle(handle)


def test_user_without_password_must_set_one() -> None:
    user = build(User, username="bob")

    assert user.credential == NoPassword()
    assert user.must_set_password
    assert not user.verify_password("")
    assert not user.verify_password("anything at all")


def test_user_with_password() -> None:
    hash = PasswordHash.from_password("password123456")
    user = build(User, username="bob", credential=HasPassword(hash))

    assert not user.must_set_password
    assert user.verify_password("password123456")
    assert not user.verify_password("password1234567")


def test_name_falls_back_to_username() -> None:
    assert build(User, username="bob").name == "bob"
    assert build(User, username="bob", display_name="Bob").name == "Bob"


def test_needs_setup() -> None:
    tests = [
        ({}, True),
        ({"birthday": "1990-01-01"}, True),
        ({"payment_handle": "@bob"}, True),
        ({"birthday": "1990-01-01", "payment_handle": "@bob"}, False),
        ({"last_login_at": UtcDatetime.now()}, False),
        ({"role": Role.ADMIN}, False),
    ]

    for kwargs, needs_setup in tests:
        user = build(User, username="bob", **kwargs)

        assert user.needs_setup == needs_setup, kwargs
