from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest

from famcal.application.exceptions import InvalidCredentials, InvalidRequest
from famcal.application.session.start_session import LoginSucceeded
from famcal.application.user.local_user_login import (
    LocalUserLogin,
    PasswordSetupRequired,
)
from famcal.domain.password_hash import PasswordHash
from famcal.domain.user import HasPassword, Role, User
from test.common import build

PASSWORD = "password123456"  # noqa: S105


def make_cmd(user: User | None) -> tuple[LocalUserLogin, MagicMock, MagicMock, MagicMock]:
    user_repo = MagicMock()
    session_repo = MagicMock()
    setup_token_repo = MagicMock()

    user_repo.get_user_by_username.return_value = user

    cmd = LocalUserLogin(
        user_repo, session_repo, setup_token_repo, timedelta(days=30)
    )

    return cmd, user_repo, session_repo, setup_token_repo


def test_login_as_unknown_user_fails() -> None:
    cmd, _, session_repo, _ = make_cmd(None)

    with (
        patch(
            "famcal.application.user.local_user_login.verify_dummy_password"
        ) as dummy,
        pytest.raises(InvalidCredentials, match="Incorrect username or password"),
    ):
        cmd.handle("nobody", "any password")

    # A hash is still verified to keep the timing the same
    dummy.assert_called_once()

    session_repo.create.assert_not_called()


def test_incorrect_password_fails() -> None:
    user = build(
        User,
        username="bob",
        credential=HasPassword(PasswordHash.from_password(PASSWORD)),
    )

    cmd, _, session_repo, _ = make_cmd(user)

    with pytest.raises(InvalidCredentials, match="Incorrect username or password"):
        cmd.handle("bob", "invalid password")

    session_repo.create.assert_not_called()


def test_login_with_correct_password_works() -> None:
    user = build(
        User,
        username="bob",
        role=Role.ADMIN,
        credential=HasPassword(PasswordHash.from_password(PASSWORD)),
    )

    cmd, user_repo, session_repo, setup_token_repo = make_cmd(user)

    result = cmd.handle("bob", PASSWORD)

    assert isinstance(result, LoginSucceeded)
    assert result.user.id == user.id
    assert result.session.user_id == user.id

    session_repo.delete_sessions_for_user.assert_called_once_with(user.id)
    session_repo.create.assert_called_once_with(result.session)
    setup_token_repo.replace_token_for_user.assert_not_called()


def test_user_without_password_gets_setup_token() -> None:
    user = build(User, username="bob", display_name="Bob")

    cmd, _, session_repo, setup_token_repo = make_cmd(user)

    result = cmd.handle("bob", "whatever is typed in")

    assert isinstance(result, PasswordSetupRequired)
    assert result.username == "bob"
    assert result.display_name == "Bob"

    token = setup_token_repo.replace_token_for_user.call_args[0][0]

    assert token.id == result.setup_token
    assert token.user_id == user.id

    session_repo.create.assert_not_called()


def test_invalid_input_is_rejected_before_lookup() -> None:
    cmd, user_repo, _, _ = make_cmd(None)

    for username, password in (
        ("", "password"),
        ("   ", "password"),
        ("x" * 65, "password"),
        ("bob", "x" * 257),
    ):
        with pytest.raises(InvalidRequest):
            cmd.handle(username, password)

    user_repo.get_user_by_username.assert_not_called()


def test_username_is_stripped() -> None:
    cmd, user_repo, _, _ = make_cmd(None)

    with pytest.raises(InvalidCredentials):
        cmd.handle("  bob  ", "password")

    user_repo.get_user_by_username.assert_called_once_with("bob")
