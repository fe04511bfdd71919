import os
import sqlite3
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from famcal.api.infra.db_connection import connect
from famcal.api.infra.migrate import migrate
from famcal.api.infra.user_repo import UserRepo
from famcal.application.exceptions import InvalidRequest, NotFound
from famcal.application.user.create_user import CreateUser
from famcal.application.user.delete_user import DeleteUser
from famcal.application.user.issue_setup_token import IssueSetupToken
from famcal.application.user.reset_password import ResetPassword
from famcal.application.user.update_profile import UpdateProfile
from famcal.application.user.update_user import UpdateUser
from famcal.domain.datetime import UtcDatetime
from famcal.domain.setup_token import PasswordSetupToken
from famcal.domain.user import HasPassword, NoPassword, Role, User, UserId
from test.api.common import TEST_ADMIN_PW
from test.common import build

PASSWORD = "password123456"  # noqa: S105


def test_create_user_without_password() -> None:
    user_repo = MagicMock()

    user = CreateUser(user_repo).handle(" Bob ", display_name=" Bobby ")

    assert user.username == "bob"
    assert user.display_name == "Bobby"
    assert user.role == Role.USER
    assert user.credential == NoPassword()

    user_repo.create_user.assert_called_once_with(user)


def test_create_admin_with_password() -> None:
    user_repo = MagicMock()

    user = CreateUser(user_repo).handle("carol", password=PASSWORD, role=Role.ADMIN)

    assert user.is_admin
    assert isinstance(user.credential, HasPassword)
    assert user.verify_password(PASSWORD)


def test_create_user_validation() -> None:
    user_repo = MagicMock()

    invalid = [
        ("ab", {}),
        ("Not Valid", {}),
        ("bob", {"password": "short"}),
        ("bob", {"display_name": "  "}),
    ]

    for username, kwargs in invalid:
        with pytest.raises(InvalidRequest):
            CreateUser(user_repo).handle(username, **kwargs)

    user_repo.create_user.assert_not_called()


def test_update_user() -> None:
    user_repo = MagicMock()
    user = build(User, username="bob")
    user_repo.get_user_by_id.return_value = user

    updated = UpdateUser(user_repo).handle(
        user.id,
        username="Robert",
        display_name="Robert",
        role=Role.ADMIN,
        birthday="1990-01-02",
        payment_handle="@robert",
    )

    assert updated.username == "robert"
    assert updated.display_name == "Robert"
    assert updated.is_admin
    assert updated.birthday == "1990-01-02"
    assert updated.payment_handle == "@robert"

    user_repo.update_user.assert_called_once_with(updated)


def test_reset_onboarding_clears_profile() -> None:
    user_repo = MagicMock()
    user = build(
        User,
        username="bob",
        birthday="1990-01-02",
        payment_handle="@bob",
        last_login_at=UtcDatetime.now(),
    )
    user_repo.get_user_by_id.return_value = user

    updated = UpdateUser(user_repo).handle(user.id, reset_onboarding=True)

    assert updated.birthday is None
    assert updated.payment_handle is None
    assert updated.last_login_at is None
    assert updated.needs_setup


def test_update_user_validation() -> None:
    user_repo = MagicMock()
    user_repo.get_user_by_id.return_value = build(User, username="bob")

    with pytest.raises(InvalidRequest):
        UpdateUser(user_repo).handle(build(User).id, birthday="1990-13-01")

    user_repo.update_user.assert_not_called()


def test_update_user_reads_and_writes_in_one_transaction() -> None:
    user_repo = MagicMock()
    user = build(User, username="bob")
    user_repo.get_user_by_id.return_value = user

    UpdateUser(user_repo).handle(user.id, display_name="Bobby")

    steps = [
        c[0]
        for c in user_repo.mock_calls
        if c[0] in {"get_user_by_id", "update_user"} or "__e" in c[0]
    ]

    assert steps == [
        "transaction().__enter__",
        "get_user_by_id",
        "update_user",
        "transaction().__exit__",
    ]


def test_admin_edit_does_not_undo_concurrent_onboarding(tmp_path: Path) -> None:
    db_file = str(tmp_path / "famcal.db3")

    admin_conn = connect(db_file)

    with patch.dict(os.environ, {"FAMCAL_ADMIN_PW": TEST_ADMIN_PW}):
        migrate(admin_conn)

    user_conn = connect(db_file)
    user_conn.execute("PRAGMA busy_timeout = 0;")

    bob = CreateUser(UserRepo(admin_conn)).handle("bob")

    admin_repo = UserRepo(admin_conn)
    read_user = admin_repo.get_user_by_id

    def read_then_finish_onboarding(user_id: UserId) -> User | None:
        user = read_user(user_id)

        # The row is locked until the admin edit is written
        with pytest.raises(sqlite3.OperationalError, match="locked"):
            UpdateProfile(UserRepo(user_conn)).handle(
                user_id, birthday="1990-05-17", payment_handle="@bob"
            )

        return user

    admin_repo.get_user_by_id = read_then_finish_onboarding  # type: ignore[method-assign]

    UpdateUser(admin_repo).handle(bob.id, display_name="Bobby")

    UpdateProfile(UserRepo(user_conn)).handle(
        bob.id, birthday="1990-05-17", payment_handle="@bob"
    )

    user = UserRepo(admin_conn).get_user_by_id(bob.id)

    assert user
    assert user.display_name == "Bobby"
    assert user.birthday == "1990-05-17"
    assert user.payment_handle == "@bob"
    assert user.last_login_at
    assert not user.needs_setup

    user_conn.close()
    admin_conn.close()


def test_update_missing_user() -> None:
    user_repo = MagicMock()
    user_repo.get_user_by_id.return_value = None

    with pytest.raises(NotFound):
        UpdateUser(user_repo).handle(build(User).id, display_name="Ghost")


def test_delete_user() -> None:
    user_repo = MagicMock()
    user = build(User, username="bob")

    DeleteUser(user_repo).handle(user.id)

    user_repo.delete_user.assert_called_once_with(user.id)


def test_reset_password() -> None:
    user_repo = MagicMock()
    user = build(User, username="bob")

    ResetPassword(user_repo).handle(user.id, PASSWORD)

    user_id, hash = user_repo.reset_password_hash.call_args[0]

    assert user_id == user.id
    assert hash.verify(PASSWORD)


def test_reset_password_validation() -> None:
    user_repo = MagicMock()

    with pytest.raises(InvalidRequest):
        ResetPassword(user_repo).handle(build(User).id, "short")

    user_repo.reset_password_hash.assert_not_called()


def test_issue_setup_token() -> None:
    setup_token_repo = MagicMock()
    user = build(User, username="bob")

    token = IssueSetupToken(setup_token_repo).handle(user)

    assert token.user_id == user.id
    assert token.expires_at - token.created_at == PasswordSetupToken.TTL
    assert not token.is_expired()

    setup_token_repo.replace_token_for_user.assert_called_once_with(token)
