from datetime import timedelta
from unittest.mock import MagicMock, call

from famcal.application.session.logout import Logout
from famcal.application.session.purge_expired import PurgeExpiredCredentials
from famcal.application.session.resolve_session import ResolveSession
from famcal.application.session.start_session import StartSession
from famcal.domain.datetime import UtcDatetime
from famcal.domain.session import Session
from famcal.domain.user import Role, User
from test.common import build


def test_start_session_replaces_existing_sessions() -> None:
    user_repo = MagicMock()
    session_repo = MagicMock()
    user = build(User, username="admin", role=Role.ADMIN)

    result = StartSession(user_repo, session_repo, timedelta(days=7)).handle(user)

    writes = [
        c
        for c in session_repo.mock_calls
        if c[0] in {"delete_sessions_for_user", "create"}
    ]

    # Old sessions must be gone before the new one is created
    assert writes == [
        call.delete_sessions_for_user(user.id),
        call.create(result.session),
    ]

    session = result.session

    assert session.user_id == user.id
    assert session.id != session.csrf_token
    assert len(session.id) >= 43
    assert session.expires_at - session.created_at == timedelta(days=7)

    assert result.user.last_login_at
    user_repo.update_last_login.assert_called_once_with(
        user.id, result.user.last_login_at
    )


def test_start_session_does_not_stamp_users_needing_setup() -> None:
    user_repo = MagicMock()
    session_repo = MagicMock()
    user = build(User, username="bob")

    assert user.needs_setup

    result = StartSession(user_repo, session_repo, timedelta(days=7)).handle(user)

    assert result.user.last_login_at is None
    user_repo.update_last_login.assert_not_called()


def test_resolve_valid_session() -> None:
    user = build(User, username="bob")
    session = Session.new(user.id, timedelta(days=1))

    session_repo = MagicMock()
    session_repo.get_session_and_user.return_value = (session, user)

    assert ResolveSession(session_repo).handle(session.id) == (session, user)
    session_repo.delete_session.assert_not_called()


def test_resolve_expired_session_deletes_it() -> None:
    user = build(User, username="bob")
    session = Session.new(user.id, timedelta(seconds=-1))

    session_repo = MagicMock()
    session_repo.get_session_and_user.return_value = (session, user)

    assert ResolveSession(session_repo).handle(session.id) is None
    session_repo.delete_session.assert_called_once_with(session.id)


def test_resolve_missing_session() -> None:
    session_repo = MagicMock()
    session_repo.get_session_and_user.return_value = None

    assert ResolveSession(session_repo).handle("nope") is None
    assert ResolveSession(session_repo).handle("") is None

    session_repo.get_session_and_user.assert_called_once_with("nope")


def test_logout() -> None:
    session_repo = MagicMock()

    Logout(session_repo).handle("session id")
    Logout(session_repo).handle(None)
    Logout(session_repo).handle("")

    session_repo.delete_session.assert_called_once_with("session id")


def test_purge_expired_credentials() -> None:
    session_repo = MagicMock()
    setup_token_repo = MagicMock()

    session_repo.delete_expired.return_value = 3
    setup_token_repo.delete_expired.return_value = 0

    before = UtcDatetime.now()

    PurgeExpiredCredentials(session_repo, setup_token_repo).handle()

    now = session_repo.delete_expired.call_args[0][0]

    assert now >= before
    setup_token_repo.delete_expired.assert_called_once_with(now)
