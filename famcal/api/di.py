import sqlite3

from famcal.api.infra.db_connection import get_default_db
from famcal.api.infra.session_repo import SessionRepo
from famcal.api.infra.setup_token_repo import SetupTokenRepo
from famcal.api.infra.update_repo import UpdateRepo
from famcal.api.infra.user_repo import UserRepo
from famcal.api.settings import ServerSettings, SessionSettings
from famcal.domain.repo.session_repo import ISessionRepo
from famcal.domain.repo.setup_token_repo import ISetupTokenRepo
from famcal.domain.repo.update_repo import IUpdateRepo
from famcal.domain.repo.user_repo import IUserRepo


class DiContainer:  # pragma: no cover
    """
    Builds the repositories used while handling a single request. Every repo
    handed out by the same container shares one connection, which means they
    also share transactions.
    """

    _conn: sqlite3.Connection | None

    def __init__(self) -> None:
        self._conn = None

    def connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = get_default_db()

        return self._conn

    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def user_repo(self) -> IUserRepo:
        return UserRepo(self.connection())

    def session_repo(self) -> ISessionRepo:
        return SessionRepo(self.connection())

    def setup_token_repo(self) -> ISetupTokenRepo:
        return SetupTokenRepo(self.connection())

    def update_repo(self) -> IUpdateRepo:
        return UpdateRepo(self.connection())

    def session_settings(self) -> SessionSettings:
        return SessionSettings()

    def server_settings(self) -> ServerSettings:
        return ServerSettings()
