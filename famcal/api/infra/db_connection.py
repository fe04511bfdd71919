import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from uuid import UUID

from famcal.api.settings import DBSettings
from famcal.domain.datetime import Datetime, UtcDatetime
from famcal.domain.repo.transaction import ITransactional

sqlite3.register_adapter(UtcDatetime, str)
sqlite3.register_adapter(Datetime, str)
sqlite3.register_adapter(UUID, str)


def connect(db_url: str, *, check_same_thread: bool = True) -> sqlite3.Connection:
    """
    Open a connection in autocommit mode: statements outside of an explicit
    `DbConnection.transaction()` block are committed immediately.
    """

    conn = sqlite3.connect(
        db_url,
        isolation_level=None,
        check_same_thread=check_same_thread,
    )
    conn.row_factory = sqlite3.Row

    conn.execute("PRAGMA foreign_keys = ON;")

    if db_url != ":memory:":
        conn.execute("PRAGMA journal_mode = WAL;")

    return conn


def get_default_db() -> sqlite3.Connection:
    # A request may hop between threadpool threads, but never uses its
    # connection from two threads at once.
    return connect(DBSettings().db_url, check_same_thread=False)


class DbConnection(ITransactional):
    conn: sqlite3.Connection

    def __init__(self, db: sqlite3.Connection | None = None) -> None:
        self.conn = get_default_db() if db is None else db

        self.conn.row_factory = sqlite3.Row

    @contextmanager
    def transaction(self) -> Iterator[None]:
        if self.conn.in_transaction:
            yield
            return

        self.conn.execute("BEGIN IMMEDIATE;")

        try:
            yield

        except BaseException:
            self.conn.rollback()
            raise

        self.conn.commit()
