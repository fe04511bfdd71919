import sqlite3

from famcal.api.infra.db_connection import DbConnection
from famcal.api.infra.user_repo import USER_COLUMNS, row_to_user
from famcal.domain.datetime import UtcDatetime
from famcal.domain.repo.session_repo import ISessionRepo
from famcal.domain.session import Session, SessionId
from famcal.domain.user import User, UserId


def row_to_session(row: sqlite3.Row) -> Session:
    return Session(
        id=row["session_id"],
        user_id=UserId(row["session_user_uuid"]),
        csrf_token=row["csrf_token"],
        created_at=UtcDatetime.fromisoformat(row["session_created_at"]),
        expires_at=UtcDatetime.fromisoformat(row["expires_at"]),
    )


SESSION_COLUMNS = """
    s.id AS session_id,
    s.user_uuid AS session_user_uuid,
    s.csrf_token AS csrf_token,
    s.created_at AS session_created_at,
    s.expires_at AS expires_at
"""


class SessionRepo(ISessionRepo, DbConnection):
    def create(self, session: Session) -> None:
        self.conn.execute(
            """
            INSERT INTO sessions (
                id,
                user_uuid,
                csrf_token,
                created_at,
                expires_at
            ) VALUES (?, ?, ?, ?, ?);
            """,
            [
                session.id,
                session.user_id,
                session.csrf_token,
                session.created_at,
                session.expires_at,
            ],
        )

    def get_session_and_user(
        self, id: SessionId
    ) -> tuple[Session, User] | None:
        row = self.conn.execute(
            f"""
            SELECT {SESSION_COLUMNS}, {USER_COLUMNS}
            FROM sessions s
            JOIN users u ON u.uuid = s.user_uuid
            WHERE s.id=?;
            """,
            [id],
        ).fetchone()

        if not row:
            return None

        return row_to_session(row), row_to_user(row)

    def get_sessions_for_user(self, user_id: UserId) -> list[Session]:
        rows = self.conn.execute(
            f"""
            SELECT {SESSION_COLUMNS}
            FROM sessions s
            WHERE s.user_uuid=?
            ORDER BY s.rowid;
            """,
            [user_id],
        ).fetchall()

        return [row_to_session(row) for row in rows]

    def delete_session(self, id: SessionId) -> None:
        self.conn.execute("DELETE FROM sessions WHERE id=?;", [id])

    def delete_sessions_for_user(self, user_id: UserId) -> None:
        self.conn.execute("DELETE FROM sessions WHERE user_uuid=?;", [user_id])

    def delete_expired(self, now: UtcDatetime) -> int:
        # Timestamps are compared in Python since their string form doesn't
        # always sort correctly (microseconds are omitted when zero).
        with self.transaction():
            rows = self.conn.execute("SELECT id, expires_at FROM sessions;").fetchall()

            expired = [
                [row["id"]]
                for row in rows
                if UtcDatetime.fromisoformat(row["expires_at"]) <= now
            ]

            self.conn.executemany("DELETE FROM sessions WHERE id=?;", expired)

        return len(expired)
