import sqlite3

from famcal.api.infra.db_connection import DbConnection
from famcal.api.infra.user_repo import USER_COLUMNS, row_to_user
from famcal.domain.datetime import UtcDatetime
from famcal.domain.repo.update_repo import IUpdateRepo
from famcal.domain.update import Update, UpdateId
from famcal.domain.user import User, UserId

UPDATE_COLUMNS = """
    p.uuid AS update_uuid,
    p.user_uuid AS author_uuid,
    p.date AS date,
    p.title AS title,
    p.body AS body,
    p.color_id AS color_id,
    p.created_at AS update_created_at,
    p.updated_at AS updated_at
"""


def row_to_update(row: sqlite3.Row) -> Update:
    return Update(
        id=UpdateId(row["update_uuid"]),
        user_id=UserId(row["author_uuid"]),
        date=row["date"],
        title=row["title"],
        body=row["body"],
        color_id=row["color_id"],
        created_at=UtcDatetime.fromisoformat(row["update_created_at"]),
        updated_at=UtcDatetime.fromisoformat(row["updated_at"]),
    )


class UpdateRepo(IUpdateRepo, DbConnection):
    def create(self, update: Update) -> None:
        self.conn.execute(
            """
            INSERT INTO updates (
                uuid,
                user_uuid,
                date,
                title,
                body,
                color_id,
                created_at,
                updated_at
            ) VALUES (?, ?, ?, ?, ?, ?, ?, ?);
            """,
            [
                update.id,
                update.user_id,
                update.date,
                update.title,
                update.body,
                update.color_id,
                update.created_at,
                update.updated_at,
            ],
        )

    def get_update_by_id(self, id: UpdateId) -> Update | None:
        row = self.conn.execute(
            f"SELECT {UPDATE_COLUMNS} FROM updates p WHERE p.uuid=?;",
            [id],
        ).fetchone()

        return row_to_update(row) if row else None

    def update(self, update: Update) -> None:
        self.conn.execute(
            """
            UPDATE updates SET
                date=?,
                title=?,
                body=?,
                color_id=?,
                updated_at=?
            WHERE uuid=?;
            """,
            [
                update.date,
                update.title,
                update.body,
                update.color_id,
                update.updated_at,
                update.id,
            ],
        )

    def delete(self, id: UpdateId) -> None:
        self.conn.execute("DELETE FROM updates WHERE uuid=?;", [id])

    def get_updates_in_range(
        self, start: str, end: str
    ) -> list[tuple[Update, User]]:
        # ISO dates sort lexicographically, so they can be compared in SQL
        rows = self.conn.execute(
            f"""
            SELECT {UPDATE_COLUMNS}, {USER_COLUMNS}
            FROM updates p
            JOIN users u ON u.uuid = p.user_uuid
            WHERE p.date >= ? AND p.date < ?
            ORDER BY p.date, p.rowid;
            """,
            [start, end],
        ).fetchall()

        return [(row_to_update(row), row_to_user(row)) for row in rows]
