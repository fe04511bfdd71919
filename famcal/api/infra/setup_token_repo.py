from famcal.api.infra.db_connection import DbConnection
from famcal.domain.datetime import UtcDatetime
from famcal.domain.repo.setup_token_repo import ISetupTokenRepo
from famcal.domain.setup_token import PasswordSetupToken, SetupTokenId
from famcal.domain.user import UserId


class SetupTokenRepo(ISetupTokenRepo, DbConnection):
    def replace_token_for_user(self, token: PasswordSetupToken) -> None:
        with self.transaction():
            self.delete_tokens_for_user(token.user_id)

            self.conn.execute(
                """
                INSERT INTO password_set_tokens (
                    id,
                    user_uuid,
                    created_at,
                    expires_at
                ) VALUES (?, ?, ?, ?);
                """,
                [
                    token.id,
                    token.user_id,
                    token.created_at,
                    token.expires_at,
                ],
            )

    def get_token(self, id: SetupTokenId) -> PasswordSetupToken | None:
        row = self.conn.execute(
            """
            SELECT id, user_uuid, created_at, expires_at
            FROM password_set_tokens
            WHERE id=?;
            """,
            [id],
        ).fetchone()

        if not row:
            return None

        return PasswordSetupToken(
            id=row["id"],
            user_id=UserId(row["user_uuid"]),
            created_at=UtcDatetime.fromisoformat(row["created_at"]),
            expires_at=UtcDatetime.fromisoformat(row["expires_at"]),
        )

    def delete_token(self, id: SetupTokenId) -> None:
        self.conn.execute("DELETE FROM password_set_tokens WHERE id=?;", [id])

    def delete_tokens_for_user(self, user_id: UserId) -> None:
        self.conn.execute(
            "DELETE FROM password_set_tokens WHERE user_uuid=?;", [user_id]
        )

    def delete_expired(self, now: UtcDatetime) -> int:
        with self.transaction():
            rows = self.conn.execute(
                "SELECT id, expires_at FROM password_set_tokens;"
            ).fetchall()

            expired = [
                [row["id"]]
                for row in rows
                if UtcDatetime.fromisoformat(row["expires_at"]) <= now
            ]

            self.conn.executemany(
                "DELETE FROM password_set_tokens WHERE id=?;", expired
            )

        return len(expired)
