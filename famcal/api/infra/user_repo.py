import sqlite3

from famcal.api.infra.db_connection import DbConnection
from famcal.application.exceptions import (
    CannotDeleteLastAdmin,
    CannotRemoveLastAdmin,
    NotFound,
    UsernameTaken,
)
from famcal.domain.datetime import UtcDatetime
from famcal.domain.password_hash import PasswordHash
from famcal.domain.repo.user_repo import IUserRepo
from famcal.domain.user import (
    Credential,
    HasPassword,
    NoPassword,
    Role,
    User,
    UserId,
)

USER_COLUMNS = """
    u.uuid AS user_uuid,
    u.username AS username,
    u.display_name AS display_name,
    u.password_hash AS password_hash,
    u.role AS role,
    u.birthday AS birthday,
    u.payment_handle AS payment_handle,
    u.created_at AS user_created_at,
    u.last_login_at AS last_login_at
"""


def row_to_user(row: sqlite3.Row) -> User:
    """Convert a row selected with `USER_COLUMNS` into a `User`."""

    credential: Credential = (
        HasPassword(PasswordHash(row["password_hash"]))
        if row["password_hash"]
        else NoPassword()
    )

    return User(
        id=UserId(row["user_uuid"]),
        username=row["username"],
        credential=credential,
        role=Role(row["role"]),
        display_name=row["display_name"],
        birthday=row["birthday"],
        payment_handle=row["payment_handle"],
        created_at=UtcDatetime.fromisoformat(row["user_created_at"]),
        last_login_at=UtcDatetime.from_db(row["last_login_at"]),
    )


def is_username_conflict(ex: sqlite3.IntegrityError) -> bool:
    return "users.username" in str(ex)


class UserRepo(IUserRepo, DbConnection):
    def get_user_by_username(self, username: str) -> User | None:
        row = self.conn.execute(
            f"SELECT {USER_COLUMNS} FROM users u WHERE u.username=?;",
            [username.strip()],
        ).fetchone()

        return row_to_user(row) if row else None

    def get_user_by_id(self, id: UserId) -> User | None:
        row = self.conn.execute(
            f"SELECT {USER_COLUMNS} FROM users u WHERE u.uuid=?;",
            [id],
        ).fetchone()

        return row_to_user(row) if row else None

    def list_users(self) -> list[User]:
        rows = self.conn.execute(
            f"SELECT {USER_COLUMNS} FROM users u ORDER BY u.rowid;"
        ).fetchall()

        return [row_to_user(row) for row in rows]

    def create_user(self, user: User) -> UserId:
        pw_hash = (
            str(user.credential.hash)
            if isinstance(user.credential, HasPassword)
            else None
        )

        try:
            self.conn.execute(
                """
                INSERT INTO users (
                    uuid,
                    username,
                    display_name,
                    password_hash,
                    role,
                    birthday,
                    payment_handle,
                    created_at,
                    last_login_at
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?);
                """,
                [
                    user.id,
                    user.username,
                    user.display_name,
                    pw_hash,
                    user.role.value,
                    user.birthday,
                    user.payment_handle,
                    user.created_at,
                    user.last_login_at,
                ],
            )

        except sqlite3.IntegrityError as ex:
            if is_username_conflict(ex):
                raise UsernameTaken(f"Username `{user.username}` is taken") from ex

            raise

        return user.id

    def update_user(self, user: User) -> None:
        with self.transaction():
            row = self.conn.execute(
                "SELECT role FROM users WHERE uuid=?;", [user.id]
            ).fetchone()

            if not row:
                raise NotFound("User not found")

            is_demotion = row["role"] == Role.ADMIN.value and not user.is_admin

            if is_demotion and self.count_admins() <= 1:
                raise CannotRemoveLastAdmin("Cannot demote the last admin")

            try:
                self.conn.execute(
                    """
                    UPDATE users SET
                        username=?,
                        display_name=?,
                        role=?,
                        birthday=?,
                        payment_handle=?,
                        last_login_at=?
                    WHERE uuid=?;
                    """,
                    [
                        user.username,
                        user.display_name,
                        user.role.value,
                        user.birthday,
                        user.payment_handle,
                        user.last_login_at,
                        user.id,
                    ],
                )

            except sqlite3.IntegrityError as ex:
                if is_username_conflict(ex):
                    raise UsernameTaken(
                        f"Username `{user.username}` is taken"
                    ) from ex

                raise

    def delete_user(self, id: UserId) -> None:
        with self.transaction():
            row = self.conn.execute(
                "SELECT role FROM users WHERE uuid=?;", [id]
            ).fetchone()

            if not row:
                raise NotFound("User not found")

            if row["role"] == Role.ADMIN.value and self.count_admins() <= 1:
                raise CannotDeleteLastAdmin("Cannot delete the last admin")

            # Sessions, setup tokens, and updates are removed via ON DELETE CASCADE
            self.conn.execute("DELETE FROM users WHERE uuid=?;", [id])

    def set_password_hash(self, id: UserId, hash: PasswordHash) -> None:
        self.conn.execute(
            "UPDATE users SET password_hash=? WHERE uuid=?;",
            [str(hash), id],
        )

    def reset_password_hash(self, id: UserId, hash: PasswordHash) -> None:
        with self.transaction():
            cursor = self.conn.execute(
                "UPDATE users SET password_hash=? WHERE uuid=?;",
                [str(hash), id],
            )

            if cursor.rowcount == 0:
                raise NotFound("User not found")

            self.conn.execute("DELETE FROM sessions WHERE user_uuid=?;", [id])
            self.conn.execute(
                "DELETE FROM password_set_tokens WHERE user_uuid=?;", [id]
            )

    def update_profile(
        self,
        id: UserId,
        *,
        display_name: str | None = None,
        birthday: str | None = None,
        payment_handle: str | None = None,
    ) -> None:
        self.conn.execute(
            """
            UPDATE users SET
                display_name=COALESCE(?, display_name),
                birthday=COALESCE(?, birthday),
                payment_handle=COALESCE(?, payment_handle)
            WHERE uuid=?;
            """,
            [display_name, birthday, payment_handle, id],
        )

    def update_last_login(self, id: UserId, at: UtcDatetime) -> None:
        self.conn.execute(
            "UPDATE users SET last_login_at=? WHERE uuid=?;",
            [at, id],
        )

    def count_admins(self) -> int:
        row = self.conn.execute(
            "SELECT COUNT(*) FROM users WHERE role=?;",
            [Role.ADMIN.value],
        ).fetchone()

        return int(row[0])
