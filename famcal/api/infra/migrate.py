import logging
import sqlite3
from collections.abc import Callable
from functools import wraps
from uuid import uuid4

from famcal.api.infra.db_connection import connect
from famcal.api.settings import DBSettings, MigrationSettings
from famcal.domain.datetime import UtcDatetime
from famcal.domain.password_hash import PasswordHash
from famcal.domain.user import Role

migration_queue = []

Migration = Callable[[sqlite3.Connection], None]

logger = logging.getLogger("famcal")


def auto_migrate(version: int) -> Callable[[Migration], Migration]:
    def outer(migration: Migration) -> Migration:
        @wraps(migration)
        def inner(db: sqlite3.Connection) -> None:
            migration(db)
            db.commit()

            if get_version(db) == 0:
                db.executescript(
                    """
                    CREATE TABLE _migration_version (version int NOT NULL);

                    INSERT INTO _migration_version VALUES (1);
                    """
                )

            else:
                db.execute(
                    "UPDATE _migration_version SET version = (?);",
                    [version],
                )

            db.commit()

            logger.info("Applied migration v%d", version)

        migration_queue.append((version, inner))

        return inner

    return outer


@auto_migrate(version=1)
def migrate_v1(db: sqlite3.Connection) -> None:
    db.executescript(
        """
        CREATE TABLE users (
            uuid TEXT PRIMARY KEY NOT NULL,
            username TEXT NOT NULL UNIQUE COLLATE NOCASE,
            display_name TEXT,
            -- NULL until the user picks a password on their first login
            password_hash TEXT,
            role TEXT NOT NULL DEFAULT 'user' CHECK (role IN ('user', 'admin')),
            birthday TEXT,
            payment_handle TEXT,
            created_at TEXT NOT NULL,
            last_login_at TEXT
        );

        CREATE TABLE sessions (
            id TEXT PRIMARY KEY NOT NULL,
            user_uuid TEXT NOT NULL,
            csrf_token TEXT NOT NULL,
            created_at TEXT NOT NULL,
            expires_at TEXT NOT NULL,
            FOREIGN KEY (user_uuid) REFERENCES users(uuid) ON DELETE CASCADE
        );

        CREATE TABLE password_set_tokens (
            id TEXT PRIMARY KEY NOT NULL,
            user_uuid TEXT NOT NULL,
            created_at TEXT NOT NULL,
            expires_at TEXT NOT NULL,
            FOREIGN KEY (user_uuid) REFERENCES users(uuid) ON DELETE CASCADE
        );

        CREATE TABLE updates (
            uuid TEXT PRIMARY KEY NOT NULL,
            user_uuid TEXT NOT NULL,
            date TEXT NOT NULL,
            title TEXT NOT NULL,
            body TEXT,
            color_id TEXT,
            created_at TEXT NOT NULL,
            updated_at TEXT NOT NULL,
            FOREIGN KEY (user_uuid) REFERENCES users(uuid) ON DELETE CASCADE
        );
        """
    )

    settings = MigrationSettings()
    hash = PasswordHash.from_password(settings.default_admin_password)

    db.execute(
        """
        INSERT INTO users (
            uuid,
            username,
            display_name,
            password_hash,
            role,
            created_at
        ) VALUES (?, ?, ?, ?, ?, ?);
        """,
        [
            str(uuid4()),
            settings.default_admin_username,
            "Administrator",
            str(hash),
            Role.ADMIN.value,
            UtcDatetime.now(),
        ],
    )

    logger.warning(
        "Bootstrapped admin user `%s`, change the password ASAP",
        settings.default_admin_username,
    )


@auto_migrate(version=2)
def migrate_v2(db: sqlite3.Connection) -> None:
    db.executescript(
        """
        CREATE INDEX ix_sessions_user_uuid ON sessions(user_uuid);
        CREATE INDEX ix_password_set_tokens_user_uuid
            ON password_set_tokens(user_uuid);
        CREATE INDEX ix_updates_date ON updates(date);
        CREATE INDEX ix_updates_user_uuid ON updates(user_uuid);
        """
    )


def get_version(db: sqlite3.Connection) -> int:
    try:
        cursor = db.cursor()
        cursor.execute("SELECT version FROM _migration_version;")

        return int(cursor.fetchone()[0])

    except sqlite3.OperationalError:
        return 0


def migrate(db: sqlite3.Connection) -> None:
    current_version = get_version(db)

    for migration_version, migration in migration_queue:
        if current_version < migration_version:
            migration(db)


if __name__ == "__main__":
    migrate(connect(DBSettings().db_url))
