import os
import sqlite3
from unittest.mock import patch

from famcal.api.infra.db_connection import connect
from famcal.api.infra.migrate import migrate

TEST_ADMIN_USERNAME = "admin"
TEST_ADMIN_PW = "correct horse battery"  # noqa: S105


class SqliteTestWrapper:
    connection: sqlite3.Connection | None = None
    migrated_connection: sqlite3.Connection | None = None

    @classmethod
    def _setup(cls) -> None:
        if cls.connection is None:
            cls.reset()

    @classmethod
    def reset(cls) -> None:
        """Refresh the datasources used for testing."""

        if cls.migrated_connection is None:
            cls.migrated_connection = connect(":memory:")

            env = {
                "FAMCAL_ADMIN_USERNAME": TEST_ADMIN_USERNAME,
                "FAMCAL_ADMIN_PW": TEST_ADMIN_PW,
            }

            with patch.dict(os.environ, env):
                migrate(cls.migrated_connection)

        if cls.connection is None:
            cls.connection = connect(":memory:", check_same_thread=False)

        # Overwrites everything, including changes made to the admin account
        cls.migrated_connection.backup(cls.connection)
