"""SQLite database connection provider.

Opens (creating if necessary) a SQLite database file and applies the
schema, so a fresh path is immediately usable by the record store.
"""

import sqlite3
from pathlib import Path

from database.schema import SCHEMA_SQL

MEMORY_PATH = ":memory:"


class DatabaseProvider:
    """Manage a single SQLite connection shared by the application.

    The connection is opened with ``check_same_thread=False`` because the
    API key service updates usage timestamps from a worker thread; the
    RecordStore serializes access to it.
    """

    def __init__(self, db_path: str) -> None:
        """Open the database at the given path and apply the schema.

        Args:
            db_path: Filesystem path to the SQLite database, or ``":memory:"``.

        Raises:
            FileNotFoundError: If the parent directory cannot be created.
            ConnectionError: If SQLite cannot open the file or apply the schema.
        """
        if db_path == MEMORY_PATH:
            target = MEMORY_PATH
        else:
            path = Path(db_path)
            try:
                path.parent.mkdir(parents=True, exist_ok=True)
            except OSError as e:
                raise FileNotFoundError(
                    f"Could not prepare database directory for '{db_path}': {e}"
                ) from e
            target = str(path.resolve())

        try:
            self._connection = sqlite3.connect(target, check_same_thread=False)
            self._connection.row_factory = sqlite3.Row
            self._connection.executescript(SCHEMA_SQL)
        except sqlite3.Error as e:
            raise ConnectionError(
                f"Failed to connect to database at '{target}': {e}"
            ) from e

        self.path = target

    def get_connection(self) -> sqlite3.Connection:
        """Return the underlying SQLite connection."""
        return self._connection

    def close(self) -> None:
        self._connection.close()
