"""
File-based schema migrations for the content store.

Each `NNNN_name.sql` file in the migrations directory is applied once, in
name order, and recorded in `_migrations`. Only the part of a file above a
`-- Down` marker is executed.
"""

import logging
import sqlite3
from contextlib import closing
from pathlib import Path

logger = logging.getLogger(__name__)

DOWN_MARKER = "-- Down"


class SQLiteMigrator:
    def __init__(self, db_path: str, migrations_dir: str | Path):
        self.db_path = db_path
        self.migrations_dir = Path(migrations_dir)

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA foreign_keys = ON;")
        conn.execute(
            "CREATE TABLE IF NOT EXISTS _migrations ("
            " id INTEGER PRIMARY KEY AUTOINCREMENT,"
            " filename TEXT UNIQUE NOT NULL,"
            " applied_at DATETIME DEFAULT CURRENT_TIMESTAMP)"
        )
        return conn

    def _available(self) -> list[Path]:
        return sorted(self.migrations_dir.glob("*.sql"))

    def pending(self) -> list[str]:
        """Migration files not yet recorded as applied."""
        with closing(self._connect()) as conn:
            applied = {row[0] for row in conn.execute("SELECT filename FROM _migrations")}
        return [path.name for path in self._available() if path.name not in applied]

    def run_migrations(self) -> list[str]:
        """Apply all pending migrations. Returns the filenames applied."""
        todo = set(self.pending())
        applied_now: list[str] = []

        with closing(self._connect()) as conn:
            for path in self._available():
                if path.name not in todo:
                    continue
                logger.info("Applying migration %s to %s", path.name, self.db_path)
                self._apply(conn, path)
                applied_now.append(path.name)

        if not applied_now:
            logger.debug("Schema of %s is up to date", self.db_path)
        return applied_now

    def _apply(self, conn: sqlite3.Connection, path: Path) -> None:
        script = path.read_text().split(DOWN_MARKER, 1)[0]
        try:
            conn.executescript(script)
            conn.execute("INSERT INTO _migrations (filename) VALUES (?)", (path.name,))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise RuntimeError(f"Migration {path.name} failed: {e}") from e
