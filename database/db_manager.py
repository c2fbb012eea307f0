import json
import logging
import os
import sqlite3

from utils.constants import DB_FILE, DEFAULT_SETTINGS

logger = logging.getLogger(__name__)


class DatabaseManager:
    """sqlite-backed key-value store.

    `datasets` holds one JSON document per dataset name (transactions, fixed
    expenses, credit cards, goal settings); `app_settings` holds UI
    preferences as plain strings.
    """

    def __init__(self, db_path: str | None = None):
        self.db_path = db_path or DB_FILE
        self._conn: sqlite3.Connection | None = None

    def get_connection(self) -> sqlite3.Connection:
        if self._conn is None:
            self._conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self._conn.row_factory = sqlite3.Row
            self._conn.execute("PRAGMA journal_mode = WAL")
        return self._conn

    def initialize(self):
        """Create schema and seed defaults."""
        conn = self.get_connection()
        self._create_schema(conn)
        self._seed_defaults(conn)
        conn.commit()

    def _create_schema(self, conn: sqlite3.Connection):
        conn.executescript("""
            CREATE TABLE IF NOT EXISTS datasets (
                name       TEXT PRIMARY KEY,
                payload    TEXT NOT NULL,
                updated_at TEXT NOT NULL DEFAULT (datetime('now'))
            );

            CREATE TABLE IF NOT EXISTS app_settings (
                key   TEXT PRIMARY KEY,
                value TEXT NOT NULL
            );
        """)

    def _seed_defaults(self, conn: sqlite3.Connection):
        for key, value in DEFAULT_SETTINGS:
            conn.execute(
                "INSERT OR IGNORE INTO app_settings(key, value) VALUES (?, ?)",
                (key, value),
            )

    # ── Datasets ─────────────────────────────────────────────────────────────

    def get_dataset_raw(self, name: str) -> str | None:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT payload FROM datasets WHERE name = ?", (name,)
        ).fetchone()
        return row["payload"] if row else None

    def load_dataset(self, name: str, default):
        """Decode a dataset; a missing or corrupt payload yields `default`."""
        raw = self.get_dataset_raw(name)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning({"event": "load_dataset", "dataset": name, "status": "corrupt"})
            return default

    def save_dataset(self, name: str, value):
        conn = self.get_connection()
        conn.execute(
            """INSERT INTO datasets(name, payload, updated_at) VALUES (?, ?, datetime('now'))
               ON CONFLICT(name) DO UPDATE SET payload = excluded.payload,
                                               updated_at = excluded.updated_at""",
            (name, json.dumps(value, ensure_ascii=False)),
        )
        conn.commit()
        logger.debug({"event": "save_dataset", "dataset": name})

    def delete_all_datasets(self):
        conn = self.get_connection()
        conn.execute("DELETE FROM datasets")
        conn.commit()

    # ── Settings ─────────────────────────────────────────────────────────────

    def get_setting(self, key: str, default: str = "") -> str:
        conn = self.get_connection()
        row = conn.execute(
            "SELECT value FROM app_settings WHERE key = ?", (key,)
        ).fetchone()
        return row["value"] if row else default

    def set_setting(self, key: str, value: str):
        conn = self.get_connection()
        conn.execute(
            "INSERT OR REPLACE INTO app_settings(key, value) VALUES (?, ?)",
            (key, value),
        )
        conn.commit()

    @staticmethod
    def open(db_folder: str | None = None) -> "DatabaseManager":
        """Startup factory: opens (creating if needed) the DB in db_folder or CWD."""
        if db_folder:
            os.makedirs(db_folder, exist_ok=True)
            path = os.path.join(db_folder, DB_FILE)
        else:
            path = DB_FILE
        db = DatabaseManager(path)
        db.initialize()
        logger.info({"event": "open_database", "path": path})
        return db

    def close(self):
        if self._conn:
            self._conn.close()
            self._conn = None
