import os
import sqlite3
from pathlib import Path
from typing import Optional, overload, TypeVar

from .errors import ConfigurationError

T = TypeVar("T")

CACHE_DIR = "~/.weatherbot"


class Settings:
    """Plain (unencrypted) name/value configuration kept in sqlite.

    Lookups fall back to environment variables of the same name, so any
    setting can be supplied at process start without touching the database.
    """

    def __init__(self, db_path="weatherbot.db", cache_dir=CACHE_DIR):
        self.cache_dir = Path(cache_dir).expanduser()
        self.cache_dir.mkdir(parents=True, exist_ok=True)
        self.db_path = self.cache_dir / db_path

        connection = self._get_connection()
        connection.cursor().execute(
            "CREATE TABLE IF NOT EXISTS settings (name TEXT PRIMARY KEY, value TEXT)"
        )
        connection.commit()
        connection.close()

    def _get_connection(self):
        return sqlite3.connect(self.db_path)

    def set(self, name, value):
        """Store a setting"""
        connection = self._get_connection()
        cursor = connection.cursor()
        cursor.execute(
            "INSERT OR REPLACE INTO settings (name, value) VALUES (?, ?)",
            (name, str(value)),
        )
        connection.commit()
        connection.close()

    @overload
    def get(self, name) -> Optional[str]: ...

    @overload
    def get(self, name: str, default: T) -> T: ...

    def get(self, name, default: Optional[T] = None) -> Optional[T]:
        """Retrieve a setting, then the environment, then ``default``."""
        connection = self._get_connection()
        cursor = connection.cursor()

        cursor.execute("SELECT value FROM settings WHERE name=?", (name,))
        result = cursor.fetchone()

        connection.close()
        if result:
            return result[0]
        return os.environ.get(name, default)

    def get_float(self, name: str, default: Optional[float]) -> Optional[float]:
        value = self.get(name)
        if value is None:
            return default
        try:
            return float(value)
        except ValueError:
            raise ConfigurationError(f"Setting '{name}' must be a number, got {value!r}")

    def list_settings(self):
        """List all stored setting names"""
        connection = self._get_connection()
        cursor = connection.cursor()

        cursor.execute("SELECT name FROM settings")
        result = [row[0] for row in cursor.fetchall()]

        connection.close()
        return result

    def delete_setting(self, name):
        """Delete a setting"""
        connection = self._get_connection()
        cursor = connection.cursor()

        cursor.execute("DELETE FROM settings WHERE name=?", (name,))
        connection.commit()
        connection.close()


settings = Settings()
