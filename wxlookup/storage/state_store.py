"""Durable key/value store used by the weather store.

Storage failures stop here: ``get`` degrades to None and ``set`` returns an
``Err`` instead of raising.
"""

import logging
import sqlite3
from contextlib import closing
from pathlib import Path
from typing import Protocol

from wxlookup.models.result import Err, Ok, Result
from wxlookup.storage import kv_repo
from wxlookup.storage.database import connect, run_migrations

logger = logging.getLogger(__name__)

LAST_LOCATION_KEY = "weather_last_location"


class KeyValueStore(Protocol):
    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> Result[None, Exception]: ...


class SqliteKeyValueStore:
    """Opens a short-lived connection per operation, so a missing or locked
    database file only affects that one read or write."""

    def __init__(self, db_path: str | Path):
        self.db_path = Path(db_path)

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = connect(self.db_path)
        run_migrations(conn)
        return conn

    def get(self, key: str) -> str | None:
        try:
            with closing(self._connect()) as conn:
                return kv_repo.get_value(conn, key)
        except (sqlite3.Error, OSError) as e:
            logger.warning("Could not read %r from %s: %s", key, self.db_path, e)
            return None

    def set(self, key: str, value: str) -> Result[None, Exception]:
        try:
            with closing(self._connect()) as conn:
                kv_repo.set_value(conn, key, value)
        except (sqlite3.Error, OSError) as e:
            logger.warning("Could not write %r to %s: %s", key, self.db_path, e)
            return Err(e)
        return Ok(None)

    def delete(self, key: str) -> Result[None, Exception]:
        try:
            with closing(self._connect()) as conn:
                kv_repo.delete_value(conn, key)
        except (sqlite3.Error, OSError) as e:
            logger.warning("Could not delete %r from %s: %s", key, self.db_path, e)
            return Err(e)
        return Ok(None)
