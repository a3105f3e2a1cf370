"""SQLite connection setup and the schema migration runner.

Migrations live in ``wxlookup.storage.migrations`` as ``v###_<name>``
modules exposing ``up(conn)``. The number of the newest applied migration
is kept in ``PRAGMA user_version``, so a fresh file reports 0.
"""

import importlib
import logging
import pkgutil
import re
import sqlite3
from pathlib import Path

from wxlookup.storage import migrations

logger = logging.getLogger(__name__)

MIGRATION_NAME = re.compile(r"^v(\d{3})_\w+$")

# Seconds to wait on a file locked by another CLI process
BUSY_TIMEOUT = 5.0


def connect(db_path: str | Path) -> sqlite3.Connection:
    """Open a connection in WAL mode with rows addressable by column name."""
    conn = sqlite3.connect(str(db_path), timeout=BUSY_TIMEOUT)
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA synchronous=NORMAL")
    return conn


def schema_version(conn: sqlite3.Connection) -> int:
    return conn.execute("PRAGMA user_version").fetchone()[0]


def run_migrations(conn: sqlite3.Connection) -> list[str]:
    """Apply migrations newer than the file's schema version.

    Each migration and its version bump commit together. Returns the names
    applied by this call, oldest first.
    """
    current = schema_version(conn)
    applied = []
    for version, name in _discover_migrations():
        if version <= current:
            continue
        module = importlib.import_module(f"{migrations.__name__}.{name}")
        with conn:
            conn.execute("BEGIN")
            module.up(conn)
            # PRAGMA takes no bound parameters; version is an int from the regex
            conn.execute(f"PRAGMA user_version = {version:d}")
        logger.info("Applied migration %s", name)
        applied.append(name)
    return applied


def _discover_migrations() -> list[tuple[int, str]]:
    found = []
    for info in pkgutil.iter_modules(migrations.__path__):
        m = MIGRATION_NAME.match(info.name)
        if m:
            found.append((int(m.group(1)), info.name))
    return sorted(found)
