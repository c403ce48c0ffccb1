"""
Whole-store snapshots on disk.

The entire database is written as one JSON object on every save:

    {"tasks": {"1": {...}}, "users": {"1": {...}}}

Ids are stringified by JSON. There is no version field and no incremental
log; a save always rewrites the whole file.
"""

import logging
import os
from pathlib import Path
from typing import Union

from pydantic import ValidationError

from database import Database

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


class PersistenceError(Exception):
    """Raised when the database file cannot be written or read."""


class DatabaseNotFoundError(PersistenceError):
    """The database file does not exist."""


class DatabaseCorruptError(PersistenceError):
    """The database file exists but does not hold a valid database."""


def save_database(db: Database, path: PathLike) -> None:
    """Serialize `db` and atomically replace the file at `path`.

    The snapshot is written to a sibling `.tmp` file first and then renamed
    over the target, so a crash mid-write never leaves a truncated file.
    """
    path = Path(path)
    tmp = path.with_name(path.name + ".tmp")
    try:
        data = db.model_dump_json(indent=2)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp.write_text(data, encoding="utf-8")
        os.replace(tmp, path)
    except (OSError, ValueError) as e:
        raise PersistenceError(f"Failed to save database to {path}: {e}") from e
    logger.debug(
        "Database saved path=%s tasks=%s users=%s",
        path,
        db.task_count(),
        db.user_count(),
    )


def load_database(path: PathLike) -> Database:
    """Read the file at `path` back into a Database."""
    path = Path(path)
    try:
        raw = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise DatabaseNotFoundError(f"No database file at {path}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise DatabaseCorruptError(f"Failed to read database from {path}: {e}") from e

    try:
        db = Database.model_validate_json(raw)
    except ValidationError as e:
        raise DatabaseCorruptError(f"Malformed database file {path}: {e}") from e

    logger.debug(
        "Database loaded path=%s tasks=%s users=%s",
        path,
        db.task_count(),
        db.user_count(),
    )
    return db
