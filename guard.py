import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Union

from database import Database
from persistence import PersistenceError, load_database, save_database

logger = logging.getLogger(__name__)


class SharedDatabase:
    """
    The one Database instance of the process, behind one lock.

    Every read and every write, including the file save that follows a
    write, runs while holding the same non-reentrant lock. A slow save
    therefore blocks all other access until it finishes.
    """

    def __init__(self, db: Database, path: Union[str, Path]) -> None:
        self._db = db
        self._path = Path(path)
        self._lock = threading.Lock()

    @classmethod
    def open(cls, path: Union[str, Path]) -> "SharedDatabase":
        """Load the database at `path`, or start empty if that fails."""
        try:
            db = load_database(path)
        except PersistenceError as e:
            logger.warning("Starting with an empty database: %s", e)
            db = Database()
        logger.info(
            "Database ready path=%s tasks=%s users=%s",
            path,
            db.task_count(),
            db.user_count(),
        )
        return cls(db, path)

    @contextmanager
    def reading(self) -> Iterator[Database]:
        with self._lock:
            yield self._db

    @contextmanager
    def mutating(self) -> Iterator[Database]:
        """
        Hold the lock, hand out the store, then save it before releasing.

        If the block raises, nothing is saved. A failed save raises
        PersistenceError after the in-memory change has already happened.
        """
        with self._lock:
            yield self._db
            save_database(self._db, self._path)

    def save(self) -> None:
        with self._lock:
            save_database(self._db, self._path)
