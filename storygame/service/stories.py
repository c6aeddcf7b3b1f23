# storygame/service/stories.py

"""Random story source backed by a SQLite corpus of short fables."""

import logging
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Tuple, Union

from storygame.core.exceptions import StorySourceError

logger = logging.getLogger(__name__)


class StoryRepository:
    """Picks random short stories from a SQLite database.

    The corpus schema is not fixed; the first known table/column pair that
    exists is used.
    """

    TABLES = ("stories", "fables", "aesop_fables")
    COLUMNS = ("text", "content", "story")

    MIN_CHARS = 50
    MAX_CHARS = 1000
    MAX_WORDS = 200

    def __init__(self, db_path: Union[str, Path]) -> None:
        self._db_path = Path(db_path)

    @contextmanager
    def _connection(self) -> Iterator[sqlite3.Connection]:
        if not self._db_path.exists():
            raise StorySourceError(f"Story database not found: {self._db_path}")
        # Read-only: the corpus is never modified
        conn = sqlite3.connect(f"file:{self._db_path}?mode=ro", uri=True)
        try:
            yield conn
        finally:
            conn.close()

    def _story_columns(self, conn: sqlite3.Connection) -> List[Tuple[str, str]]:
        tables = {
            row[0]
            for row in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")
        }
        found = []
        for table in self.TABLES:
            if table not in tables:
                continue
            columns = {row[1] for row in conn.execute(f"PRAGMA table_info({table})")}
            found.extend((table, column) for column in self.COLUMNS if column in columns)
        return found

    def random_story(self) -> str:
        """Returns one random story that fits the length limits.

        Raises:
            StorySourceError: If the database is missing, has no known story
                table, or no story fits the limits.
        """
        try:
            with self._connection() as conn:
                pairs = self._story_columns(conn)
                if not pairs:
                    raise StorySourceError("Could not find story data in the database")

                for table, column in pairs:
                    row = conn.execute(
                        f"SELECT {column} FROM {table} "
                        f"WHERE LENGTH(TRIM({column})) > ? AND LENGTH({column}) <= ? "
                        f"AND (LENGTH({column}) - LENGTH(REPLACE({column}, ' ', '')) + 1) <= ? "
                        "ORDER BY RANDOM() LIMIT 1",
                        (self.MIN_CHARS, self.MAX_CHARS, self.MAX_WORDS),
                    ).fetchone()
                    if row and row[0]:
                        logger.info(
                            "Loaded random story",
                            extra={"table": table, "column": column, "length": len(row[0])},
                        )
                        return row[0]

        except sqlite3.Error as e:
            logger.error("Could not read from the stories database", exc_info=True)
            raise StorySourceError("Could not read from the stories database") from e

        raise StorySourceError("No story in the database fits the length limits")
