"""Random entries from the tiangou diary table."""

from __future__ import annotations

import random
import sqlite3

_SCHEMA = """
CREATE TABLE IF NOT EXISTS tiangou (
    id INTEGER PRIMARY KEY,
    text TEXT
)
"""


class TiangouDB:
    """The diary entries."""

    def __init__(self, path):
        self._conn = sqlite3.connect(str(path))
        with self._conn:
            self._conn.execute(_SCHEMA)

    def __enter__(self) -> TiangouDB:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def count(self) -> int:
        (n,) = self._conn.execute("SELECT COUNT(*) FROM tiangou").fetchone()
        return n

    def pick(self, rng: random.Random) -> str:
        """Return the text of a random entry; raises LookupError when the table is empty."""
        total = self.count()
        if total == 0:
            raise LookupError("tiangou table is empty")
        (text,) = self._conn.execute(
            "SELECT text FROM tiangou ORDER BY id LIMIT 1 OFFSET ?", (rng.randrange(total),)
        ).fetchone()
        return text