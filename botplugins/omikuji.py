"""Senso-ji omikuji fortune slips."""

from __future__ import annotations

import sqlite3

IMAGE_BASE = "https://gitcode.net/u011570312/senso-ji-omikuji/-/raw/main/"

_SCHEMA = """
CREATE TABLE IF NOT EXISTS kuji (
    id INTEGER PRIMARY KEY,
    text TEXT
)
"""


class KujiDB:
    """Interpretations of the fortune slips, looked up by number."""

    def __init__(self, path):
        self._conn = sqlite3.connect(str(path))
        with self._conn:
            self._conn.execute(_SCHEMA)

    def __enter__(self) -> KujiDB:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def count(self) -> int:
        (n,) = self._conn.execute("SELECT COUNT(*) FROM kuji").fetchone()
        return n

    def get(self, bango: int) -> str:
        """Return the interpretation of slip ``bango``; raises KeyError if absent."""
        row = self._conn.execute("SELECT text FROM kuji WHERE id = ?", (bango,)).fetchone()
        if row is None:
            raise KeyError(bango)
        return row[0]


def image_names(bango: int) -> tuple[str, str]:
    """File names of the front and back images of slip ``bango``."""
    return f"{bango}_0.jpg", f"{bango}_1.jpg"