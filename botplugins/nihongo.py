"""Japanese grammar lookup backed by a SQLite table."""

from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass

_COLUMNS = (
    "id", "tag", "name", "pronunciation", "usage",
    "meaning", "explanation", "example", "grammar_url",
)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS grammar (
    id INTEGER PRIMARY KEY,
    tag TEXT,
    name TEXT,
    pronunciation TEXT,
    usage TEXT,
    meaning TEXT,
    explanation TEXT,
    example TEXT,
    grammar_url TEXT
)
"""

_CHARS = "0-9A-Za-zぁ-んァ-ヶ～"
_TAG_RE = re.compile(rf"^日语语法\s?([{_CHARS}]{{1,6}})$")
_SEARCH_RE = re.compile(rf"^搜索日语语法\s?([{_CHARS}]{{1,25}})$")


@dataclass(frozen=True)
class Grammar:
    """One grammar entry."""

    id: int
    tag: str = ""
    name: str = ""
    pronunciation: str = ""
    usage: str = ""
    meaning: str = ""
    explanation: str = ""
    example: str = ""
    grammar_url: str = ""

    def text(self) -> str:
        """Render the entry as the multi-section card text."""
        return (
            f"ID:\n{self.id}\n\n标签:\n{self.tag}\n\n语法名:\n{self.name}\n\n"
            f"发音:\n{self.pronunciation}\n\n用法:\n{self.usage}\n\n"
            f"意思:\n{self.meaning}\n\n解说:\n{self.explanation}\n\n示例:\n{self.example}"
        )


class GrammarDB:
    """Random access to the grammar table."""

    def __init__(self, path):
        self._conn = sqlite3.connect(str(path))
        with self._conn:
            self._conn.execute(_SCHEMA)

    def __enter__(self) -> GrammarDB:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def _random(self, where: str, params: tuple) -> Grammar | None:
        row = self._conn.execute(
            f"SELECT {', '.join(_COLUMNS)} FROM grammar WHERE {where} "
            "ORDER BY RANDOM() LIMIT 1",
            params,
        ).fetchone()
        if row is None:
            return None
        return Grammar(*(value if value is not None else "" for value in row))

    def random_by_tag(self, tag: str) -> Grammar | None:
        """A random entry whose tag contains ``tag``, or None."""
        return self._random("tag LIKE ?", (f"%{tag}%",))

    def random_by_keyword(self, keyword: str) -> Grammar | None:
        """A random entry whose name or pronunciation contains ``keyword``, or None."""
        pattern = f"%{keyword}%"
        return self._random("(name LIKE ? OR pronunciation LIKE ?)", (pattern, pattern))

    def count(self) -> int:
        (n,) = self._conn.execute("SELECT COUNT(*) FROM grammar").fetchone()
        return n


def parse_tag_command(text: str) -> str | None:
    """Return the tag of a '日语语法xxx' command, or None."""
    m = _TAG_RE.match(text)
    return m.group(1) if m else None


def parse_search_command(text: str) -> str | None:
    """Return the keyword of a '搜索日语语法xxx' command, or None."""
    m = _SEARCH_RE.match(text)
    return m.group(1) if m else None