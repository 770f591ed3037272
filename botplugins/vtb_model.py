"""Storage of vtuber voice clips grouped in three category levels."""

from __future__ import annotations

import json
import random
import re
import sqlite3
from dataclasses import dataclass
from datetime import datetime
from typing import Any

VTB_LIST_URL = "https://vtbkeyboard.moe/api/get_vtb_list"
VTB_PAGE_URL = "https://vtbkeyboard.moe/api/get_vtb_page?uid="

FIRST_PROMPT = "请选择一个vtb并发送序号:\n"
SECOND_PROMPT = "请选择一个语录类别并发送序号:\n"
THIRD_PROMPT = "请选择一个语录并发送序号:\n"

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS first_category (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created_at TEXT,
        updated_at TEXT,
        first_category_index INTEGER,
        first_category_name TEXT,
        first_category_uid TEXT,
        first_category_description TEXT,
        first_category_icon_path TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS second_category (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created_at TEXT,
        updated_at TEXT,
        second_category_index INTEGER,
        first_category_uid TEXT,
        second_category_name TEXT,
        second_category_author TEXT,
        second_category_description TEXT
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS third_category (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created_at TEXT,
        updated_at TEXT,
        third_category_index INTEGER,
        second_category_index INTEGER,
        first_category_uid TEXT,
        third_category_name TEXT,
        third_category_path TEXT,
        third_category_author TEXT,
        third_category_description TEXT
    )
    """,
)

_FIRST_COLUMNS = (
    "first_category_index, first_category_name, first_category_uid, "
    "first_category_description, first_category_icon_path"
)
_THIRD_COLUMNS = (
    "third_category_index, second_category_index, first_category_uid, "
    "third_category_name, third_category_path, third_category_author, "
    "third_category_description"
)

_ESCAPE_RE = re.compile(r"\\u(.{0,4})", re.DOTALL)
_HEX4_RE = re.compile(r"[0-9a-fA-F]{4}")


@dataclass(frozen=True)
class FirstCategory:
    """A vtuber."""

    index: int
    name: str
    uid: str
    description: str = ""
    icon_path: str = ""


@dataclass(frozen=True)
class SecondCategory:
    """A category of clips of one vtuber."""

    index: int
    first_uid: str
    name: str
    author: str = ""
    description: str = ""


@dataclass(frozen=True)
class ThirdCategory:
    """A single voice clip."""

    index: int
    second_index: int
    first_uid: str
    name: str
    path: str = ""
    author: str = ""
    description: str = ""


def decode_payload(text: str | bytes) -> str:
    """Turn literal ``\\uXXXX`` escapes in a response body into characters.

    Raises ValueError on an escape that is not followed by four hex digits.
    """
    if isinstance(text, bytes):
        text = text.decode("utf-8")

    def _replace(m: re.Match) -> str:
        digits = m.group(1)
        if not _HEX4_RE.fullmatch(digits):
            raise ValueError(f"invalid escape: \\u{digits}")
        code = int(digits, 16)
        if 0xD800 <= code <= 0xDFFF:
            return "\ufffd"
        return chr(code)

    return _ESCAPE_RE.sub(_replace, text)


def _s(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value, ensure_ascii=False)


def _get(obj: Any, *keys: str) -> Any:
    for key in keys:
        if not isinstance(obj, dict):
            return None
        obj = obj.get(key)
    return obj


def _parse(payload: Any) -> Any:
    if isinstance(payload, (str, bytes)):
        return json.loads(decode_payload(payload))
    return payload


def _now() -> str:
    return datetime.now().isoformat(sep=" ")


class VtbDB:
    """The vtuber, category and clip tables."""

    def __init__(self, path):
        self._conn = sqlite3.connect(str(path))
        with self._conn:
            for statement in _SCHEMA:
                self._conn.execute(statement)

    def __enter__(self) -> VtbDB:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def _first_uid(self, first_index: int) -> str:
        row = self._conn.execute(
            "SELECT first_category_uid FROM first_category "
            "WHERE first_category_index = ? ORDER BY id LIMIT 1",
            (first_index,),
        ).fetchone()
        return row[0] if row else ""

    def first_category_message(self) -> str:
        """The menu of all vtubers."""
        lines = [
            f"{index}. {name}\n"
            for index, name in self._conn.execute(
                "SELECT first_category_index, first_category_name FROM first_category ORDER BY id"
            )
        ]
        return FIRST_PROMPT + "".join(lines)

    def second_category_message(self, first_index: int) -> str:
        """The menu of categories of one vtuber, or '' when there are none."""
        uid = self._first_uid(first_index)
        rows = self._conn.execute(
            "SELECT second_category_index, second_category_name FROM second_category "
            "WHERE first_category_uid = ? ORDER BY id",
            (uid,),
        ).fetchall()
        if not rows:
            return ""
        return SECOND_PROMPT + "".join(f"{index}. {name}\n" for index, name in rows)

    def third_category_message(self, first_index: int, second_index: int) -> str:
        """The menu of clips in one category, or '' when there are none."""
        uid = self._first_uid(first_index)
        rows = self._conn.execute(
            "SELECT third_category_index, third_category_name FROM third_category "
            "WHERE first_category_uid = ? AND second_category_index = ? ORDER BY id",
            (uid, second_index),
        ).fetchall()
        if not rows:
            return ""
        return THIRD_PROMPT + "".join(f"{index}. {name}\n" for index, name in rows)

    def third_category(
        self, first_index: int, second_index: int, third_index: int
    ) -> ThirdCategory | None:
        """The clip at the given menu positions, or None."""
        uid = self._first_uid(first_index)
        row = self._conn.execute(
            f"SELECT {_THIRD_COLUMNS} FROM third_category WHERE first_category_uid = ? "
            "AND second_category_index = ? AND third_category_index = ? LIMIT 1",
            (uid, second_index, third_index),
        ).fetchone()
        return ThirdCategory(*row) if row else None

    def random_vtb(self, rng: random.Random) -> ThirdCategory | None:
        """A random clip, or None when there are no clips."""
        (count,) = self._conn.execute("SELECT COUNT(*) FROM third_category").fetchone()
        if count == 0:
            return None
        row = self._conn.execute(
            f"SELECT {_THIRD_COLUMNS} FROM third_category ORDER BY id LIMIT 1 OFFSET ?",
            (rng.randrange(count),),
        ).fetchone()
        return ThirdCategory(*row)

    def first_category_by_uid(self, uid: str) -> FirstCategory | None:
        """The vtuber with ``uid``, or None."""
        row = self._conn.execute(
            f"SELECT {_FIRST_COLUMNS} FROM first_category "
            "WHERE first_category_uid = ? LIMIT 1",
            (uid,),
        ).fetchone()
        return FirstCategory(*row) if row else None

    def store_vtb_list(self, payload) -> list[str]:
        """Insert or update vtubers from the list response; return their uids in order."""
        items = _parse(payload)
        if not isinstance(items, list):
            items = []
        uids = []
        with self._conn:
            for i, item in enumerate(items):
                name = _s(_get(item, "name"))
                description = _s(_get(item, "description"))
                icon = _s(_get(item, "icon_path"))
                uid = _s(_get(item, "uid"))
                exists = self._conn.execute(
                    "SELECT 1 FROM first_category WHERE first_category_uid = ? LIMIT 1", (uid,)
                ).fetchone()
                stamp = _now()
                if exists is None:
                    self._conn.execute(
                        "INSERT INTO first_category (created_at, updated_at, "
                        "first_category_index, first_category_name, first_category_uid, "
                        "first_category_description, first_category_icon_path) "
                        "VALUES (?, ?, ?, ?, ?, ?, ?)",
                        (stamp, stamp, i, name, uid, description, icon),
                    )
                else:
                    self._conn.execute(
                        "UPDATE first_category SET updated_at = ?, first_category_index = ?, "
                        "first_category_name = ?, first_category_description = ?, "
                        "first_category_icon_path = ? WHERE first_category_uid = ?",
                        (stamp, i, name, description, icon, uid),
                    )
                uids.append(uid)
        return uids

    def store_vtb_page(self, uid: str, payload) -> None:
        """Insert or update the categories and clips of vtuber ``uid`` from its page response."""
        doc = _parse(payload)
        voices = _get(doc, "data", "voices")
        if not isinstance(voices, list):
            voices = []
        with self._conn:
            for second_index, second in enumerate(voices):
                self._store_second(uid, second_index, second)
                clips = _get(second, "voiceList")
                if not isinstance(clips, list):
                    continue
                for third_index, third in enumerate(clips):
                    self._store_third(uid, second_index, third_index, third)

    def _store_second(self, uid: str, second_index: int, item: Any) -> None:
        name = _s(_get(item, "categoryName"))
        author = _s(_get(item, "author"))
        description = _s(_get(item, "categoryDescription", "zh-CN"))
        where = "first_category_uid = ? AND second_category_index = ?"
        exists = self._conn.execute(
            f"SELECT 1 FROM second_category WHERE {where} LIMIT 1", (uid, second_index)
        ).fetchone()
        stamp = _now()
        if exists is None:
            self._conn.execute(
                "INSERT INTO second_category (created_at, updated_at, second_category_index, "
                "first_category_uid, second_category_name, second_category_author, "
                "second_category_description) VALUES (?, ?, ?, ?, ?, ?, ?)",
                (stamp, stamp, second_index, uid, name, author, description),
            )
        else:
            self._conn.execute(
                "UPDATE second_category SET updated_at = ?, second_category_name = ?, "
                f"second_category_author = ?, second_category_description = ? WHERE {where}",
                (stamp, name, author, description, uid, second_index),
            )

    def _store_third(self, uid: str, second_index: int, third_index: int, item: Any) -> None:
        name = _s(_get(item, "name"))
        description = _s(_get(item, "description", "zh-CN"))
        path = _s(_get(item, "path"))
        author = _s(_get(item, "author"))
        where = (
            "first_category_uid = ? AND second_category_index = ? AND third_category_index = ?"
        )
        key = (uid, second_index, third_index)
        exists = self._conn.execute(
            f"SELECT 1 FROM third_category WHERE {where} LIMIT 1", key
        ).fetchone()
        stamp = _now()
        if exists is None:
            self._conn.execute(
                "INSERT INTO third_category (created_at, updated_at, third_category_index, "
                "second_category_index, first_category_uid, third_category_name, "
                "third_category_path, third_category_author, third_category_description) "
                "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)",
                (stamp, stamp, third_index, second_index, uid, name, path, author, description),
            )
        else:
            self._conn.execute(
                "UPDATE third_category SET updated_at = ?, third_category_name = ?, "
                "third_category_description = ?, third_category_path = ?, "
                f"third_category_author = ? WHERE {where}",
                (stamp, name, description, path, author, *key),
            )