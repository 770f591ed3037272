"""Storage for the QQ zone love wall: login cookies and submitted posts."""

from __future__ import annotations

import re
import sqlite3
from dataclasses import dataclass, field
from datetime import datetime
from enum import IntEnum
from typing import Iterable

LOVE_TAG = "表白"
PAGE_SIZE = 5
FACE_URL = "http://q4.qlogo.cn/g?b=qq&nk={qq}&s=640"
ANONYMOUS_URL = "https://gitcode.net/anto_july/avatar/-/raw/master/{n}.png"

_ID_LIST_RE = re.compile(r"^(?:\d+,){0,8}\d+$")

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS qzone_config (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        qq INTEGER UNIQUE NOT NULL,
        cookie VARCHAR(1024)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS emotion (
        id INTEGER PRIMARY KEY AUTOINCREMENT,
        created_at TEXT,
        updated_at TEXT,
        deleted_at TEXT,
        anonymous INTEGER,
        qq INTEGER,
        msg TEXT,
        status INTEGER,
        tag TEXT
    )
    """,
)

_EMOTION_COLUMNS = "id, created_at, anonymous, qq, msg, status, tag"


class Status(IntEnum):
    """Review state of a love-wall post; ALL selects every state in queries."""

    ALL = 0
    WAIT = 1
    AGREE = 2
    DISAGREE = 3


_STATUS_WORDS = {"等待": Status.WAIT, "同意": Status.AGREE, "拒绝": Status.DISAGREE, "所有": Status.ALL}
_STATUS_TEXT = {Status.WAIT: "审核中", Status.AGREE: "同意", Status.DISAGREE: "拒绝"}


def _stamp(t: datetime) -> str:
    return t.isoformat(sep=" ", timespec="microseconds")


def _format_time(t: datetime | None) -> str:
    if t is None:
        return "0001-01-01 00:00:00"
    return (
        f"{t.year:04d}-{t.month:02d}-{t.day:02d} "
        f"{t.hour:02d}:{t.minute:02d}:{t.second:02d}"
    )


@dataclass
class Emotion:
    """A post submitted to the love wall."""

    qq: int
    msg: str
    status: int = Status.WAIT
    tag: str = LOVE_TAG
    anonymous: bool = False
    id: int = 0
    created_at: datetime | None = field(default=None)

    def text_brief(self) -> str:
        """Summary shown to reviewers."""
        text = f"序号: {self.id}\nQQ: {self.qq}\n创建时间: {_format_time(self.created_at)}\n"
        label = _STATUS_TEXT.get(self.status) if self.status in _STATUS_TEXT else None
        if label is not None:
            text += f"状态: {label}\n"
        text += "匿名: 是" if self.anonymous else "匿名: 否"
        return text


def _emotion_from_row(row) -> Emotion:
    eid, created, anonymous, qq, msg, status, tag = row
    return Emotion(
        qq=qq,
        msg=msg or "",
        status=status,
        tag=tag or "",
        anonymous=bool(anonymous),
        id=eid,
        created_at=datetime.fromisoformat(created) if created else None,
    )


class QzoneDB:
    """Login cookies per bot account and the submitted posts."""

    def __init__(self, path):
        self._conn = sqlite3.connect(str(path))
        with self._conn:
            for statement in _SCHEMA:
                self._conn.execute(statement)

    def __enter__(self) -> QzoneDB:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def insert_or_update(self, qq: int, cookie: str) -> None:
        """Store the cookie of account ``qq``, replacing any earlier one."""
        with self._conn:
            self._conn.execute(
                "INSERT INTO qzone_config (qq, cookie) VALUES (?, ?) "
                "ON CONFLICT(qq) DO UPDATE SET cookie = excluded.cookie",
                (qq, cookie),
            )

    def get_by_uin(self, qq: int) -> str:
        """Return the cookie of account ``qq``; raises LookupError when not logged in."""
        row = self._conn.execute(
            "SELECT cookie FROM qzone_config WHERE qq = ? LIMIT 1", (qq,)
        ).fetchone()
        if row is None:
            raise LookupError(f"record not found: {qq}")
        return row[0] or ""

    def save_emotion(self, emotion: Emotion) -> int:
        """Store a post and return its new id."""
        created = emotion.created_at or datetime.now()
        stamp = _stamp(created)
        with self._conn:
            cur = self._conn.execute(
                "INSERT INTO emotion (created_at, updated_at, anonymous, qq, msg, status, tag) "
                "VALUES (?, ?, ?, ?, ?, ?, ?)",
                (
                    stamp, stamp, int(emotion.anonymous), emotion.qq,
                    emotion.msg, int(emotion.status), emotion.tag,
                ),
            )
        return cur.lastrowid

    def emotions_by_ids(self, ids: Iterable[int]) -> list[Emotion]:
        """Posts whose ids are in ``ids``, in id order."""
        ids = list(ids)
        if not ids:
            return []
        marks = ", ".join("?" for _ in ids)
        rows = self._conn.execute(
            f"SELECT {_EMOTION_COLUMNS} FROM emotion "
            f"WHERE deleted_at IS NULL AND id IN ({marks}) ORDER BY id",
            ids,
        ).fetchall()
        return [_emotion_from_row(row) for row in rows]

    def love_emotions_by_status(self, status: int, page: int) -> list[Emotion]:
        """One page of love-wall posts, newest first; status 0 selects every state."""
        params: list = []
        where = "deleted_at IS NULL"
        if status != Status.ALL:
            where += " AND status = ?"
            params.append(int(status))
        where += " AND tag LIKE ?"
        params.append(f"%{LOVE_TAG}%")
        params.extend((PAGE_SIZE, page * PAGE_SIZE))
        rows = self._conn.execute(
            f"SELECT {_EMOTION_COLUMNS} FROM emotion WHERE {where} "
            "ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?",
            params,
        ).fetchall()
        return [_emotion_from_row(row) for row in rows]

    def update_status(self, ids: Iterable[int], status: int) -> None:
        """Set the review state of every post in ``ids``."""
        ids = list(ids)
        if not ids:
            return
        marks = ", ".join("?" for _ in ids)
        with self._conn:
            self._conn.execute(
                f"UPDATE emotion SET status = ?, updated_at = ? "
                f"WHERE deleted_at IS NULL AND id IN ({marks})",
                (int(status), _stamp(datetime.now()), *ids),
            )


def parse_status_word(word: str) -> Status:
    """Map the word of a '查看xx表白墙' command to a status; unknown words mean waiting."""
    return _STATUS_WORDS.get(word, Status.WAIT)


def parse_id_list(text: str) -> list[int]:
    """Parse a comma-separated list of up to nine ids; raises ValueError otherwise."""
    if not _ID_LIST_RE.match(text):
        raise ValueError(f"invalid id list: {text!r}")
    return [int(part) for part in text.split(",")]