"""Daily sign-in, levels and score bookkeeping."""

from __future__ import annotations

import random
import sqlite3
from dataclasses import dataclass
from datetime import datetime

SCOREMAX = 1200
SIGNIN_MAX = 1
BACKGROUND_URL = "https://img.moehu.org/pic.php?id=pc"
RANK_ARRAY = (0, 10, 20, 50, 100, 200, 350, 550, 750, 1000, 1200)

_SCHEMA = (
    """
    CREATE TABLE IF NOT EXISTS score (
        uid INTEGER PRIMARY KEY,
        score INTEGER DEFAULT 0
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS sign_in (
        uid INTEGER PRIMARY KEY,
        count INTEGER DEFAULT 0,
        updated_at TEXT
    )
    """,
)


class ScoreDB:
    """Stores each user's level score and sign-in count."""

    def __init__(self, path):
        self._conn = sqlite3.connect(str(path))
        with self._conn:
            for statement in _SCHEMA:
                self._conn.execute(statement)

    def __enter__(self) -> ScoreDB:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def get_score(self, uid: int) -> int:
        """Return the user's score, creating a zero record when there is none."""
        with self._conn:
            row = self._conn.execute("SELECT score FROM score WHERE uid = ?", (uid,)).fetchone()
            if row is None:
                self._conn.execute("INSERT INTO score (uid, score) VALUES (?, 0)", (uid,))
                return 0
        return row[0]

    def set_score(self, uid: int, score: int) -> None:
        """Insert or update the user's score."""
        with self._conn:
            self._conn.execute(
                "INSERT INTO score (uid, score) VALUES (?, ?) "
                "ON CONFLICT(uid) DO UPDATE SET score = excluded.score",
                (uid, score),
            )

    def get_sign_in(self, uid: int) -> tuple[int, datetime | None]:
        """Return the sign-in count and last update time, creating an empty record if needed."""
        with self._conn:
            row = self._conn.execute(
                "SELECT count, updated_at FROM sign_in WHERE uid = ?", (uid,)
            ).fetchone()
            if row is None:
                self._conn.execute(
                    "INSERT INTO sign_in (uid, count, updated_at) VALUES (?, 0, NULL)", (uid,)
                )
                return 0, None
        count, updated = row
        return count, (datetime.fromisoformat(updated) if updated else None)

    def set_sign_in_count(self, uid: int, count: int, now: datetime) -> None:
        """Insert or update the user's sign-in count, stamped with ``now``."""
        with self._conn:
            self._conn.execute(
                "INSERT INTO sign_in (uid, count, updated_at) VALUES (?, ?, ?) "
                "ON CONFLICT(uid) DO UPDATE SET count = excluded.count, "
                "updated_at = excluded.updated_at",
                (uid, count, now.isoformat(sep=" ")),
            )

    def top_scores(self, n: int) -> list[tuple[int, int]]:
        """Return up to ``n`` (uid, score) pairs, highest score first."""
        return [
            (uid, score)
            for uid, score in self._conn.execute(
                "SELECT uid, score FROM score ORDER BY score DESC LIMIT ?", (n,)
            )
        ]


@dataclass(frozen=True)
class SignInOutcome:
    """Result of one sign-in attempt."""

    already_signed: bool
    level: int = 0
    rank: int = 0
    add: int = 0
    capped: bool = False
    next_score: int = 0


def get_rank(count: int) -> int:
    """Return the rank reached with ``count`` level points, or -1 when out of range."""
    for rank, threshold in enumerate(RANK_ARRAY):
        if count == threshold:
            return rank
        if count < threshold:
            return rank - 1
    return -1


def get_hour_word(t: datetime) -> str:
    """Return the greeting for the hour of ``t``."""
    h = t.hour
    if 6 <= h < 12:
        return "早上好"
    if 12 <= h < 14:
        return "中午好"
    if 14 <= h < 19:
        return "下午好"
    if 19 <= h < 24:
        return "晚上好"
    if 0 <= h < 6:
        return "凌晨好"
    return ""


def next_rank_score(rank: int) -> int:
    """Return the score needed for the rank after ``rank``."""
    if rank < 10:
        return RANK_ARRAY[rank + 1]
    return SCOREMAX


def _day(t: datetime | None) -> str:
    return t.strftime("%Y%m%d") if t is not None else ""


def sign_in(db: ScoreDB, uid: int, now: datetime, rng: random.Random) -> SignInOutcome:
    """Perform a daily sign-in and return what was earned."""
    today = _day(now)
    count, updated = db.get_sign_in(uid)
    last_day = _day(updated)
    if count >= SIGNIN_MAX and last_day == today:
        return SignInOutcome(already_signed=True)
    if last_day != today:
        db.set_sign_in_count(uid, 0, now)
    db.set_sign_in_count(uid, count + 1, now)

    level = db.get_score(uid) + 1
    capped = level > SCOREMAX
    if capped:
        level = SCOREMAX
    db.set_score(uid, level)

    rank = get_rank(level)
    add = 1 + rng.randrange(10) + rank * 5
    return SignInOutcome(
        already_signed=False,
        level=level,
        rank=rank,
        add=add,
        capped=capped,
        next_score=next_rank_score(rank),
    )