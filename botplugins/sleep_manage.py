"""Good-night and good-morning bookkeeping per group."""

from __future__ import annotations

import sqlite3
from datetime import datetime, timedelta

_SCHEMA = """
CREATE TABLE IF NOT EXISTS sleep_manage (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    group_id INTEGER,
    user_id INTEGER,
    sleep_time TEXT
)
"""


def _fmt(t: datetime) -> str:
    return t.isoformat(sep=" ", timespec="microseconds")


class SleepDB:
    """Stores the last sleep or wake time of each user in each group."""

    def __init__(self, path):
        self._conn = sqlite3.connect(str(path))
        with self._conn:
            self._conn.execute(_SCHEMA)

    def __enter__(self) -> SleepDB:
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def close(self) -> None:
        self._conn.close()

    def _touch(self, gid: int, uid: int, now: datetime, since: datetime) -> tuple[int, timedelta]:
        elapsed = timedelta(0)
        with self._conn:
            row = self._conn.execute(
                "SELECT sleep_time FROM sleep_manage WHERE group_id = ? AND user_id = ? "
                "ORDER BY id LIMIT 1",
                (gid, uid),
            ).fetchone()
            if row is None:
                self._conn.execute(
                    "INSERT INTO sleep_manage (group_id, user_id, sleep_time) VALUES (?, ?, ?)",
                    (gid, uid, _fmt(now)),
                )
            else:
                elapsed = now - datetime.fromisoformat(row[0])
                self._conn.execute(
                    "UPDATE sleep_manage SET sleep_time = ? WHERE group_id = ? AND user_id = ?",
                    (_fmt(now), gid, uid),
                )
            (position,) = self._conn.execute(
                "SELECT COUNT(*) FROM sleep_manage "
                "WHERE group_id = ? AND sleep_time <= ? AND sleep_time >= ?",
                (gid, _fmt(now), _fmt(since)),
            ).fetchone()
        return position, elapsed

    def sleep(self, gid: int, uid: int, now: datetime) -> tuple[int, timedelta]:
        """Record a good night; return the rank tonight and the time awake."""
        if now.hour >= 21:
            since = now.replace(hour=21, minute=0, second=0)
        elif now.hour <= 3:
            since = now - timedelta(hours=3 + now.hour, minutes=now.minute, seconds=now.second)
        else:
            since = datetime.min
        return self._touch(gid, uid, now, since)

    def get_up(self, gid: int, uid: int, now: datetime) -> tuple[int, timedelta]:
        """Record a good morning; return the rank today and the time slept."""
        since = now.replace(hour=6, minute=0, second=0)
        return self._touch(gid, uid, now, since)


def time_duration(delta: timedelta) -> tuple[int, int, int]:
    """Split a duration into hours, minutes and seconds, truncating toward zero."""
    micros = (delta.days * 86400 + delta.seconds) * 1_000_000 + delta.microseconds
    sign = -1 if micros < 0 else 1
    total_seconds = abs(micros) // 1_000_000
    hours, rest = divmod(total_seconds, 3600)
    minutes, seconds = divmod(rest, 60)
    return sign * hours, sign * minutes, sign * seconds


def is_morning(now: datetime) -> bool:
    """Good mornings count from 6 to 12 o'clock."""
    return 6 <= now.hour <= 12


def is_evening(now: datetime) -> bool:
    """Good nights count from 21 to 3 o'clock."""
    return now.hour >= 21 or now.hour <= 3


def _has_span(delta: timedelta) -> tuple[bool, tuple[int, int, int]]:
    hms = time_duration(delta)
    return not (hms == (0, 0, 0) or hms[0] >= 24), hms


def morning_reply(position: int, delta: timedelta) -> str:
    """Text sent after a good morning."""
    ok, (h, m, s) = _has_span(delta)
    if not ok:
        return f"早安成功！你是今天第{position}个起床的"
    return f"早安成功！你的睡眠时长为{h}时{m}分{s}秒,你是今天第{position}个起床的"


def evening_reply(position: int, delta: timedelta) -> str:
    """Text sent after a good night."""
    ok, (h, m, s) = _has_span(delta)
    if not ok:
        return f"晚安成功！你是今天第{position}个睡觉的"
    return f"晚安成功！你的清醒时长为{h}时{m}分{s}秒,你是今天第{position}个睡觉的"