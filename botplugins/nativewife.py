"""Per-group local wife pictures: drawing, adding and removing."""

from __future__ import annotations

import hashlib
import random
from datetime import date
from pathlib import Path

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_GRANT_WORDS = ("设置", "授予", "让")
_REVOKE_WORDS = ("取消", "撤销", "不让")
PERMISSION_SUFFIX = "所有人均可添加wife"


def _base36(n: int) -> str:
    if n == 0:
        return "0"
    sign = "-" if n < 0 else ""
    n = abs(n)
    digits = []
    while n:
        n, r = divmod(n, 36)
        digits.append(_DIGITS[r])
    return sign + "".join(reversed(digits))


def daily_index(name: str, count: int, today: date) -> int:
    """Pick an index in ``range(count)`` that stays fixed for a name on a given day."""
    if count <= 0:
        raise ValueError("count must be positive")
    seed_text = f"{name}{today.year}{today.month}{today.day}"
    digest = hashlib.md5(seed_text.encode("utf-8")).digest()
    seed = int.from_bytes(digest[:8], "little", signed=True)
    return random.Random(seed).randrange(count)


def extract_name(text: str, command: str) -> str:
    """Return the name following the last ``command`` in ``text``, without spaces or slashes."""
    compact = text.replace(" ", "")
    pos = compact.rfind(command)
    if pos < 0:
        return ""
    name = compact[pos + len(command):]
    return name.replace("/", "").replace("\\", "")


def can_add_wife(gid: int, flags: int | None, is_admin: bool) -> bool:
    """Whether a member may add a wife in the group.

    ``flags`` is the plugin's stored group data, or None when the plugin
    manager is unavailable.
    """
    if gid <= 0 or flags is None:
        return False
    if flags & 1 == 1:
        return True
    return is_admin


def parse_permission_switch(text: str) -> bool | None:
    """Read the grant/revoke word before the permission suffix.

    Returns True to let everyone add, False to revoke, None when the word
    is not recognised.
    """
    compact = text.replace(" ", "")
    pos = compact.rfind(PERMISSION_SUFFIX)
    if pos < 0:
        return None
    word = compact[:pos]
    if word in _GRANT_WORDS:
        return True
    if word in _REVOKE_WORDS:
        return False
    return None


class WifeStore:
    """Image files kept in one folder per group."""

    def __init__(self, base):
        self.base = Path(base)

    def _folder(self, gid: int) -> Path:
        return self.base / _base36(gid)

    def list(self, gid: int) -> list[str]:
        """Names of the group's wives, sorted; empty when the group has none."""
        folder = self._folder(gid)
        if not folder.is_dir():
            return []
        return sorted(entry.name for entry in folder.iterdir())

    def add(self, gid: int, name: str, data: bytes) -> Path:
        """Store a picture under ``name`` and return its path."""
        if not name:
            raise ValueError("没有找到wife的名字！")
        if "/" in name or "\\" in name:
            raise ValueError(f"invalid wife name: {name!r}")
        folder = self._folder(gid)
        folder.mkdir(mode=0o755, parents=True, exist_ok=True)
        path = folder / name
        path.write_bytes(data)
        return path

    def remove(self, gid: int, name: str) -> None:
        """Delete the picture called ``name``; raises FileNotFoundError if absent."""
        if not name:
            raise ValueError("没有找到wife的名字！")
        (self._folder(gid) / name).unlink()

    def draw(self, gid: int, nickname: str, today: date) -> tuple[str, Path] | None:
        """Return today's wife of ``nickname`` as (name, path), or None when there are none."""
        names = self.list(gid)
        if not names:
            return None
        if len(names) == 1:
            chosen = names[0]
        else:
            chosen = names[daily_index(nickname, len(names), today)]
        return chosen, self._folder(gid) / chosen