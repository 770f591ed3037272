"""Group settings and reply rendering for the dictionary-matching chat replies."""

from __future__ import annotations

import yaml

T_KIMO = 0
T_DERE = 1
T_KAWA = 2

_KINDS = {"kimo": T_KIMO, "傲娇": T_DERE, "可爱": T_KAWA}
_TYPE_MASK = 3
_PROB_SHIFT = 59


def set_reply_type(data: int, kind: str) -> int:
    """Return group data with the reply dictionary switched to ``kind``."""
    try:
        t = _KINDS[kind]
    except KeyError:
        raise ValueError(f"unknown dictionary: {kind!r}") from None
    return (data & ~_TYPE_MASK) | t


def set_probability(data: int, digit) -> int:
    """Return group data with the trigger probability set to 0.``digit``.

    Raises ValueError unless ``digit`` is between 1 and 8.
    """
    n = int(digit)
    if n <= 0 or n >= 9:
        raise ValueError("ERROR: 概率越界")
    return (data & _TYPE_MASK) | ((n - 1) << _PROB_SHIFT)


def can_match(data: int | None, reply_type: int, has_picture: bool, roll: int) -> bool:
    """Whether a reply of ``reply_type`` may fire; ``roll`` is a draw from 0 to 9.

    ``data`` is None when the plugin manager is unavailable.
    """
    if has_picture or data is None:
        return False
    return data & _TYPE_MASK == reply_type and roll <= data >> _PROB_SHIFT


def render_reply(template: str, name: str, me: str) -> list[str]:
    """Fill in {name} and {me} and split the reply into its {segment} parts."""
    text = template.replace("{name}", name).replace("{me}", me)
    return text.split("{segment}")


def load_simai(text: str | bytes) -> tuple[dict[str, list[str]], dict[str, list[str]]]:
    """Read the tsundere and cute dictionaries from the simai YAML document."""
    doc = yaml.safe_load(text) or {}
    if not isinstance(doc, dict):
        raise ValueError("simai document must be a mapping")

    def _section(key: str) -> dict[str, list[str]]:
        section = doc.get(key) or {}
        return {str(k): [str(v) for v in (vals or [])] for k, vals in section.items()}

    return _section("傲娇"), _section("可爱")