"""Verdicts on image classification scores."""

from __future__ import annotations

from dataclasses import dataclass

HSO_IMAGE = "https://gchat.qpic.cn/gchatpic_new//--4234EDEC5F147A4C319A41149D7E0EA9/0"

_THRESHOLD = 0.3


@dataclass(frozen=True)
class Picture:
    """Class probabilities reported for one image."""

    drawings: float = 0.0
    hentai: float = 0.0
    neutral: float = 0.0
    porn: float = 0.0
    sexy: float = 0.0


def _flags(p: Picture) -> list[str]:
    labels = (("hentai", p.hentai), ("porn", p.porn), ("hso", p.sexy))
    return [label for label, score in labels if score > _THRESHOLD]


def judge(p: Picture) -> str:
    """Describe a picture for an explicit rating request."""
    if p.neutral > _THRESHOLD:
        return "普通哦"
    kind = "二次元" if p.drawings > _THRESHOLD or p.neutral < _THRESHOLD else "三次元"
    return "".join([kind, *(f" {flag}" for flag in _flags(p))])


def autojudge(p: Picture) -> str | None:
    """Return the automatic remark for a picture, or None when nothing is flagged."""
    if p.neutral > _THRESHOLD:
        return None
    flags = _flags(p)
    if not flags:
        return None
    kind = "二次元" if p.drawings > _THRESHOLD else "三次元"
    return "".join([kind, *(f" {flag}" for flag in flags)])