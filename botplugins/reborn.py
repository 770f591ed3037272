"""Reincarnation simulator: weighted country and gender picks."""

from __future__ import annotations

import bisect
import json
import random
from itertools import accumulate
from typing import Any, Iterable

_GENDERS = (("男孩子", 50707), ("女孩子", 48292), ("雌雄同体", 1001))
_FAIL_LIMIT = 1 << 27

SUCCESS_TEMPLATE = "投胎成功！\n您出生在 {country}, 是 {gender}。"
FAILURE_TEXT = "投胎失败！\n您没能活到出生，祝您下次好运！"


class WeightedChooser:
    """Picks items with probability proportional to integer weights."""

    def __init__(self, choices: Iterable[tuple[Any, int]]):
        items = []
        weights = []
        for item, weight in choices:
            weight = int(weight)
            if weight < 0:
                raise ValueError(f"negative weight for {item!r}")
            if weight == 0:
                continue
            items.append(item)
            weights.append(weight)
        if not items:
            raise ValueError("zero Choices with Weight >= 1")
        self._items = items
        self._totals = list(accumulate(weights))

    @property
    def total(self) -> int:
        return self._totals[-1]

    def pick(self, rng: random.Random) -> Any:
        """Return one item chosen at random by weight."""
        r = rng.randrange(self.total) + 1
        return self._items[bisect.bisect_left(self._totals, r)]


def load_rates(text: str | bytes) -> WeightedChooser:
    """Build the country chooser from a JSON list of {name, weight} records."""
    rates = json.loads(text)
    return WeightedChooser((entry["name"], int(entry["weight"] * 1e9)) for entry in rates)


def gender_chooser() -> WeightedChooser:
    """The fixed gender distribution."""
    return WeightedChooser(_GENDERS)


_GENDER = gender_chooser()


def reborn(area_chooser: WeightedChooser, rng: random.Random) -> str:
    """Roll one reincarnation and return the reply text."""
    if rng.getrandbits(31) > _FAIL_LIMIT:
        country = area_chooser.pick(rng)
        gender = _GENDER.pick(rng)
        return SUCCESS_TEMPLATE.format(country=country, gender=gender)
    return FAILURE_TEXT