"""Tarot card draws, spreads and card lookup."""

from __future__ import annotations

import json
import random
import re
from dataclasses import dataclass, field

IMAGE_BASE = "https://gitcode.net/shudorcl/zbp-tarot/-/raw/master/"
REVERSE_DIR = "Reverse/"
POSITIONS = ("『正位』", "『逆位』")
MAJOR_COUNT = 22
MINOR_COUNT = 55
MAX_DRAW = 20

_DRAW_RE = re.compile(r"^抽(\d{1,2}张)?((塔罗牌|大阿(尔)?卡纳)|小阿(尔)?卡纳)$")


@dataclass(frozen=True)
class Card:
    """One tarot card."""

    name: str
    description: str = ""
    reverse_description: str = ""
    img_url: str = ""


@dataclass(frozen=True)
class Formation:
    """A spread layout: how many cards and what each position stands for."""

    cards_num: int
    is_cut: bool = False
    represent: list[list[str]] = field(default_factory=list)


@dataclass(frozen=True)
class Draw:
    """A card as it fell, upright or reversed."""

    card: Card
    reversed: bool

    @property
    def position(self) -> str:
        return POSITIONS[1] if self.reversed else POSITIONS[0]

    @property
    def description(self) -> str:
        return self.card.reverse_description if self.reversed else self.card.description

    @property
    def image_url(self) -> str:
        return IMAGE_BASE + (REVERSE_DIR if self.reversed else "") + self.card.img_url

    @property
    def image_name(self) -> str:
        return ("Reverse" + self.card.name) if self.reversed else self.card.name


def _range_for(kind: str) -> tuple[int, int]:
    if "小" in kind:
        return MAJOR_COUNT, MINOR_COUNT
    if kind == "混合":
        return 0, MAJOR_COUNT + MINOR_COUNT
    return 0, MAJOR_COUNT


class TarotDeck:
    """The full deck, indexed by card number, plus the known spreads."""

    def __init__(self, cards, formations):
        self.cards: dict[str, Card] = dict(cards)
        self.formations: dict[str, Formation] = dict(formations)
        self._by_name = {card.name: card for card in self.cards.values()}

    @classmethod
    def from_json(cls, cards_json, formations_json) -> TarotDeck:
        """Build a deck from the card and formation JSON documents."""
        raw_cards = json.loads(cards_json)
        raw_formations = json.loads(formations_json)
        cards = {}
        for key, value in raw_cards.items():
            info = value.get("info", {})
            cards[key] = Card(
                name=value.get("name", ""),
                description=info.get("description", ""),
                reverse_description=info.get("reverseDescription", ""),
                img_url=info.get("imgUrl", ""),
            )
        formations = {
            name: Formation(
                cards_num=value.get("cards_num", 0),
                is_cut=value.get("is_cut", False),
                represent=value.get("represent", []),
            )
            for name, value in raw_formations.items()
        }
        return cls(cards, formations)

    def major_arcana_names(self) -> list[str]:
        """Names of cards 0 to 21, in order."""
        return [self._card(i).name for i in range(MAJOR_COUNT)]

    def _card(self, index: int) -> Card:
        return self.cards.get(str(index), Card(name=""))

    def _draw_distinct(self, count: int, start: int, length: int, rng: random.Random) -> list[Draw]:
        if count > length:
            raise ValueError("ERROR: 抽取张数过多")
        seen: set[int] = set()
        draws = []
        for _ in range(count):
            j = rng.randrange(length)
            while j in seen:
                j = rng.randrange(length)
            seen.add(j)
            reversed_ = rng.randrange(2) == 1
            draws.append(Draw(self._card(j + start), reversed_))
        return draws

    def draw(self, count: int, minor: bool, rng: random.Random) -> list[Draw]:
        """Draw ``count`` distinct cards from the major or minor arcana."""
        if count <= 0:
            raise ValueError("ERROR: 张数必须为正")
        if count > MAX_DRAW:
            raise ValueError("ERROR: 抽取张数过多")
        start, length = (MAJOR_COUNT, MINOR_COUNT) if minor else (0, MAJOR_COUNT)
        return self._draw_distinct(count, start, length, rng)

    def spread(self, kind: str, name: str, rng: random.Random) -> list[tuple[str, Draw]]:
        """Lay out spread ``name``; return (meaning of position, draw) pairs.

        Raises KeyError when the spread is unknown.
        """
        formation = self.formations.get(name)
        if formation is None:
            listing = "\n".join(self.formations)
            raise KeyError(f"没有找到{name}噢~\n现有牌阵列表: \n{listing}")
        start, length = _range_for(kind)
        draws = self._draw_distinct(formation.cards_num, start, length, rng)
        meanings = formation.represent[0] if formation.represent else []
        return [
            (meanings[i] if i < len(meanings) else "", d) for i, d in enumerate(draws)
        ]

    def lookup(self, name: str) -> Card | None:
        """The card called ``name``, or None."""
        return self._by_name.get(name)

    def card_list_text(self) -> str:
        """The listing shown when a looked-up card is not found."""
        names = self.major_arcana_names()
        return (
            "塔罗牌列表\n大阿尔卡纳:\n"
            + " ".join(names[:7])
            + "\n"
            + " ".join(names[7:14])
            + "\n"
            + " ".join(names[14:22])
            + "\n小阿尔卡纳:\n[圣杯|星币|宝剑|权杖] [0-10|侍从|骑士|王后|国王]"
        )


def parse_draw_command(text: str) -> tuple[int, bool] | None:
    """Parse '抽[n张]塔罗牌|大阿卡纳|小阿卡纳' into (count, minor), or None."""
    m = _DRAW_RE.match(text)
    if m is None:
        return None
    count_part = m.group(1)
    count = int(count_part[:-1]) if count_part else 1
    return count, "小" in m.group(2)