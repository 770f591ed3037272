import json
import random

import pytest

from botplugins.tarot import (
    IMAGE_BASE,
    Card,
    Draw,
    Formation,
    TarotDeck,
    parse_draw_command,
)


def _cards_json():
    doc = {}
    for i in range(77):
        doc[str(i)] = {
            "name": f"card{i}",
            "info": {
                "description": f"up{i}",
                "reverseDescription": f"down{i}",
                "imgUrl": f"img{i}.png",
            },
        }
    return json.dumps(doc)


def _formations_json():
    return json.dumps(
        {
            "圣三角": {"cards_num": 3, "is_cut": False, "represent": [["过去", "现在", "未来"]]},
            "四要素": {"cards_num": 4, "is_cut": True, "represent": [["火", "水", "气", "土"]]},
        }
    )


@pytest.fixture
def deck():
    return TarotDeck.from_json(_cards_json(), _formations_json())


def _index(card):
    return int(card.name.removeprefix("card"))


def test_from_json_reads_fields(deck):
    card = deck.cards["5"]
    assert card == Card("card5", "up5", "down5", "img5.png")
    assert deck.formations["四要素"].cards_num == 4
    assert deck.formations["四要素"].is_cut is True


def test_major_arcana_names(deck):
    names = deck.major_arcana_names()
    assert len(names) == 22
    assert names[0] == "card0"
    assert names[21] == "card21"


def test_draw_major_range_and_distinct(deck):
    draws = deck.draw(20, minor=False, rng=random.Random(1))
    indices = [_index(d.card) for d in draws]
    assert len(indices) == 20
    assert len(set(indices)) == 20
    assert all(0 <= i < 22 for i in indices)


def test_draw_minor_range(deck):
    for seed in range(20):
        (d,) = deck.draw(1, minor=True, rng=random.Random(seed))
        assert 22 <= _index(d.card) < 77


@pytest.mark.parametrize("count", [0, -1, 21])
def test_draw_rejects_bad_count(deck, count):
    with pytest.raises(ValueError):
        deck.draw(count, minor=False, rng=random.Random(0))


def test_draw_is_deterministic_for_seed(deck):
    a = deck.draw(5, minor=False, rng=random.Random(42))
    b = deck.draw(5, minor=False, rng=random.Random(42))
    assert a == b


def test_draw_properties_upright_and_reversed():
    card = Card("愚者", "upright text", "reversed text", "0.png")
    up = Draw(card, reversed=False)
    down = Draw(card, reversed=True)
    assert up.position == "『正位』"
    assert down.position == "『逆位』"
    assert up.description == "upright text"
    assert down.description == "reversed text"
    assert up.image_url == IMAGE_BASE + "0.png"
    assert down.image_url == IMAGE_BASE + "Reverse/0.png"
    assert up.image_name == "愚者"
    assert down.image_name == "Reverse愚者"


def test_spread_matches_formation(deck):
    result = deck.spread("塔罗", "圣三角", random.Random(3))
    assert [meaning for meaning, _ in result] == ["过去", "现在", "未来"]
    indices = [_index(d.card) for _, d in result]
    assert len(set(indices)) == 3
    assert all(0 <= i < 22 for i in indices)


def test_spread_minor_and_mixed_ranges(deck):
    for seed in range(10):
        minor = deck.spread("小阿卡纳", "四要素", random.Random(seed))
        assert all(22 <= _index(d.card) < 77 for _, d in minor)
        mixed = deck.spread("混合", "四要素", random.Random(seed))
        assert all(0 <= _index(d.card) < 77 for _, d in mixed)


def test_spread_unknown_raises(deck):
    with pytest.raises(KeyError):
        deck.spread("塔罗", "不存在", random.Random(0))


def test_lookup(deck):
    assert deck.lookup("card30") == deck.cards["30"]
    assert deck.lookup("nothing") is None


def test_card_list_text(deck):
    text = deck.card_list_text()
    assert text.startswith("塔罗牌列表\n大阿尔卡纳:\n")
    assert text.endswith("\n小阿尔卡纳:\n[圣杯|星币|宝剑|权杖] [0-10|侍从|骑士|王后|国王]")
    lines = text.split("\n")
    assert lines[2].split(" ") == [f"card{i}" for i in range(7)]
    assert lines[4].split(" ") == [f"card{i}" for i in range(14, 22)]


def test_constructor_accepts_mappings():
    deck = TarotDeck({"0": Card("a")}, {"x": Formation(1)})
    assert deck.lookup("a") == Card("a")
    assert deck.formations["x"].cards_num == 1


@pytest.mark.parametrize(
    "text,expected",
    [
        ("抽塔罗牌", (1, False)),
        ("抽大阿卡纳", (1, False)),
        ("抽大阿尔卡纳", (1, False)),
        ("抽小阿卡纳", (1, True)),
        ("抽5张塔罗牌", (5, False)),
        ("抽12张小阿尔卡纳", (12, True)),
        ("抽0张塔罗牌", (0, False)),
    ],
)
def test_parse_draw_command(text, expected):
    assert parse_draw_command(text) == expected


@pytest.mark.parametrize("text", ["抽123张塔罗牌", "塔罗牌", "抽塔罗", "抽卡"])
def test_parse_draw_command_rejects(text):
    assert parse_draw_command(text) is None