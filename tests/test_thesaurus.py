import pytest

from botplugins.thesaurus import (
    T_DERE,
    T_KAWA,
    T_KIMO,
    can_match,
    load_simai,
    render_reply,
    set_probability,
    set_reply_type,
)


@pytest.mark.parametrize("kind,expected", [("kimo", T_KIMO), ("傲娇", T_DERE), ("可爱", T_KAWA)])
def test_set_reply_type_low_bits(kind, expected):
    assert set_reply_type(0, kind) & 3 == expected


def test_set_reply_type_keeps_probability():
    data = set_probability(0, 5)
    switched = set_reply_type(data, "可爱")
    assert switched >> 59 == data >> 59
    assert switched & 3 == T_KAWA


def test_set_reply_type_unknown():
    with pytest.raises(ValueError):
        set_reply_type(0, "other")


@pytest.mark.parametrize("digit", [0, 9, "0", "9"])
def test_set_probability_out_of_range(digit):
    with pytest.raises(ValueError):
        set_probability(0, digit)


def test_set_probability_keeps_type_and_stores_level():
    data = set_probability(set_reply_type(0, "傲娇"), "5")
    assert data & 3 == T_DERE
    assert data >> 59 == 4


def test_can_match_uses_roll_threshold():
    data = set_probability(set_reply_type(0, "傲娇"), 5)
    assert can_match(data, T_DERE, False, data >> 59)
    assert not can_match(data, T_DERE, False, (data >> 59) + 1)


def test_can_match_rejects_picture_wrong_type_and_missing_manager():
    data = set_probability(set_reply_type(0, "kimo"), 8)
    assert not can_match(data, T_KIMO, True, 0)
    assert not can_match(data, T_KAWA, False, 0)
    assert not can_match(None, T_KIMO, False, 0)


def test_render_reply_substitutes_and_splits():
    parts = render_reply("hi {name}{segment}I am {me}", "Ann", "Bot")
    assert parts == ["hi Ann", "I am Bot"]


def test_render_reply_single_segment():
    assert render_reply("plain", "Ann", "Bot") == ["plain"]


def test_load_simai_sections():
    doc = "傲娇:\n  hello:\n    - hmph\n可爱:\n  hello:\n    - nya\n    - nyan\n"
    dere, kawa = load_simai(doc)
    assert dere == {"hello": ["hmph"]}
    assert kawa == {"hello": ["nya", "nyan"]}


def test_load_simai_missing_sections():
    assert load_simai("") == ({}, {})
    with pytest.raises(ValueError):
        load_simai("- a\n- b\n")