from datetime import datetime, timedelta

import pytest

from botplugins.qzone_model import (
    LOVE_TAG,
    Emotion,
    QzoneDB,
    Status,
    parse_id_list,
    parse_status_word,
)


@pytest.fixture
def db(tmp_path):
    with QzoneDB(tmp_path / "qzone.db") as database:
        yield database


def test_text_brief_waiting_named():
    e = Emotion(qq=10001, msg="hi", id=7, created_at=datetime(2022, 12, 10, 8, 5, 3))
    assert e.text_brief() == (
        "序号: 7\nQQ: 10001\n创建时间: 2022-12-10 08:05:03\n状态: 审核中\n匿名: 否"
    )


def test_text_brief_status_words_and_anonymous():
    base = dict(qq=1, msg="m", id=1, created_at=datetime(2022, 1, 1))
    assert "状态: 同意\n" in Emotion(status=Status.AGREE, **base).text_brief()
    assert "状态: 拒绝\n" in Emotion(status=Status.DISAGREE, **base).text_brief()
    assert Emotion(anonymous=True, **base).text_brief().endswith("匿名: 是")
    assert "状态" not in Emotion(status=9, **base).text_brief()


def test_cookie_insert_and_update(db):
    db.insert_or_update(42, "cookie-a")
    assert db.get_by_uin(42) == "cookie-a"
    db.insert_or_update(42, "cookie-b")
    assert db.get_by_uin(42) == "cookie-b"


def test_get_by_uin_missing(db):
    with pytest.raises(LookupError):
        db.get_by_uin(5)


def test_save_and_fetch_round_trip(db):
    created = datetime(2022, 5, 1, 12, 0, 0)
    first = db.save_emotion(Emotion(qq=3, msg="love", anonymous=True, created_at=created))
    second = db.save_emotion(Emotion(qq=4, msg="you", created_at=created))
    assert second > first
    got = db.emotions_by_ids([second, first])
    assert [e.id for e in got] == [first, second]
    assert got[0].msg == "love"
    assert got[0].anonymous is True
    assert got[0].tag == LOVE_TAG
    assert got[0].status == Status.WAIT
    assert got[0].created_at == created
    assert db.emotions_by_ids([]) == []


def test_pages_newest_first(db):
    start = datetime(2022, 1, 1)
    ids = [
        db.save_emotion(Emotion(qq=i, msg=str(i), created_at=start + timedelta(minutes=i)))
        for i in range(7)
    ]
    page0 = db.love_emotions_by_status(Status.WAIT, 0)
    page1 = db.love_emotions_by_status(Status.WAIT, 1)
    assert [e.id for e in page0] == list(reversed(ids))[:5]
    assert [e.id for e in page1] == list(reversed(ids))[5:]
    assert db.love_emotions_by_status(Status.WAIT, 2) == []


def test_status_filter_and_update(db):
    a = db.save_emotion(Emotion(qq=1, msg="a"))
    b = db.save_emotion(Emotion(qq=2, msg="b"))
    db.save_emotion(Emotion(qq=3, msg="c", tag="other"))
    db.update_status([a], Status.AGREE)
    assert [e.id for e in db.love_emotions_by_status(Status.AGREE, 0)] == [a]
    assert [e.id for e in db.love_emotions_by_status(Status.WAIT, 0)] == [b]
    assert {e.id for e in db.love_emotions_by_status(Status.ALL, 0)} == {a, b}


def test_parse_status_word():
    assert parse_status_word("等待") == Status.WAIT
    assert parse_status_word("同意") == Status.AGREE
    assert parse_status_word("拒绝") == Status.DISAGREE
    assert parse_status_word("所有") == Status.ALL
    assert parse_status_word("") == Status.WAIT


def test_parse_id_list():
    assert parse_id_list("1,2,3") == [1, 2, 3]
    assert parse_id_list("15") == [15]
    with pytest.raises(ValueError):
        parse_id_list("1,,2")
    with pytest.raises(ValueError):
        parse_id_list(",".join(["1"] * 10))