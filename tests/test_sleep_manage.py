from datetime import datetime, timedelta

import pytest

from botplugins.sleep_manage import (
    SleepDB,
    evening_reply,
    is_evening,
    is_morning,
    morning_reply,
    time_duration,
)


@pytest.fixture
def db(tmp_path):
    with SleepDB(tmp_path / "manage.db") as database:
        yield database


def test_first_sleep_has_no_duration(db):
    position, delta = db.sleep(1, 10, datetime(2024, 1, 1, 22, 0))
    assert position == 1
    assert delta == timedelta(0)


def test_sleep_ranking_and_awake_time(db):
    db.sleep(1, 10, datetime(2024, 1, 1, 22, 0))
    position, _ = db.sleep(1, 11, datetime(2024, 1, 1, 22, 30))
    assert position == 2
    position, delta = db.sleep(1, 10, datetime(2024, 1, 1, 23, 0))
    assert delta == timedelta(hours=1)
    assert position == 2


def test_groups_are_separate(db):
    db.sleep(1, 10, datetime(2024, 1, 1, 22, 0))
    position, _ = db.sleep(2, 11, datetime(2024, 1, 1, 22, 5))
    assert position == 1


def test_get_up_after_night(db):
    db.sleep(1, 10, datetime(2024, 1, 1, 23, 0))
    db.sleep(1, 11, datetime(2024, 1, 1, 23, 30))
    position, delta = db.get_up(1, 10, datetime(2024, 1, 2, 7, 0))
    assert delta == timedelta(hours=8)
    assert position == 1


def test_after_midnight_counts_previous_evening(db):
    db.sleep(1, 10, datetime(2024, 1, 1, 22, 0))
    position, _ = db.sleep(1, 11, datetime(2024, 1, 2, 1, 0))
    assert position == 2


def test_time_duration_split():
    assert time_duration(timedelta(hours=1, minutes=2, seconds=3)) == (1, 2, 3)


def test_time_duration_negative_truncates_toward_zero():
    assert time_duration(-timedelta(hours=1, minutes=1, seconds=1)) == (-1, -1, -1)


@pytest.mark.parametrize("hour,expected", [(5, False), (6, True), (12, True), (13, False)])
def test_is_morning(hour, expected):
    assert is_morning(datetime(2024, 1, 1, hour)) is expected


@pytest.mark.parametrize("hour,expected", [(20, False), (21, True), (0, True), (3, True), (4, False)])
def test_is_evening(hour, expected):
    assert is_evening(datetime(2024, 1, 1, hour)) is expected


def test_morning_reply_without_duration():
    assert morning_reply(3, timedelta(0)) == "早安成功！你是今天第3个起床的"


def test_morning_reply_with_duration():
    text = morning_reply(2, timedelta(hours=8, minutes=5, seconds=1))
    assert text == "早安成功！你的睡眠时长为8时5分1秒,你是今天第2个起床的"


def test_evening_reply_over_a_day_is_short():
    assert evening_reply(4, timedelta(hours=30)) == "晚安成功！你是今天第4个睡觉的"


def test_evening_reply_with_duration():
    text = evening_reply(1, timedelta(hours=2))
    assert text == "晚安成功！你的清醒时长为2时0分0秒,你是今天第1个睡觉的"