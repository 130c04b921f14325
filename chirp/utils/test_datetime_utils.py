# chirp/utils/test_datetime_utils.py
"""
시간 유틸리티 테스트

사용법: python -m pytest chirp/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timedelta, timezone
from chirp.utils.datetime_utils import DateTimeUtils

NOW = datetime(2024, 6, 15, 12, 0, 0, tzinfo=timezone.utc)


def test_parse_iso_datetime():
    """ISO 포맷 파싱 테스트"""
    test_cases = [
        "2024-01-15T10:30:00Z",
        "2024-01-15T10:30:00+09:00",
        "2024-01-15T10:30:00.123456Z",
        "2024-01-15T10:30:00"
    ]

    for iso_string in test_cases:
        dt = DateTimeUtils.parse_iso_datetime(iso_string)
        assert isinstance(dt, datetime)
        assert dt.tzinfo == timezone.utc

    assert DateTimeUtils.parse_iso_datetime("2024-01-15T10:30:00+09:00").hour == 1


def test_to_iso_string_uses_z_suffix():
    assert DateTimeUtils.to_iso_string(datetime(2024, 1, 15, 10, 30)) == "2024-01-15T10:30:00Z"


def test_for_firestore():
    """Firestore 변환 테스트"""
    converted = DateTimeUtils.for_firestore({
        'join_date': date(2020, 1, 15),
        'created_at': datetime(2024, 1, 15, 10, 30),
        'nested': [{'created_at': datetime(2024, 1, 1)}]
    })

    assert converted['join_date'] == datetime(2020, 1, 15, tzinfo=timezone.utc)
    assert converted['created_at'].tzinfo == timezone.utc
    assert converted['nested'][0]['created_at'].tzinfo == timezone.utc


@pytest.mark.parametrize("delta, expected", [
    (timedelta(seconds=0), "a few seconds ago"),
    (timedelta(seconds=30), "a few seconds ago"),
    (timedelta(seconds=60), "a minute ago"),
    (timedelta(minutes=5), "5 minutes ago"),
    (timedelta(minutes=50), "an hour ago"),
    (timedelta(hours=2), "2 hours ago"),
    (timedelta(hours=23), "a day ago"),
    (timedelta(days=3), "3 days ago"),
    (timedelta(days=30), "a month ago"),
    (timedelta(days=120), "4 months ago"),
    (timedelta(days=400), "a year ago"),
    (timedelta(days=365 * 3), "3 years ago"),
])
def test_from_now_past(delta, expected):
    assert DateTimeUtils.from_now(NOW - delta, now=NOW) == expected


def test_from_now_future():
    assert DateTimeUtils.from_now(NOW + timedelta(days=3), now=NOW) == "in 3 days"


def test_from_now_treats_naive_datetime_as_utc():
    naive = datetime(2024, 6, 15, 10, 0, 0)
    assert DateTimeUtils.from_now(naive, now=NOW) == "2 hours ago"


def test_error_handling():
    """오류 처리 테스트"""
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("invalid-date")

    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")
