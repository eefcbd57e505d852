# snapconnect/utils/test_datetime_utils.py
"""
시간 처리 유틸리티 테스트

사용법: python -m pytest snapconnect/utils/test_datetime_utils.py -v
"""

import pytest
from datetime import datetime, date, timezone, timedelta
from snapconnect.utils.datetime_utils import DateTimeUtils, EPOCH

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
        assert dt.tzinfo == timezone.utc  # UTC로 정규화되어야 함

def test_parse_iso_datetime_converts_offset_to_utc():
    dt = DateTimeUtils.parse_iso_datetime("2024-01-15T10:30:00+09:00")
    assert dt == datetime(2024, 1, 15, 1, 30, tzinfo=timezone.utc)

def test_parse_iso_datetime_rejects_garbage():
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("not-a-date")
    with pytest.raises(ValueError):
        DateTimeUtils.parse_iso_datetime("")

def test_to_iso_string():
    dt = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    assert DateTimeUtils.to_iso_string(dt) == "2024-01-15T10:30:00Z"

def test_timestamp_ms_conversion():
    dt = datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc)
    ms = DateTimeUtils.to_timestamp_ms(dt)
    assert DateTimeUtils.from_timestamp_ms(ms) == dt

def test_coerce_supported_types():
    """Firestore에서 올 수 있는 시간 값 변환 테스트"""
    expected = datetime(2024, 1, 15, 0, 0, tzinfo=timezone.utc)

    assert DateTimeUtils.coerce(datetime(2024, 1, 15)) == expected
    assert DateTimeUtils.coerce(date(2024, 1, 15)) == expected
    assert DateTimeUtils.coerce("2024-01-15T00:00:00Z") == expected
    assert DateTimeUtils.coerce(DateTimeUtils.to_timestamp_ms(expected)) == expected

    class FakeTimestamp:
        seconds = int(expected.timestamp())
        nanos = 0

    assert DateTimeUtils.coerce(FakeTimestamp()) == expected

def test_coerce_returns_none_for_bad_values():
    assert DateTimeUtils.coerce(None) is None
    assert DateTimeUtils.coerce(True) is None
    assert DateTimeUtils.coerce("yesterday-ish") is None
    assert DateTimeUtils.coerce(object()) is None

def test_for_firestore():
    """Firestore 변환 테스트"""
    test_data = {
        'created_at': datetime(2024, 1, 15, 10, 30),
        'nested': {'event_date': date(2023, 12, 25)},
        'list_data': [{'expires_at': datetime(2024, 1, 1)}],
        'caption': "hello",
    }

    converted = DateTimeUtils.for_firestore(test_data)

    assert converted['created_at'].tzinfo == timezone.utc
    assert isinstance(converted['nested']['event_date'], datetime)
    assert converted['list_data'][0]['expires_at'].tzinfo == timezone.utc
    assert converted['caption'] == "hello"

def test_from_firestore_normalizes_to_utc():
    kst = timezone(timedelta(hours=9))
    data = {'created_at': datetime(2024, 1, 15, 9, 0, tzinfo=kst), 'seen': False}
    converted = DateTimeUtils.from_firestore(data)
    assert converted['created_at'] == datetime(2024, 1, 15, 0, 0, tzinfo=timezone.utc)
    assert converted['seen'] is False

def test_epoch_is_utc():
    assert EPOCH.tzinfo == timezone.utc
    assert EPOCH < DateTimeUtils.now()
