# snapconnect/utils/datetime_utils.py
"""
스냅 만료 계산과 Firestore 저장에 쓰이는 시간 처리 유틸리티 모듈

이 모듈의 목적:
1. 모든 시간을 UTC timezone-aware datetime으로 통일
2. Firestore Timestamp / ISO 문자열 / epoch 밀리초를 같은 타입으로 변환
3. 읽기 경계에서 잘못된 값이 들어와도 예외 대신 None을 돌려주는 변환 제공
"""

import logging
from datetime import datetime, date, timezone, time
from typing import Any, Optional, Union
from dateutil import parser as dateutil_parser

logger = logging.getLogger(__name__)

# 파싱할 수 없는 시간 값의 대체값. 만료 판정에서 항상 '이미 만료됨'이 됩니다.
EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


class DateTimeUtils:
    """시간/날짜 처리를 위한 중앙화된 유틸리티 클래스"""

    @staticmethod
    def now() -> datetime:
        """현재 시간을 UTC timezone-aware datetime으로 반환"""
        return datetime.now(timezone.utc)

    @staticmethod
    def ensure_utc(dt: datetime) -> datetime:
        """timezone-naive면 UTC로 간주하고, aware면 UTC로 변환"""
        if dt.tzinfo is None:
            return dt.replace(tzinfo=timezone.utc)
        return dt.astimezone(timezone.utc)

    @staticmethod
    def parse_iso_datetime(iso_string: str) -> datetime:
        """
        ISO 포맷 문자열을 datetime 객체로 파싱

        지원 포맷:
        - 2024-01-15T10:30:00Z
        - 2024-01-15T10:30:00+09:00
        - 2024-01-15T10:30:00.123456Z
        - 2024-01-15T10:30:00
        """
        try:
            if not iso_string:
                raise ValueError("빈 문자열은 파싱할 수 없습니다")

            if iso_string.endswith('Z'):
                iso_string = iso_string[:-1] + '+00:00'

            dt = dateutil_parser.isoparse(iso_string)
            return DateTimeUtils.ensure_utc(dt)

        except Exception as e:
            logger.error(f"ISO datetime 파싱 실패: {iso_string} - {e}")
            raise ValueError(f"잘못된 ISO 날짜 형식입니다: {iso_string}")

    @staticmethod
    def to_iso_string(dt: datetime) -> str:
        """datetime 객체를 'Z' 접미사가 붙은 ISO 포맷 문자열로 변환"""
        return DateTimeUtils.ensure_utc(dt).isoformat().replace('+00:00', 'Z')

    @staticmethod
    def from_timestamp_ms(timestamp_ms: Union[int, float]) -> datetime:
        """Unix timestamp (밀리초)를 UTC datetime 객체로 변환"""
        if isinstance(timestamp_ms, bool) or not isinstance(timestamp_ms, (int, float)):
            raise ValueError(f"timestamp_ms는 숫자여야 합니다: {timestamp_ms!r}")
        return datetime.fromtimestamp(timestamp_ms / 1000.0, tz=timezone.utc)

    @staticmethod
    def to_timestamp_ms(dt: datetime) -> int:
        """datetime 객체를 Unix timestamp (밀리초)로 변환"""
        return int(DateTimeUtils.ensure_utc(dt).timestamp() * 1000)

    @staticmethod
    def coerce(value: Any) -> Optional[datetime]:
        """
        Firestore 문서에서 읽은 임의의 시간 값을 UTC datetime으로 변환합니다.

        - datetime (Firestore DatetimeWithNanoseconds 포함) -> UTC datetime
        - date -> 해당 날짜 00:00 UTC
        - ISO 문자열 -> 파싱 결과
        - 숫자 -> epoch 밀리초로 간주
        - 'seconds' 속성을 가진 protobuf Timestamp 류 객체 -> 변환

        변환할 수 없으면 예외를 던지지 않고 None을 반환합니다.
        """
        try:
            if value is None or isinstance(value, bool):
                return None
            if isinstance(value, datetime):
                return DateTimeUtils.ensure_utc(value)
            if isinstance(value, date):
                return datetime.combine(value, time.min).replace(tzinfo=timezone.utc)
            if isinstance(value, str):
                return DateTimeUtils.parse_iso_datetime(value)
            if isinstance(value, (int, float)):
                return DateTimeUtils.from_timestamp_ms(value)
            if hasattr(value, 'seconds'):
                nanos = getattr(value, 'nanos', 0) or 0
                return datetime.fromtimestamp(value.seconds + nanos / 1e9, tz=timezone.utc)
        except (ValueError, TypeError, OverflowError, OSError) as e:
            logger.warning(f"시간 값 변환 실패, 무시합니다: {value!r} - {e}")
            return None

        logger.warning(f"지원하지 않는 시간 타입입니다: {type(value).__name__}")
        return None

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Firestore 저장을 위해 객체의 날짜/시간 필드를 변환

        변환 규칙:
        - date -> datetime (00:00:00 UTC)
        - timezone-naive datetime -> timezone-aware datetime (UTC)
        - dict/list 내부 재귀적 변환
        """
        if isinstance(obj, datetime):
            return DateTimeUtils.ensure_utc(obj)
        if isinstance(obj, date):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]
        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Firestore에서 읽은 데이터의 datetime 필드를 UTC로 맞춥니다.
        dict/list 내부도 재귀적으로 변환하고, 그 외 타입은 그대로 반환합니다.
        """
        if isinstance(obj, datetime):
            return DateTimeUtils.ensure_utc(obj)
        if isinstance(obj, dict):
            return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}
        if isinstance(obj, list):
            return [DateTimeUtils.from_firestore(item) for item in obj]
        return obj


# 편의를 위한 글로벌 함수들
def now() -> datetime:
    """현재 UTC 시간 반환"""
    return DateTimeUtils.now()

def parse_iso(iso_string: str) -> datetime:
    """ISO 문자열을 datetime으로 파싱"""
    return DateTimeUtils.parse_iso_datetime(iso_string)

def to_iso(dt: datetime) -> str:
    """datetime을 ISO 문자열로 변환"""
    return DateTimeUtils.to_iso_string(dt)

def for_firestore(obj: Any) -> Any:
    """Firestore 저장용 변환"""
    return DateTimeUtils.for_firestore(obj)

def from_firestore(obj: Any) -> Any:
    """Firestore 읽기용 변환"""
    return DateTimeUtils.from_firestore(obj)
