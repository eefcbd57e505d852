# snapconnect/feed/expiry.py
"""
스냅의 남은 시간/지난 시간 계산과 표시 문자열 생성.

모든 함수는 순수 함수입니다. 현재 시간(now)은 항상 인자로 받습니다.
표시 문자열은 시간에 따라 바뀌므로 스냅에 캐시하지 않습니다.
"""

from datetime import datetime, timedelta

SNAP_TTL = timedelta(hours=24)

_HOUR = timedelta(hours=1)
_MINUTE = timedelta(minutes=1)


def compute_expires_at(created_at: datetime) -> datetime:
    """생성 시간으로부터 만료 시간을 계산합니다. expires_at을 만드는 유일한 경로입니다."""
    return created_at + SNAP_TTL


def remaining(now: datetime, expires_at: datetime) -> timedelta:
    """만료까지 남은 시간. 이미 만료되었으면 음수입니다."""
    return expires_at - now


def elapsed(now: datetime, created_at: datetime) -> timedelta:
    """생성 후 지난 시간."""
    return now - created_at


def is_live(snap, now: datetime) -> bool:
    """now < expires_at 인 스냅만 살아있는 스냅입니다."""
    return now < snap.expires_at


def _bucket(delta: timedelta, suffix: str, fallback: str) -> str:
    # 반올림이 아닌 내림: 119분 -> 1h
    hours = delta // _HOUR
    if hours >= 1:
        return f"{hours}h {suffix}"
    minutes = delta // _MINUTE
    if minutes >= 1:
        return f"{minutes}m {suffix}"
    return fallback


def format_time_left(now: datetime, expires_at: datetime) -> str:
    """'{h}h left', '{m}m left' 또는 'Expired'."""
    return _bucket(remaining(now, expires_at), "left", "Expired")


def format_time_ago(now: datetime, created_at: datetime) -> str:
    """'{h}h ago', '{m}m ago' 또는 'Just now'."""
    return _bucket(elapsed(now, created_at), "ago", "Just now")
