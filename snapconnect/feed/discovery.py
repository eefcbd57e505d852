# snapconnect/feed/discovery.py
"""
Discover 화면의 태그 필터링, 검색어 해석, 태그 칩 정렬.

태그 선택(칩)과 자유 검색 모두 부분 문자열 일치를 사용합니다.
'art'는 'artisan' 태그에도 일치합니다.
"""

from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from snapconnect.feed.expiry import is_live
from snapconnect.feed.tags import normalize_tags


def _matches(snap, needle: str) -> bool:
    tags = getattr(snap, 'tags', None)
    if not isinstance(tags, (list, tuple)):
        return False
    return any(isinstance(tag, str) and needle in tag.lower() for tag in tags)


def filter_by_tag(snaps: Iterable, selected_tag: Optional[str], now: datetime) -> List:
    """
    선택된 태그로 살아있는 스냅을 걸러 expires_at 내림차순(최신순)으로 반환합니다.
    선택된 태그가 비어 있으면 빈 목록입니다.
    """
    if not selected_tag or not selected_tag.strip():
        return []
    needle = selected_tag.strip().lower()

    matched = [snap for snap in snaps if is_live(snap, now) and _matches(snap, needle)]
    matched.sort(key=lambda snap: snap.expires_at, reverse=True)
    return matched


def resolve_search_term(raw_term: str, universe: Sequence[str]) -> str:
    """
    자유 검색어를 실제 필터 값으로 바꿉니다.
    1) 태그 목록에 정확히 같은 태그가 있으면 그 태그
    2) 없으면 오름차순 정렬 기준 첫 번째 부분 일치 태그 ('mu' -> 'museum')
    3) 그것도 없으면 정리된 검색어 자체 (보통 결과 없음)
    """
    term = (raw_term or "").strip().lower()
    if not term:
        return term

    ordered = sorted({tag.lower() for tag in universe if isinstance(tag, str)})
    if term in ordered:
        return term
    for tag in ordered:
        if term in tag:
            return tag
    return term


def order_tag_chips(favorites: Iterable[str], universe: Sequence[str]) -> List[str]:
    """즐겨찾기 태그를 먼저, 나머지 태그를 그 뒤에 중복 없이 나열합니다."""
    chips = normalize_tags(favorites)
    seen = set(chips)
    for tag in universe:
        if not isinstance(tag, str):
            continue
        tag = tag.lower()
        if tag not in seen:
            seen.add(tag)
            chips.append(tag)
    return chips


def default_selection(chips: Sequence[str]) -> Optional[str]:
    """사용자가 태그를 고르지 않았을 때 첫 번째 칩을 선택합니다."""
    return chips[0] if chips else None
