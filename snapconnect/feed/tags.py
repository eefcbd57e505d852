# snapconnect/feed/tags.py
from typing import Iterable, List, Any

MAX_TAGS = 5
DEFAULT_TAG = "misc"


def normalize_tags(raw_tags: Iterable[Any]) -> List[str]:
    """
    자유 입력 태그를 정규화합니다.
    공백 제거 -> 소문자 -> 빈 값 제거 -> 중복 제거 -> 앞에서부터 MAX_TAGS개.
    문자열이 아닌 항목은 버립니다. 여러 번 적용해도 결과가 같습니다.
    """
    if raw_tags is None or isinstance(raw_tags, str):
        return []

    normalized: List[str] = []
    for tag in raw_tags:
        if not isinstance(tag, str):
            continue
        tag = tag.strip().lower()
        if tag and tag not in normalized:
            normalized.append(tag)
    return normalized[:MAX_TAGS]


def tags_or_default(raw_tags: Iterable[Any]) -> List[str]:
    """정규화 결과가 비어 있으면 ['misc']를 반환합니다."""
    return normalize_tags(raw_tags) or [DEFAULT_TAG]


def aggregate_tags(snaps: Iterable[Any]) -> List[str]:
    """
    모든 스냅의 태그를 모아 중복 없이 오름차순으로 정렬한 태그 목록을 만듭니다.
    만료 여부는 보지 않습니다. tags가 없거나 잘못된 스냅은 빈 목록으로 취급합니다.
    """
    universe = set()
    for snap in snaps:
        tags = getattr(snap, 'tags', None)
        if not isinstance(tags, (list, tuple)):
            continue
        for tag in tags:
            if isinstance(tag, str) and tag.strip():
                universe.add(tag.strip().lower())
    return sorted(universe)
