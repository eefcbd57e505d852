# snapconnect/feed/__init__.py
"""
만료형 피드와 태그 탐색 엔진.

I/O를 하지 않는 순수 함수 모음입니다. 호출하는 쪽이 스냅 스냅샷과 현재 시간을 넘겨주고,
결과는 매번 새로 계산됩니다.
"""

from .expiry import (
    SNAP_TTL, compute_expires_at, remaining, elapsed, is_live,
    format_time_left, format_time_ago
)
from .tags import MAX_TAGS, DEFAULT_TAG, normalize_tags, tags_or_default, aggregate_tags
from .discovery import filter_by_tag, resolve_search_term, order_tag_chips, default_selection
from .assembler import FeedItem, assemble_feed

__all__ = [
    'SNAP_TTL', 'compute_expires_at', 'remaining', 'elapsed', 'is_live',
    'format_time_left', 'format_time_ago',
    'MAX_TAGS', 'DEFAULT_TAG', 'normalize_tags', 'tags_or_default', 'aggregate_tags',
    'filter_by_tag', 'resolve_search_term', 'order_tag_chips', 'default_selection',
    'FeedItem', 'assemble_feed'
]
