# snapconnect/api/discover/services.py
from datetime import datetime
from typing import Optional, Dict, Any, List, Tuple

from snapconnect.feed import (
    aggregate_tags, order_tag_chips, default_selection,
    filter_by_tag, resolve_search_term, assemble_feed, FeedItem
)
from snapconnect.api.snaps.services import SnapService
from snapconnect.api.users.services import UserService
from snapconnect.utils.datetime_utils import DateTimeUtils

class DiscoverService:
    """
    Discover 화면(태그 칩, 태그별 스냅, 검색)을 담당하는 서비스 클래스.
    스냅 스냅샷은 SnapService에서 받고, 계산은 모두 snapconnect.feed에 맡깁니다.
    """
    def __init__(self, snap_service: SnapService, user_service: UserService):
        self.snap_service = snap_service
        self.user_service = user_service

    def _favorites(self, user_id: str) -> List[str]:
        profile = self.user_service.get_profile(user_id)
        return list(profile.favorite_tags) if profile else []

    def get_tag_chips(self, user_id: str) -> Dict[str, Any]:
        """즐겨찾기 태그를 앞에 둔 태그 칩 목록."""
        favorites = self._favorites(user_id)
        universe = aggregate_tags(self.snap_service.load_snaps())
        return {
            "favorites": favorites,
            "tags": order_tag_chips(favorites, universe),
        }

    def discover(self, user_id: str, tag: Optional[str] = None,
                 now: Optional[datetime] = None) -> Tuple[Optional[str], List[FeedItem]]:
        """
        선택한 태그의 살아있는 스냅을 최신순으로 반환합니다.
        태그를 고르지 않았으면 첫 번째 칩을 선택한 것으로 봅니다.

        :return: (실제로 적용된 태그, 피드 항목 목록)
        """
        now = now or DateTimeUtils.now()
        snaps = self.snap_service.load_snaps()

        selected = (tag or "").strip().lower() or None
        if selected is None:
            chips = order_tag_chips(self._favorites(user_id), aggregate_tags(snaps))
            selected = default_selection(chips)

        matched = filter_by_tag(snaps, selected, now)
        return selected, assemble_feed(self.snap_service.with_owner_labels(matched), now)

    def search(self, term: str, now: Optional[datetime] = None) -> Tuple[str, List[FeedItem]]:
        """검색어를 태그로 해석한 뒤 그 태그로 필터링합니다. ('mu' -> 'museum')"""
        now = now or DateTimeUtils.now()
        snaps = self.snap_service.load_snaps()
        resolved = resolve_search_term(term, aggregate_tags(snaps))
        matched = filter_by_tag(snaps, resolved, now)
        return resolved, assemble_feed(self.snap_service.with_owner_labels(matched), now)
