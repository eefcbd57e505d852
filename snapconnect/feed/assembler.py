# snapconnect/feed/assembler.py
from dataclasses import dataclass
from datetime import datetime
from typing import Iterable, List, TYPE_CHECKING

from snapconnect.feed.expiry import is_live, format_time_left, format_time_ago
if TYPE_CHECKING:
    from snapconnect.models.snap import Snap


@dataclass(frozen=True)
class FeedItem:
    """화면에 바로 그릴 수 있는 피드 한 줄. 호출할 때마다 새로 만듭니다."""
    snap: "Snap"
    time_left: str
    time_ago: str


def assemble_feed(snaps: Iterable["Snap"], now: datetime) -> List[FeedItem]:
    """
    살아있는 스냅만 expires_at 내림차순으로 정렬하고 표시용 시간 문자열을 붙입니다.
    스냅이 없으면 빈 목록을 반환합니다.
    """
    live = sorted(
        (snap for snap in snaps if is_live(snap, now)),
        key=lambda snap: snap.expires_at,
        reverse=True,
    )
    return [
        FeedItem(
            snap=snap,
            time_left=format_time_left(now, snap.expires_at),
            time_ago=format_time_ago(now, snap.created_at),
        )
        for snap in live
    ]
