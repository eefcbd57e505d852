# snapconnect/models/notification.py
from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional

from snapconnect.utils.datetime_utils import DateTimeUtils


@dataclass
class Notification:
    """
    Firestore 'notifications' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    seen은 수신자만 False -> True로 한 번 바꿀 수 있습니다.
    """
    notification_id: str
    recipient_id: str      # 알림을 받는 사용자 (스냅 작성자)
    sender_id: str         # 답장을 보낸 사용자
    snap_id: str
    message: str
    reply_id: Optional[str] = None
    seen: bool = False
    created_at: datetime = field(default_factory=DateTimeUtils.now)
