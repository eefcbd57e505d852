# snapconnect/models/reply.py
from dataclasses import dataclass, field
from datetime import datetime

from snapconnect.utils.datetime_utils import DateTimeUtils


@dataclass
class Reply:
    """
    Firestore 'replies' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    recipient_id는 항상 스냅 작성자입니다.
    """
    reply_id: str
    snap_id: str
    sender_id: str
    recipient_id: str
    message: str
    created_at: datetime = field(default_factory=DateTimeUtils.now)
