# snapconnect/models/user.py
from dataclasses import dataclass, field, asdict
from datetime import datetime
from typing import Optional, List, Dict, Any

from snapconnect.feed.tags import normalize_tags
from snapconnect.utils.datetime_utils import DateTimeUtils


def _as_list(value: Any) -> List[Any]:
    return list(value) if isinstance(value, (list, tuple)) else []


def merge_favorite_tags(data: Dict[str, Any]) -> List[str]:
    """
    예전 'favorites'를 앞에 두고 favorite_tags(없으면 'interests')를 이어 붙여 정규화합니다.
    소문자, 중복 제거, 최대 5개.
    """
    current = data.get('favorite_tags')
    if not isinstance(current, (list, tuple)):
        current = data.get('interests')
    return normalize_tags(_as_list(data.get('favorites')) + _as_list(current))


@dataclass
class UserProfile:
    """
    Firestore 'users' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    문서 ID는 Firebase Auth uid와 같습니다.
    """
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    favorite_tags: List[str] = field(default_factory=list)
    created_at: datetime = field(default_factory=DateTimeUtils.now)

    @property
    def label(self) -> str:
        """알림 등에 표시될 이름. 이름 -> 이메일 -> 'Someone' 순서."""
        return self.display_name or self.email or "Someone"

    def to_document(self) -> Dict[str, Any]:
        return DateTimeUtils.for_firestore(asdict(self))

    @classmethod
    def from_document(cls, uid: str, data: Optional[Dict[str, Any]]) -> "UserProfile":
        """잘못된 필드는 기본값으로 대체하는 검증 경계."""
        data = data if isinstance(data, dict) else {}

        email = data.get('email')
        display_name = data.get('display_name', data.get('firstName'))
        return cls(
            uid=uid,
            email=email if isinstance(email, str) and email else None,
            display_name=display_name if isinstance(display_name, str) and display_name.strip() else None,
            favorite_tags=merge_favorite_tags(data),
            created_at=DateTimeUtils.coerce(data.get('created_at')) or DateTimeUtils.now(),
        )
