# snapconnect/models/snap.py
import logging
from dataclasses import dataclass, asdict
from datetime import datetime
from typing import Optional, Tuple, Dict, Any

from snapconnect.feed.expiry import SNAP_TTL
from snapconnect.utils.datetime_utils import DateTimeUtils, EPOCH

UNKNOWN_OWNER = "Unknown"

# 모바일 클라이언트가 직접 기록하던 예전 필드명 -> 현재 필드명
LEGACY_FIELDS = {
    'owner': 'owner_id',
    'url': 'media_url',
    'interests': 'tags',
    'createdAt': 'created_at',
    'expiresAt': 'expires_at',
    'ownerEmail': 'owner_email',
}


def _pick(data: Dict[str, Any], key: str) -> Any:
    """현재 필드명을 먼저 찾고, 없으면 예전 필드명으로 찾습니다."""
    if data.get(key) is not None:
        return data[key]
    for legacy, current in LEGACY_FIELDS.items():
        if current == key and data.get(legacy) is not None:
            return data[legacy]
    return None


def _str_or(value: Any, default: str) -> str:
    return value if isinstance(value, str) else default


def _string_tuple(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


@dataclass(frozen=True)
class Snap:
    """
    Firestore 'snaps' 컬렉션의 문서 구조를 정의하는 데이터클래스.
    expires_at은 생성 시 created_at + 24시간으로 한 번만 정해집니다.
    """
    snap_id: str
    owner_id: str
    caption: str
    tags: Tuple[str, ...]
    media_url: str
    created_at: datetime
    expires_at: datetime
    owner_email: Optional[str] = None
    upload_method: str = "storage"

    @property
    def owner_label(self) -> str:
        return self.owner_email or UNKNOWN_OWNER

    def to_document(self) -> Dict[str, Any]:
        """Firestore에 저장할 dict로 변환합니다."""
        data = asdict(self)
        data['tags'] = list(self.tags)
        return DateTimeUtils.for_firestore(data)

    @classmethod
    def from_document(cls, doc_id: str, data: Optional[Dict[str, Any]]) -> "Snap":
        """
        Firestore 문서를 Snap으로 변환하는 검증 경계.
        필드가 없거나 타입이 잘못되어도 예외 없이 기본값으로 대체합니다.
        """
        data = data if isinstance(data, dict) else {}

        created_at = DateTimeUtils.coerce(_pick(data, 'created_at'))
        expires_at = DateTimeUtils.coerce(_pick(data, 'expires_at'))
        if expires_at is None:
            logging.warning(f"만료 시간이 없거나 잘못된 스냅입니다. 만료된 것으로 처리합니다 (snap_id: {doc_id})")
            expires_at = EPOCH
        elif created_at is None:
            # 만료 시간만 남아 있는 문서
            created_at = expires_at - SNAP_TTL

        owner_email = _pick(data, 'owner_email')
        return cls(
            snap_id=_str_or(_pick(data, 'snap_id'), doc_id) or doc_id,
            owner_id=_str_or(_pick(data, 'owner_id'), ""),
            caption=_str_or(data.get('caption'), ""),
            tags=_string_tuple(_pick(data, 'tags')),
            media_url=_str_or(_pick(data, 'media_url'), ""),
            created_at=created_at or EPOCH,
            expires_at=expires_at,
            owner_email=owner_email if isinstance(owner_email, str) and owner_email else None,
            upload_method=_str_or(data.get('upload_method'), "storage"),
        )
