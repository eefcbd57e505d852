# snapconnect/api/snaps/services.py
import logging
from dataclasses import replace
from datetime import datetime
from typing import Optional, Dict, Any, List, Tuple

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from snapconnect.feed import (
    assemble_feed, compute_expires_at, is_live, tags_or_default, FeedItem
)
from snapconnect.models.snap import Snap
from snapconnect.models.user import UserProfile
from snapconnect.services.snap_stream import SnapStream
from snapconnect.services.storage_service import StorageService
from snapconnect.utils.datetime_utils import DateTimeUtils

class SnapService:
    """
    스냅 관련 비즈니스 로직을 담당하는 서비스 클래스.
    Firestore 읽기/쓰기를 맡고, 만료/정렬/표시 문자열 계산은 snapconnect.feed에 맡깁니다.
    """
    def __init__(self, storage_service: StorageService, snap_stream: Optional[SnapStream] = None):
        self.db = firestore.client()
        self.snaps_ref = self.db.collection('snaps')
        self.users_ref = self.db.collection('users')
        self.storage_service = storage_service
        self.snap_stream = snap_stream

    # --- 읽기 ---
    def load_snaps(self) -> Tuple[Snap, ...]:
        """
        전체 스냅 스냅샷을 반환합니다.
        실시간 구독이 동작 중이면 그 스냅샷을, 아니면 컬렉션을 직접 읽습니다.
        """
        if self.snap_stream is not None:
            snapshot = self.snap_stream.current()
            if snapshot is not None:
                return snapshot
        return tuple(Snap.from_document(doc.id, doc.to_dict()) for doc in self.snaps_ref.stream())

    def get_feed(self, now: Optional[datetime] = None) -> List[FeedItem]:
        """살아있는 스냅을 최신순으로 정렬한 피드를 만듭니다."""
        now = now or DateTimeUtils.now()
        snaps = self.with_owner_labels([snap for snap in self.load_snaps() if is_live(snap, now)])
        return assemble_feed(snaps, now)

    def get_snap(self, snap_id: str, now: Optional[datetime] = None) -> Optional[Snap]:
        """스냅 한 건을 조회합니다. 없거나 만료된 스냅이면 None."""
        now = now or DateTimeUtils.now()
        doc = self.snaps_ref.document(snap_id).get()
        if not doc.exists:
            return None
        snap = Snap.from_document(doc.id, doc.to_dict())
        if not is_live(snap, now):
            return None
        return self.with_owner_labels([snap])[0]

    def with_owner_labels(self, snaps: List[Snap]) -> List[Snap]:
        """owner_email이 비어 있는 스냅은 users 문서에서 이메일을 찾아 채웁니다."""
        missing = {snap.owner_id for snap in snaps if not snap.owner_email and snap.owner_id}
        if not missing:
            return list(snaps)

        emails: Dict[str, str] = {}
        try:
            refs = [self.users_ref.document(uid) for uid in missing]
            for doc in self.db.get_all(refs):
                if doc.exists:
                    profile = UserProfile.from_document(doc.id, doc.to_dict())
                    if profile.email:
                        emails[doc.id] = profile.email
        except Exception as e:
            # 작성자 정보를 못 읽어도 피드는 'Unknown'으로 보여줍니다.
            logging.error(f"스냅 작성자 정보 조회 실패: {e}", exc_info=True)

        return [
            replace(snap, owner_email=emails[snap.owner_id]) if snap.owner_id in emails and not snap.owner_email else snap
            for snap in snaps
        ]

    def count_snaps(self, user_id: str, now: Optional[datetime] = None) -> Dict[str, int]:
        """사용자가 올린 전체 스냅 수와 아직 만료되지 않은 스냅 수를 반환합니다."""
        now = now or DateTimeUtils.now()
        owner_query = self.snaps_ref.where(filter=FieldFilter('owner_id', '==', user_id))
        try:
            lifetime = owner_query.count().get()[0][0].value
            active = owner_query.where(filter=FieldFilter('expires_at', '>', now)).count().get()[0][0].value
            return {"lifetime": int(lifetime), "active": int(active)}
        except Exception as e:
            logging.error(f"스냅 수 집계 실패 (user_id: {user_id}): {e}", exc_info=True)
            return {"lifetime": 0, "active": 0}

    # --- 쓰기 ---
    def create_snap(self, user_id: str, snap_data: Dict[str, Any]) -> Snap:
        """
        새 스냅을 생성합니다. expires_at은 created_at + 24시간으로 고정됩니다.

        업로드된 파일을 공개로 전환하지 못하면 스냅 생성을 막지 않고
        클라이언트의 로컬 경로를 대신 저장합니다 (upload_method='local').
        """
        media_url, upload_method = self._resolve_media(user_id, snap_data.get('file_path'), snap_data.get('local_uri'))

        owner_email = None
        user_doc = self.users_ref.document(user_id).get()
        if user_doc.exists:
            owner_email = UserProfile.from_document(user_id, user_doc.to_dict()).email

        created_at = DateTimeUtils.now()
        doc_ref = self.snaps_ref.document()
        snap = Snap(
            snap_id=doc_ref.id,
            owner_id=user_id,
            caption=(snap_data.get('caption') or "").strip(),
            tags=tuple(tags_or_default(snap_data.get('tags') or [])),
            media_url=media_url,
            created_at=created_at,
            expires_at=compute_expires_at(created_at),
            owner_email=owner_email,
            upload_method=upload_method,
        )
        doc_ref.set(snap.to_document())
        logging.info(f"스냅 생성 완료 (snap_id: {snap.snap_id}, upload_method: {upload_method})")
        return snap

    def _resolve_media(self, user_id: str, file_path: Optional[str], local_uri: Optional[str]) -> Tuple[str, str]:
        if file_path:
            try:
                return self.storage_service.publish(file_path), "storage"
            except Exception as e:
                logging.warning(f"Storage 공개 전환 실패, 로컬 이미지로 대체합니다 (user_id: {user_id}): {e}")
        return local_uri or file_path, "local"

    def _owned_snap(self, snap_id: str, user_id: str):
        snap_ref = self.snaps_ref.document(snap_id)
        doc = snap_ref.get()
        if not doc.exists:
            raise ValueError("스냅을 찾을 수 없습니다.")
        snap = Snap.from_document(doc.id, doc.to_dict())
        if snap.owner_id != user_id:
            raise PermissionError("스냅을 수정할 권한이 없습니다.")
        return snap_ref, snap

    def update_caption(self, snap_id: str, user_id: str, caption: str) -> Snap:
        """작성자만 캡션을 수정할 수 있습니다."""
        snap_ref, snap = self._owned_snap(snap_id, user_id)
        caption = caption.strip()
        snap_ref.update({'caption': caption, 'updated_at': DateTimeUtils.now()})
        return replace(snap, caption=caption)

    def update_tags(self, snap_id: str, user_id: str, tags: List[str]) -> Snap:
        """작성자만 태그를 수정할 수 있습니다. 만료 시간은 건드리지 않습니다."""
        snap_ref, snap = self._owned_snap(snap_id, user_id)
        normalized = tags_or_default(tags)
        snap_ref.update({'tags': normalized, 'updated_at': DateTimeUtils.now()})
        return replace(snap, tags=tuple(normalized))

    def delete_snap(self, snap_id: str, user_id: str) -> None:
        """작성자만 삭제할 수 있습니다. 저장된 이미지도 함께 지웁니다."""
        snap_ref, snap = self._owned_snap(snap_id, user_id)
        if snap.upload_method == "storage":
            self.storage_service.delete_by_url(snap.media_url)
        snap_ref.delete()
        logging.info(f"스냅 삭제 완료 (snap_id: {snap_id})")
