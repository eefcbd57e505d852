# snapconnect/api/users/services.py
import logging
from typing import Optional, Dict, Any, List, Tuple

from firebase_admin import firestore

from snapconnect.feed.tags import normalize_tags
from snapconnect.models.user import UserProfile, merge_favorite_tags

# Firestore 배치 쓰기 한도
BATCH_LIMIT = 500

class UserService:
    """
    사용자 프로필(표시 이름, 즐겨찾기 태그) 관련 로직을 담당하는 서비스 클래스.
    """
    def __init__(self):
        self.db = firestore.client()
        self.users_ref = self.db.collection('users')
        self.snaps_ref = self.db.collection('snaps')

    def get_profile(self, uid: str) -> Optional[UserProfile]:
        doc = self.users_ref.document(uid).get()
        if not doc.exists:
            return None
        return UserProfile.from_document(uid, doc.to_dict())

    def get_or_create_profile(self, uid: str, email: Optional[str],
                              interests: Optional[List[str]] = None) -> Tuple[UserProfile, bool]:
        """
        최초 로그인 시 users/{uid} 문서를 만듭니다.
        가입 화면에서 고른 관심사는 정규화해서 즐겨찾기 태그로 저장합니다.

        :return: (프로필, 새로 만들었는지 여부)
        """
        existing = self.get_profile(uid)
        if existing:
            return existing, False

        profile = UserProfile(uid=uid, email=email, favorite_tags=normalize_tags(interests or []))
        self.users_ref.document(uid).set(profile.to_document())
        logging.info(f"신규 사용자 프로필 생성 (uid: {uid})")
        return profile, True

    def update_settings(self, uid: str, settings: Dict[str, Any]) -> UserProfile:
        """
        표시 이름과 즐겨찾기 태그를 저장합니다. 문서가 없으면 새로 만듭니다 (merge).
        """
        updates: Dict[str, Any] = {}
        if 'display_name' in settings:
            name = (settings.get('display_name') or "").strip()
            updates['display_name'] = name or None
        if 'favorite_tags' in settings:
            updates['favorite_tags'] = normalize_tags(settings.get('favorite_tags') or [])

        user_ref = self.users_ref.document(uid)
        if updates:
            user_ref.set(updates, merge=True)
        return UserProfile.from_document(uid, user_ref.get().to_dict())

    def migrate_interests(self) -> Dict[str, Any]:
        """
        예전 데이터 정리용 1회성 마이그레이션.
        - users: 'favorites'와 'interests'를 favorite_tags 하나로 합치고 (favorites 우선)
          소문자/최대 5개로 정리한 뒤 예전 필드를 삭제합니다.
        - snaps: 태그를 모두 소문자로 바꿉니다.
        """
        logging.info("마이그레이션 시작: 관심사/태그 소문자 통합")
        users_updated = self._migrate_users()
        snaps_updated = self._migrate_snaps()

        result = {
            "message": f"Migration completed! Updated {users_updated} users and {snaps_updated} snaps.",
            "updated": {"users": users_updated, "snaps": snaps_updated},
        }
        logging.info(f"마이그레이션 완료: {result['updated']}")
        return result

    def _migrate_users(self) -> int:
        updated = 0
        batch, pending = self.db.batch(), 0
        for doc in self.users_ref.stream():
            data = doc.to_dict() or {}
            merged = merge_favorite_tags(data)
            has_legacy = any(key in data for key in ('favorites', 'interests'))
            if merged == data.get('favorite_tags') and not has_legacy:
                continue

            batch.update(doc.reference, {
                'favorite_tags': merged,
                'favorites': firestore.DELETE_FIELD,
                'interests': firestore.DELETE_FIELD,
            })
            updated += 1
            pending += 1
            if pending == BATCH_LIMIT:
                batch.commit()
                batch, pending = self.db.batch(), 0
        if pending:
            batch.commit()
        return updated

    def _migrate_snaps(self) -> int:
        updated = 0
        batch, pending = self.db.batch(), 0
        for doc in self.snaps_ref.stream():
            data = doc.to_dict() or {}
            field = 'tags' if isinstance(data.get('tags'), list) else 'interests'
            tags = data.get(field)
            if not isinstance(tags, list):
                continue
            lowered = [tag.lower() if isinstance(tag, str) else tag for tag in tags]
            if lowered == tags:
                continue

            batch.update(doc.reference, {field: lowered})
            updated += 1
            pending += 1
            if pending == BATCH_LIMIT:
                batch.commit()
                batch, pending = self.db.batch(), 0
        if pending:
            batch.commit()
        return updated
