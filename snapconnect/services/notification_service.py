# snapconnect/services/notification_service.py
import logging
import uuid
from dataclasses import asdict
from typing import Optional, Dict, Any, List

from firebase_admin import firestore
from google.cloud.firestore_v1.base_query import FieldFilter

from snapconnect.models.notification import Notification
from snapconnect.models.user import UserProfile
from snapconnect.utils.datetime_utils import DateTimeUtils, EPOCH

class NotificationService:
    """
    답장 알림 관련 로직을 담당하는 공용 서비스 클래스.
    """
    def __init__(self):
        self.db = firestore.client()
        self.notifications_ref = self.db.collection('notifications')
        self.users_ref = self.db.collection('users')

    def create_reply_notification(self, recipient_id: str, sender_id: str, snap_id: str,
                                  message: str, reply_id: Optional[str] = None) -> Optional[Dict[str, Any]]:
        """
        스냅 작성자에게 답장 알림을 생성합니다.
        - 자기 자신에게 보내는 알림은 생성하지 않습니다.

        :return: 생성된 알림 dict, 생성하지 않았으면 None
        """
        if not recipient_id or recipient_id == sender_id:
            return None

        notification = Notification(
            notification_id=str(uuid.uuid4()),
            recipient_id=recipient_id,
            sender_id=sender_id,
            snap_id=snap_id,
            message=message,
            reply_id=reply_id,
        )
        notification_dict = DateTimeUtils.for_firestore(asdict(notification))
        self.notifications_ref.document(notification.notification_id).set(notification_dict)
        logging.info(f"답장 알림 생성 완료: {sender_id} -> {recipient_id} (snap_id: {snap_id})")
        return notification_dict

    def get_unseen_notifications(self, user_id: str) -> List[Dict[str, Any]]:
        """아직 확인하지 않은 알림을 최신순으로 반환합니다. 발신자 표시 이름을 함께 채웁니다."""
        query = (self.notifications_ref
                 .where(filter=FieldFilter('recipient_id', '==', user_id))
                 .where(filter=FieldFilter('seen', '==', False)))
        # 복합 인덱스 없이 조회하고 정렬은 여기서 합니다.
        notifications = [DateTimeUtils.from_firestore(doc.to_dict()) for doc in query.stream()]
        notifications.sort(key=lambda n: DateTimeUtils.coerce(n.get('created_at')) or EPOCH, reverse=True)

        labels = self._sender_labels({n.get('sender_id') for n in notifications if n.get('sender_id')})
        for notification in notifications:
            notification['sender_label'] = labels.get(notification.get('sender_id'), "Someone")
        return notifications

    def _sender_labels(self, sender_ids: set) -> Dict[str, str]:
        if not sender_ids:
            return {}
        refs = [self.users_ref.document(uid) for uid in sender_ids]
        labels = {}
        for doc in self.db.get_all(refs):
            if doc.exists:
                labels[doc.id] = UserProfile.from_document(doc.id, doc.to_dict()).label
        return labels

    def mark_seen(self, notification_id: str, user_id: str) -> bool:
        """
        알림을 확인 처리합니다. seen은 False -> True로 한 번만 바뀝니다.

        :return: 이번 호출로 바뀌었으면 True, 이미 확인된 알림이면 False
        :raises ValueError: 알림이 없는 경우
        :raises PermissionError: 수신자가 아닌 경우
        """
        notification_ref = self.notifications_ref.document(notification_id)
        transaction = self.db.transaction()

        @firestore.transactional
        def _mark_in_transaction(transaction, notification_ref):
            snapshot = notification_ref.get(transaction=transaction)
            if not snapshot.exists:
                raise ValueError("알림을 찾을 수 없습니다.")
            data = snapshot.to_dict()
            if data.get('recipient_id') != user_id:
                raise PermissionError("알림을 확인 처리할 권한이 없습니다.")
            if data.get('seen') is True:
                return False
            transaction.update(notification_ref, {'seen': True, 'seen_at': DateTimeUtils.now()})
            return True

        return _mark_in_transaction(transaction, notification_ref)
