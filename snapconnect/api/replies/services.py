# snapconnect/api/replies/services.py
import logging
import uuid
from dataclasses import asdict
from typing import Dict, Any

from firebase_admin import firestore

from snapconnect.api.snaps.services import SnapService
from snapconnect.models.reply import Reply
from snapconnect.services.notification_service import NotificationService
from snapconnect.utils.datetime_utils import DateTimeUtils

class ReplyService:
    """
    스냅 답장 관련 로직을 담당하는 서비스 클래스.
    답장을 저장하고 스냅 작성자에게 알림을 보냅니다.
    """
    def __init__(self, snap_service: SnapService, notification_service: NotificationService):
        self.db = firestore.client()
        self.replies_ref = self.db.collection('replies')
        self.snap_service = snap_service
        self.notification_service = notification_service

    def send_reply(self, snap_id: str, sender_id: str, message: str) -> Dict[str, Any]:
        """
        살아있는 스냅에만 답장할 수 있습니다.

        :raises ValueError: 스냅이 없거나 이미 만료된 경우
        """
        snap = self.snap_service.get_snap(snap_id)
        if not snap:
            raise ValueError("스냅을 찾을 수 없거나 이미 만료되었습니다.")

        reply = Reply(
            reply_id=str(uuid.uuid4()),
            snap_id=snap_id,
            sender_id=sender_id,
            recipient_id=snap.owner_id,
            message=message.strip(),
        )
        reply_dict = DateTimeUtils.for_firestore(asdict(reply))
        self.replies_ref.document(reply.reply_id).set(reply_dict)
        logging.info(f"답장 저장 완료 (snap_id: {snap_id}, reply_id: {reply.reply_id})")

        try:
            self.notification_service.create_reply_notification(
                recipient_id=snap.owner_id,
                sender_id=sender_id,
                snap_id=snap_id,
                message=reply.message,
                reply_id=reply.reply_id,
            )
        except Exception as e:
            # 알림 실패가 답장 자체를 막지는 않습니다.
            logging.error(f"답장 알림 생성 실패 (reply_id: {reply.reply_id}): {e}", exc_info=True)

        return reply_dict
