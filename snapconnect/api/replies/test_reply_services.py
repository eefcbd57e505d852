# snapconnect/api/replies/test_reply_services.py
"""
답장 전송 테스트. 스냅 조회와 알림 생성은 MagicMock으로 대체합니다.
"""

from datetime import timedelta
from unittest.mock import MagicMock, patch

import pytest
from marshmallow import ValidationError

from snapconnect.api.replies.schemas import ReplyCreateSchema
from snapconnect.api.replies.services import ReplyService
from snapconnect.models.snap import Snap
from snapconnect.utils.datetime_utils import DateTimeUtils


@pytest.fixture
def snap_service():
    return MagicMock()


@pytest.fixture
def notification_service():
    return MagicMock()


@pytest.fixture
def service(snap_service, notification_service):
    with patch('snapconnect.api.replies.services.firestore.client'):
        svc = ReplyService(snap_service, notification_service)
    svc.replies_ref = MagicMock()
    return svc


def live_snap():
    now = DateTimeUtils.now()
    return Snap(snap_id="s1", owner_id="owner", caption="", tags=("a",), media_url="",
                created_at=now, expires_at=now + timedelta(hours=24))


def test_reply_to_expired_snap_is_rejected(service, snap_service):
    snap_service.get_snap.return_value = None
    with pytest.raises(ValueError):
        service.send_reply("s1", "friend", "nice")
    service.replies_ref.document.assert_not_called()

def test_reply_notifies_owner(service, snap_service, notification_service):
    snap_service.get_snap.return_value = live_snap()

    reply = service.send_reply("s1", "friend", "  nice!  ")

    assert reply['recipient_id'] == "owner"
    assert reply['message'] == "nice!"
    notification_service.create_reply_notification.assert_called_once_with(
        recipient_id="owner", sender_id="friend", snap_id="s1",
        message="nice!", reply_id=reply['reply_id']
    )

def test_notification_failure_does_not_lose_reply(service, snap_service, notification_service):
    snap_service.get_snap.return_value = live_snap()
    notification_service.create_reply_notification.side_effect = RuntimeError("firestore down")

    reply = service.send_reply("s1", "friend", "nice")

    service.replies_ref.document.return_value.set.assert_called_once()
    assert reply['snap_id'] == "s1"

@pytest.mark.parametrize("message", ["   ", "\n\t "])
def test_blank_message_is_rejected(message):
    with pytest.raises(ValidationError):
        ReplyCreateSchema().load({"message": message})

def test_message_with_surrounding_spaces_is_accepted():
    assert ReplyCreateSchema().load({"message": "  nice  "}) == {"message": "  nice  "}
