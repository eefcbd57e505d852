# snapconnect/services/test_notification_service.py
"""
답장 알림 생성/조회 테스트. Firestore는 MagicMock으로 대체합니다.
"""

from datetime import datetime, timezone
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from snapconnect.services.notification_service import NotificationService


@pytest.fixture
def service():
    with patch('snapconnect.services.notification_service.firestore.client'):
        svc = NotificationService()
    svc.notifications_ref = MagicMock()
    svc.users_ref = MagicMock()
    return svc


def test_no_notification_for_own_snap(service):
    assert service.create_reply_notification("u1", "u1", "s1", "hi") is None
    service.notifications_ref.document.assert_not_called()

def test_reply_notification_starts_unseen(service):
    created = service.create_reply_notification("owner", "friend", "s1", "hi", reply_id="r1")

    assert created['seen'] is False
    assert created['recipient_id'] == "owner"
    service.notifications_ref.document.assert_called_once_with(created['notification_id'])

def test_unseen_notifications_newest_first_with_sender_label(service):
    older = {'notification_id': "n1", 'sender_id': "friend", 'created_at': datetime(2024, 5, 1, tzinfo=timezone.utc)}
    newer = {'notification_id': "n2", 'sender_id': "stranger", 'created_at': datetime(2024, 5, 2, tzinfo=timezone.utc)}
    query = service.notifications_ref.where.return_value.where.return_value
    query.stream.return_value = [SimpleNamespace(to_dict=lambda d=d: dict(d)) for d in (older, newer)]
    service.db.get_all.return_value = [
        SimpleNamespace(id="friend", exists=True, to_dict=lambda: {'display_name': "Jo"}),
        SimpleNamespace(id="stranger", exists=False, to_dict=lambda: None),
    ]

    notifications = service.get_unseen_notifications("owner")

    assert [n['notification_id'] for n in notifications] == ["n2", "n1"]
    assert notifications[0]['sender_label'] == "Someone"
    assert notifications[1]['sender_label'] == "Jo"


@pytest.fixture
def plain_transactional():
    # 재시도 루프 없이 함수를 바로 실행합니다.
    with patch('snapconnect.services.notification_service.firestore.transactional', lambda fn: fn):
        yield


def stored_notification(service, **data):
    snapshot = service.notifications_ref.document.return_value.get.return_value
    snapshot.exists = bool(data)
    snapshot.to_dict.return_value = dict(data)
    return service.db.transaction.return_value


def test_mark_seen_flips_once(service, plain_transactional):
    transaction = stored_notification(service, recipient_id="owner", seen=False)

    assert service.mark_seen("n1", "owner") is True
    transaction.update.assert_called_once()
    ref, fields = transaction.update.call_args[0]
    assert ref is service.notifications_ref.document.return_value
    assert fields['seen'] is True

def test_mark_seen_second_call_is_noop(service, plain_transactional):
    transaction = stored_notification(service, recipient_id="owner", seen=True)

    assert service.mark_seen("n1", "owner") is False
    transaction.update.assert_not_called()

def test_mark_seen_only_by_recipient(service, plain_transactional):
    transaction = stored_notification(service, recipient_id="owner", seen=False)

    with pytest.raises(PermissionError):
        service.mark_seen("n1", "friend")
    transaction.update.assert_not_called()

def test_mark_seen_missing_notification(service, plain_transactional):
    stored_notification(service)
    with pytest.raises(ValueError):
        service.mark_seen("missing", "owner")
