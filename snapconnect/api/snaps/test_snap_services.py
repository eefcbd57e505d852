# snapconnect/api/snaps/test_snap_services.py
"""
스냅 생성/수정/삭제 로직 테스트. Firestore와 Storage는 MagicMock으로 대체합니다.
"""

from datetime import timedelta
from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from snapconnect.api.snaps.services import SnapService
from snapconnect.feed.expiry import SNAP_TTL
from snapconnect.models.snap import Snap
from snapconnect.utils.datetime_utils import DateTimeUtils


@pytest.fixture
def storage():
    return MagicMock()


@pytest.fixture
def service(storage):
    with patch('snapconnect.api.snaps.services.firestore.client'):
        svc = SnapService(storage_service=storage)
    svc.snaps_ref = MagicMock()
    svc.users_ref = MagicMock()
    svc.snaps_ref.document.return_value.id = "snap-1"
    svc.users_ref.document.return_value.get.return_value.exists = True
    svc.users_ref.document.return_value.get.return_value.to_dict.return_value = {'email': "me@example.com"}
    return svc


def stored_snap(service, **overrides):
    created_at = DateTimeUtils.now() - timedelta(hours=1)
    data = dict(
        owner_id="owner", caption="old", tags=["beach"], media_url="https://storage.googleapis.com/b/snaps/owner/a.jpg",
        created_at=created_at, expires_at=created_at + SNAP_TTL, upload_method="storage"
    )
    data.update(overrides)
    doc = service.snaps_ref.document.return_value.get.return_value
    doc.exists = True
    doc.id = "snap-1"
    doc.to_dict.return_value = data
    return doc


def test_create_snap_sets_expiry_and_default_tag(service, storage):
    storage.publish.return_value = "https://storage.googleapis.com/b/snaps/u1/x.jpg"

    snap = service.create_snap("u1", {"file_path": "snaps/u1/x.jpg", "caption": "  hi  ", "tags": ["", "  "]})

    assert snap.expires_at - snap.created_at == SNAP_TTL
    assert snap.tags == ("misc",)
    assert snap.caption == "hi"
    assert snap.upload_method == "storage"
    assert snap.owner_email == "me@example.com"
    stored = service.snaps_ref.document.return_value.set.call_args[0][0]
    assert stored['tags'] == ["misc"]
    assert stored['expires_at'] == snap.expires_at

def test_create_snap_falls_back_to_local_uri(service, storage):
    storage.publish.side_effect = FileNotFoundError("missing")

    snap = service.create_snap("u1", {"file_path": "snaps/u1/x.jpg", "local_uri": "file:///photo.jpg", "tags": ["Art"]})

    assert snap.upload_method == "local"
    assert snap.media_url == "file:///photo.jpg"
    assert snap.tags == ("art",)

def test_get_snap_hides_expired(service):
    stored_snap(service, created_at=DateTimeUtils.now() - timedelta(hours=30),
                expires_at=DateTimeUtils.now() - timedelta(hours=6))
    assert service.get_snap("snap-1") is None

def test_update_tags_requires_owner(service):
    stored_snap(service)
    with pytest.raises(PermissionError):
        service.update_tags("snap-1", "intruder", ["x"])

def test_update_tags_keeps_expiry(service):
    doc = stored_snap(service)
    before = Snap.from_document("snap-1", doc.to_dict.return_value)

    updated = service.update_tags("snap-1", "owner", ["Museum", "museum", ""])

    assert updated.tags == ("museum",)
    assert updated.expires_at == before.expires_at
    update_fields = service.snaps_ref.document.return_value.update.call_args[0][0]
    assert 'expires_at' not in update_fields

def test_delete_missing_snap(service):
    service.snaps_ref.document.return_value.get.return_value.exists = False
    with pytest.raises(ValueError):
        service.delete_snap("nope", "owner")

def test_delete_removes_stored_image(service, storage):
    stored_snap(service)
    service.delete_snap("snap-1", "owner")
    storage.delete_by_url.assert_called_once_with("https://storage.googleapis.com/b/snaps/owner/a.jpg")
    service.snaps_ref.document.return_value.delete.assert_called_once()

def test_feed_uses_stream_snapshot(service):
    now = DateTimeUtils.now()
    live = Snap(snap_id="live", owner_id="o", caption="", tags=("a",), media_url="",
                created_at=now - timedelta(hours=2), expires_at=now + timedelta(hours=22), owner_email="o@x.com")
    dead = Snap(snap_id="dead", owner_id="o", caption="", tags=("a",), media_url="",
                created_at=now - timedelta(hours=25), expires_at=now - timedelta(hours=1))
    stream = MagicMock()
    stream.current.return_value = (live, dead)
    service.snap_stream = stream

    items = service.get_feed(now)

    assert [item.snap.snap_id for item in items] == ["live"]
    assert items[0].time_left == "22h left"
    assert items[0].time_ago == "2h ago"
    service.snaps_ref.stream.assert_not_called()

def test_update_caption_by_owner(service):
    doc = stored_snap(service)
    before = Snap.from_document("snap-1", doc.to_dict.return_value)

    updated = service.update_caption("snap-1", "owner", "  new caption ")

    assert updated.caption == "new caption"
    assert updated.expires_at == before.expires_at
    update_fields = service.snaps_ref.document.return_value.update.call_args[0][0]
    assert update_fields['caption'] == "new caption"
    assert 'expires_at' not in update_fields

def test_update_caption_requires_owner(service):
    stored_snap(service)
    with pytest.raises(PermissionError):
        service.update_caption("snap-1", "intruder", "mine now")
    service.snaps_ref.document.return_value.update.assert_not_called()

def test_count_snaps_lifetime_and_active(service):
    owner_query = service.snaps_ref.where.return_value
    owner_query.count.return_value.get.return_value = [[SimpleNamespace(value=7)]]
    owner_query.where.return_value.count.return_value.get.return_value = [[SimpleNamespace(value=2)]]

    assert service.count_snaps("owner") == {"lifetime": 7, "active": 2}

def test_count_snaps_failure_returns_zero(service):
    service.snaps_ref.where.return_value.count.side_effect = RuntimeError("aggregation unavailable")
    assert service.count_snaps("owner") == {"lifetime": 0, "active": 0}
