# snapconnect/feed/test_assembler.py
from datetime import datetime, timedelta, timezone

from snapconnect.feed.assembler import assemble_feed, FeedItem
from snapconnect.feed.expiry import compute_expires_at
from snapconnect.models.snap import Snap

T0 = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def make_snap(snap_id, created_at):
    return Snap(
        snap_id=snap_id, owner_id="u", caption="hi", tags=("misc",),
        media_url="https://example.com/x.jpg", created_at=created_at,
        expires_at=compute_expires_at(created_at)
    )


def test_empty_feed():
    assert assemble_feed([], T0) == []


def test_feed_drops_expired_and_sorts_newest_first():
    snaps = [
        make_snap("expired", T0 - timedelta(hours=30)),
        make_snap("older", T0 - timedelta(hours=5)),
        make_snap("newer", T0 - timedelta(minutes=10)),
    ]
    items = assemble_feed(snaps, T0)
    assert [item.snap.snap_id for item in items] == ["newer", "older"]
    assert all(isinstance(item, FeedItem) for item in items)


def test_feed_strings_are_recomputed_per_call():
    snap = make_snap("a", T0)
    first = assemble_feed([snap], T0 + timedelta(minutes=30))[0]
    later = assemble_feed([snap], T0 + timedelta(hours=22, minutes=30))[0]

    assert (first.time_left, first.time_ago) == ("23h left", "30m ago")
    assert (later.time_left, later.time_ago) == ("1h left", "22h ago")
