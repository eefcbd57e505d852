# snapconnect/feed/test_tags.py
"""
태그 정규화/집계 테스트

사용법: python -m pytest snapconnect/feed/test_tags.py -v
"""

import itertools
from datetime import datetime, timedelta, timezone

from snapconnect.feed.tags import (
    MAX_TAGS, normalize_tags, tags_or_default, aggregate_tags
)
from snapconnect.models.snap import Snap

T0 = datetime(2024, 5, 1, tzinfo=timezone.utc)


def make_snap(snap_id, tags, expires_at=T0 + timedelta(hours=24)):
    return Snap(
        snap_id=snap_id, owner_id="u", caption="", tags=tuple(tags),
        media_url="", created_at=T0, expires_at=expires_at
    )


def test_normalize_trims_lowercases_and_dedupes():
    assert set(normalize_tags(["  Art ", "art", "ART", "music"])) == {"art", "music"}


def test_normalize_drops_empty_and_non_string_entries():
    assert normalize_tags(["", "   ", None, 3, "Food"]) == ["food"]


def test_normalize_caps_after_dedupe():
    raw = ["a", "A", "b", "c", "d", "e", "f", "g"]
    result = normalize_tags(raw)
    assert len(result) == MAX_TAGS
    assert result == ["a", "b", "c", "d", "e"]


def test_normalize_is_idempotent():
    samples = [
        [],
        ["  Art ", "art", "ART", "music"],
        ["Z", "y", " X ", "w", "V", "u", "t"],
        ["", "Mixed Case", "mixed case  "],
    ]
    for raw in samples:
        once = normalize_tags(raw)
        assert normalize_tags(once) == once


def test_normalize_rejects_bare_string_and_none():
    assert normalize_tags("music") == []
    assert normalize_tags(None) == []


def test_tags_or_default():
    assert tags_or_default([]) == ["misc"]
    assert tags_or_default(["  "]) == ["misc"]
    assert tags_or_default(["Dogs"]) == ["dogs"]


def test_aggregate_sorted_distinct_lowercase():
    snaps = [
        make_snap("1", ["music", "Live"]),
        make_snap("2", ["art", "MUSIC"]),
        make_snap("3", []),
    ]
    assert aggregate_tags(snaps) == ["art", "live", "music"]


def test_aggregate_includes_expired_snaps():
    expired = make_snap("old", ["vintage"], expires_at=T0 - timedelta(days=3))
    assert aggregate_tags([expired]) == ["vintage"]


def test_aggregate_is_permutation_invariant():
    snaps = [
        make_snap("1", ["music", "live"]),
        make_snap("2", ["art"]),
        make_snap("3", ["food", "Art"]),
        make_snap("4", ["zebra"]),
    ]
    expected = aggregate_tags(snaps)
    for perm in itertools.permutations(snaps):
        assert aggregate_tags(perm) == expected


def test_aggregate_skips_malformed_records():
    class Broken:
        tags = None

    snaps = [Broken(), make_snap("1", ["music"])]
    assert aggregate_tags(snaps) == ["music"]
    assert aggregate_tags([]) == []
