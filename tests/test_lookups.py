"""Tests for the in-memory lookup tables built from rtm.start."""

from __future__ import annotations

import pytest

from slackrtm.lookups import StateLookups
from slackrtm.types import Lookups

RTM_START = {
    "ok": True,
    "channels": [{"id": "C123", "name": "general"}, {"id": "C456", "name": "random"}],
    "groups": [{"id": "G789", "name": "secret-plans"}],
    "users": [{"id": "U1", "name": "alice"}, {"id": "U2", "name": "bob"}],
    "ims": [
        {"id": "D100", "user": "U1"},
        {"id": "D200", "user": "U2", "is_user_deleted": True},
    ],
}


@pytest.fixture
def lookups() -> StateLookups:
    return StateLookups.from_rtm_start(RTM_START)


class TestStateLookups:
    def test_satisfies_protocol(self, lookups):
        assert isinstance(lookups, Lookups)

    def test_channel_by_name(self, lookups):
        assert lookups.lookup_channel_id("#general") == "C123"
        assert lookups.lookup_channel_id("random") == "C456"

    def test_private_group_by_name(self, lookups):
        assert lookups.lookup_channel_id("#secret-plans") == "G789"

    def test_unknown_channel(self, lookups):
        assert lookups.lookup_channel_id("#ghost") is None

    def test_user_id_by_mention(self, lookups):
        assert lookups.lookup_user_id("@bob") == "U2"
        assert lookups.lookup_user_id("@nobody") is None

    def test_user_name_is_mention_form(self, lookups):
        assert lookups.lookup_user_name("U1") == "@alice"
        assert lookups.lookup_user_name("U404") is None

    def test_direct_message_by_mention(self, lookups):
        assert lookups.lookup_direct_message_id("@alice") == "D100"

    def test_deleted_user_im_is_skipped(self, lookups):
        assert lookups.lookup_direct_message_id("@bob") is None

    def test_add_im(self, lookups):
        lookups.add_im("U2", "D999")
        assert lookups.lookup_direct_message_id("@bob") == "D999"

    def test_empty_payload(self):
        empty = StateLookups.from_rtm_start({"ok": True})
        assert empty.lookup_channel_id("#general") is None
        assert empty.lookup_direct_message_id("@alice") is None
