"""In-memory lookup tables built from the RTM start payload.

``rtm.start`` returns the workspace state (channels, private groups, users and
open IMs). ``StateLookups`` indexes it once so every lookup made while sending
is a dict read.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any


def _strip(name: str, prefix: str) -> str:
    return name[1:] if name.startswith(prefix) else name


class StateLookups:
    """``Lookups`` implementation backed by plain dicts."""

    def __init__(
        self,
        channels: Iterable[Mapping[str, Any]] = (),
        users: Iterable[Mapping[str, Any]] = (),
        ims: Iterable[Mapping[str, Any]] = (),
    ) -> None:
        self._channel_ids: dict[str, str] = {}
        self._user_ids: dict[str, str] = {}
        self._user_names: dict[str, str] = {}
        self._im_ids: dict[str, str] = {}  # user ID → DM channel ID

        for ch in channels:
            self._channel_ids[ch["name"]] = ch["id"]
        for user in users:
            self._user_ids[user["name"]] = user["id"]
            self._user_names[user["id"]] = user["name"]
        for im in ims:
            if im.get("is_user_deleted"):
                continue
            self._im_ids[im["user"]] = im["id"]

    @classmethod
    def from_rtm_start(cls, payload: Mapping[str, Any]) -> StateLookups:
        """Build from an ``rtm.start`` response body.

        Private ``groups`` are addressable by ``#name`` just like channels.
        """
        channels = [*payload.get("channels", []), *payload.get("groups", [])]
        return cls(
            channels=channels,
            users=payload.get("users", []),
            ims=payload.get("ims", []),
        )

    # ------------------------------------------------------------------
    # Lookups protocol
    # ------------------------------------------------------------------

    def lookup_channel_id(self, channel: str) -> str | None:
        return self._channel_ids.get(_strip(channel, "#"))

    def lookup_user_id(self, user: str) -> str | None:
        return self._user_ids.get(_strip(user, "@"))

    def lookup_direct_message_id(self, user: str) -> str | None:
        user_id = self.lookup_user_id(user)
        if user_id is None:
            return None
        return self._im_ids.get(user_id)

    def lookup_user_name(self, user_id: str) -> str | None:
        name = self._user_names.get(user_id)
        return f"@{name}" if name is not None else None

    # ------------------------------------------------------------------
    # Updates
    # ------------------------------------------------------------------

    def add_im(self, user_id: str, channel_id: str) -> None:
        """Record a DM channel opened after the payload was indexed."""
        self._im_ids[user_id] = channel_id
