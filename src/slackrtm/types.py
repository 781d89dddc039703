"""Data models for slackrtm."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

from slackrtm.config import get_settings

if TYPE_CHECKING:
    import aiohttp

# Slack user IDs are a "U" followed by uppercase alphanumerics (e.g. U024BE7LH).
USER_ID_RE = re.compile(r"^U[A-Z0-9]+$")


class MessageKind(StrEnum):
    MESSAGE = "message"
    TYPING = "typing"
    PING = "ping"
    PRESENCE_SUB = "presence_sub"


# ---------------------------------------------------------------------------
# Targets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class ChannelName:
    name: str  # without the leading "#"

    def __str__(self) -> str:
        return f"#{self.name}"


@dataclass(frozen=True)
class UserMention:
    name: str  # without the leading "@"

    def __str__(self) -> str:
        return f"@{self.name}"


@dataclass(frozen=True)
class UserId:
    id: str

    def __str__(self) -> str:
        return self.id


@dataclass(frozen=True)
class ResolvedId:
    """A channel, group or DM ID the RTM socket accepts as-is."""

    id: str

    def __str__(self) -> str:
        return self.id


Target = ChannelName | UserMention | UserId | ResolvedId


def parse_target(raw: str) -> Target:
    """Classify a textual target (``#name``, ``@name``, ``U…`` or a raw ID)."""
    if raw.startswith("#"):
        return ChannelName(raw[1:])
    if raw.startswith("@"):
        return UserMention(raw[1:])
    if USER_ID_RE.match(raw):
        return UserId(raw)
    return ResolvedId(raw)


# ---------------------------------------------------------------------------
# DM-open results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class DmOpened:
    channel_id: str


@dataclass(frozen=True)
class DmOpenApplicationError:
    """im.open answered, but with ``ok: false`` (e.g. ``user_not_found``)."""

    error: str
    body: dict[str, Any] = field(default_factory=dict)


@dataclass(frozen=True)
class DmOpenTransportError:
    """im.open could not be completed (network error, timeout, non-2xx, bad body)."""

    reason: str


DmOpenFailure = DmOpenApplicationError | DmOpenTransportError
DmOpenResult = DmOpened | DmOpenFailure


# ---------------------------------------------------------------------------
# Collaborators
# ---------------------------------------------------------------------------


@runtime_checkable
class Lookups(Protocol):
    """Name → ID tables for a connected workspace.

    Every method is a read against an already-warm cache; ``None`` means the
    name is unknown.
    """

    def lookup_channel_id(self, channel: str) -> str | None: ...

    def lookup_user_id(self, user: str) -> str | None: ...

    def lookup_direct_message_id(self, user: str) -> str | None: ...

    def lookup_user_name(self, user_id: str) -> str | None:
        """Return the ``@name`` mention for a raw user ID."""
        ...


class SendClient(Protocol):
    """Send primitive of the open RTM socket.

    ``frame`` is a ``(kind, payload)`` pair such as ``("text", '{"type": ...}')``.
    """

    async def send(self, frame: tuple[str, str], socket: Any) -> None: ...


@dataclass(frozen=True)
class SlackConnection:
    """Borrowed handle to an open RTM connection.

    The dispatcher reads these fields and never mutates or closes any of them.
    """

    token: str
    socket: Any
    client: SendClient
    lookups: Lookups
    api_base_url: str = field(default_factory=lambda: get_settings().slack.api_base_url)
    http_session: aiohttp.ClientSession | None = None  # caller-owned; None → one per im.open

    @classmethod
    def from_settings(
        cls,
        socket: Any,
        client: SendClient,
        lookups: Lookups,
        *,
        http_session: aiohttp.ClientSession | None = None,
    ) -> SlackConnection:
        s = get_settings()
        if s.slack.token is None:
            raise ValueError("slack.token is not configured")
        return cls(
            token=s.slack.token.get_secret_value(),
            socket=socket,
            client=client,
            lookups=lookups,
            api_base_url=s.slack.api_base_url,
            http_session=http_session,
        )
