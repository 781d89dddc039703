"""Envelope construction for outbound RTM events.

Pure functions: no lookups, no I/O. Field values are not validated; the
remote end decides what it accepts.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from slackrtm.types import MessageKind

Envelope = dict[str, Any]


def build_message(channel: str, text: str, message_id: Any = None) -> Envelope:
    envelope: Envelope = {"type": MessageKind.MESSAGE.value, "text": text, "channel": channel}
    # The id comes back on the reply event, letting the caller match the ack
    if message_id is not None:
        envelope["id"] = message_id
    return envelope


def build_typing(channel: str) -> Envelope:
    return {"type": MessageKind.TYPING.value, "channel": channel}


def build_ping(data: Mapping[str, Any] | None = None) -> Envelope:
    """Shallow-merge ``data`` over ``{"type": "ping"}``.

    Caller keys win on conflict, ``type`` included. This is a passthrough:
    whatever the caller puts in ``data`` goes on the wire unchanged.
    """
    return {"type": MessageKind.PING.value, **(data or {})}


def build_presence_sub(ids: Iterable[str]) -> Envelope:
    return {"type": MessageKind.PRESENCE_SUB.value, "ids": list(ids)}


def build_envelope(
    kind: MessageKind | str,
    *,
    channel: str | None = None,
    text: str | None = None,
    message_id: Any = None,
    data: Mapping[str, Any] | None = None,
    ids: Iterable[str] = (),
) -> Envelope:
    """Build the envelope for ``kind`` from the fields that kind uses."""
    kind = MessageKind(kind)
    if kind is MessageKind.MESSAGE:
        if channel is None or text is None:
            raise ValueError("message envelopes need both channel and text")
        return build_message(channel, text, message_id)
    if kind is MessageKind.TYPING:
        if channel is None:
            raise ValueError("typing envelopes need a channel")
        return build_typing(channel)
    if kind is MessageKind.PING:
        return build_ping(data)
    return build_presence_sub(ids)
