"""Wire side of dispatch: JSON encoding, socket send, and the im.open call."""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

import aiohttp

from slackrtm.errors import SerializationFailure
from slackrtm.logger import logger
from slackrtm.types import (
    DmOpenApplicationError,
    DmOpened,
    DmOpenResult,
    DmOpenTransportError,
    SlackConnection,
)

IM_OPEN_PATH = "/api/im.open"
TEXT_FRAME = "text"


def encode_envelope(envelope: Mapping[str, Any]) -> str:
    """Encode an envelope as JSON text, raising SerializationFailure if it can't be."""
    try:
        return json.dumps(envelope, allow_nan=False)
    except (TypeError, ValueError) as exc:
        kind = envelope.get("type")
        raise SerializationFailure(f"Cannot encode {kind!r} envelope: {exc}") from exc


async def send_raw(payload: str, connection: SlackConnection) -> None:
    """Hand pre-encoded JSON text to the connection's send primitive."""
    await connection.client.send((TEXT_FRAME, payload), connection.socket)


async def transmit(envelope: Mapping[str, Any], connection: SlackConnection) -> None:
    """Encode ``envelope`` and send it once. Send errors propagate unchanged."""
    payload = encode_envelope(envelope)
    logger.debug("Sending RTM event", type=envelope.get("type"), channel=envelope.get("channel"))
    await send_raw(payload, connection)


async def open_direct_message_channel(
    token: str,
    user_id: str,
    *,
    base_url: str,
    session: aiohttp.ClientSession | None = None,
) -> DmOpenResult:
    """POST ``im.open`` for ``user_id`` and return the outcome as a value.

    Single attempt. When no ``session`` is given a temporary one is created
    and closed before returning.
    """
    if session is None:
        async with aiohttp.ClientSession() as owned:
            return await _post_im_open(owned, token, user_id, base_url)
    return await _post_im_open(session, token, user_id, base_url)


async def _post_im_open(
    session: aiohttp.ClientSession, token: str, user_id: str, base_url: str
) -> DmOpenResult:
    url = f"{base_url.rstrip('/')}{IM_OPEN_PATH}"
    try:
        async with session.post(url, data={"token": token, "user": user_id}) as resp:
            if resp.status // 100 != 2:
                return DmOpenTransportError(reason=f"HTTP {resp.status}")
            body = await resp.json(content_type=None)
    except (aiohttp.ClientError, TimeoutError) as exc:
        return DmOpenTransportError(reason=str(exc) or type(exc).__name__)
    except ValueError as exc:
        return DmOpenTransportError(reason=f"invalid JSON body: {exc}")

    if not isinstance(body, dict):
        return DmOpenTransportError(reason="unexpected response body")
    channel = body.get("channel")
    if body.get("ok") is True and isinstance(channel, dict) and "id" in channel:
        return DmOpened(channel_id=channel["id"])
    return DmOpenApplicationError(error=str(body.get("error", "unknown_error")), body=body)
