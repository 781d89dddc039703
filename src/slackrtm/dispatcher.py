"""MessageDispatcher — resolve human-friendly targets and send RTM events.

Targets may be ``#channel``, ``@user``, a raw user ID (``U…``) or any ID the
RTM socket understands. Resolution walks these forms down to a channel ID:

    U123  ->  @alice  ->  D456          (existing DM)
    @bob  ->  im.open ->  D789          (no DM yet; opened on demand)
    #general           ->  C123

The only network call made outside the socket send is ``im.open``.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from slackrtm import transport
from slackrtm.errors import TargetNotFound
from slackrtm.logger import logger
from slackrtm.payloads import build_message, build_ping, build_presence_sub, build_typing
from slackrtm.types import (
    ChannelName,
    DmOpenApplicationError,
    DmOpened,
    DmOpenFailure,
    ResolvedId,
    SlackConnection,
    Target,
    UserId,
    UserMention,
    parse_target,
)

# Longest valid chain: UserId -> UserMention -> (im.open) -> ResolvedId
MAX_RESOLVE_STEPS = 3


class MessageDispatcher:
    """Stateless sender bound to a borrowed ``SlackConnection``."""

    def __init__(self, connection: SlackConnection) -> None:
        self._conn = connection

    # ------------------------------------------------------------------
    # Public operations
    # ------------------------------------------------------------------

    async def send_message(
        self, text: str, channel: str | Target, message_id: Any = None
    ) -> DmOpenFailure | None:
        """Send ``text`` to ``channel``.

        Returns ``None`` once sent, or the im.open failure when a DM had to be
        opened and couldn't be (an unknown ``@user`` gives
        ``user_not_found``). Unknown ``#channel`` names raise TargetNotFound.
        Nothing is sent unless resolution succeeds.
        """
        resolved = await self.resolve(channel)
        if not isinstance(resolved, str):
            return resolved
        await transport.transmit(build_message(resolved, text, message_id), self._conn)
        return None

    async def indicate_typing(self, channel: str) -> None:
        """Tell Slack the connected user is typing in ``channel`` (sent as-is)."""
        await transport.transmit(build_typing(channel), self._conn)

    async def send_ping(self, data: Mapping[str, Any] | None = None) -> None:
        await transport.transmit(build_ping(data), self._conn)

    async def subscribe_presence(self, ids: Iterable[str]) -> None:
        """Subscribe to presence_change events for the given user IDs."""
        await transport.transmit(build_presence_sub(ids), self._conn)

    async def send_raw(self, payload: str) -> None:
        await transport.send_raw(payload, self._conn)

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------

    async def resolve(self, channel: str | Target) -> str | DmOpenFailure:
        """Rewrite ``channel`` until it is an ID, opening a DM if needed.

        At most ``MAX_RESOLVE_STEPS`` rewrites are made; a target still
        unresolved after that raises TargetNotFound without further lookups.
        """
        target = parse_target(channel) if isinstance(channel, str) else channel
        original = str(target)

        for _ in range(MAX_RESOLVE_STEPS):
            if isinstance(target, ResolvedId):
                return target.id
            step = await self._rewrite(target)
            if not isinstance(step, (ChannelName, UserMention, UserId, ResolvedId)):
                return step
            logger.debug("Target rewritten", source=str(target), result=str(step))
            target = step

        if isinstance(target, ResolvedId):
            return target.id
        raise TargetNotFound(original, detail=f"did not resolve within {MAX_RESOLVE_STEPS} steps")

    async def _rewrite(self, target: Target) -> Target | DmOpenFailure:
        lookups = self._conn.lookups
        match target:
            case ChannelName():
                channel_id = lookups.lookup_channel_id(str(target))
                if channel_id is None:
                    logger.warning("Unknown Slack channel", channel=str(target))
                    raise TargetNotFound(str(target))
                return parse_target(channel_id)
            case UserId(id=user_id):
                # DM lookups are keyed by mention, so go through the user's name
                mention = lookups.lookup_user_name(user_id)
                if mention is None:
                    # Not in the tables, but the raw ID is all im.open needs
                    return await self._open_dm(user_id, label=user_id)
                return parse_target(mention if mention.startswith("@") else f"@{mention}")
            case UserMention():
                dm_id = lookups.lookup_direct_message_id(str(target))
                if dm_id is not None:
                    return parse_target(dm_id)
                user_id = lookups.lookup_user_id(str(target))
                if user_id is None:
                    logger.warning("Unknown Slack user", user=str(target))
                    return DmOpenApplicationError(error="user_not_found")
                return await self._open_dm(user_id, label=str(target))
            case _:
                return target

    async def _open_dm(self, user_id: str, *, label: str) -> ResolvedId | DmOpenFailure:
        result = await transport.open_direct_message_channel(
            self._conn.token,
            user_id,
            base_url=self._conn.api_base_url,
            session=self._conn.http_session,
        )
        if not isinstance(result, DmOpened):
            logger.warning("Failed to open Slack DM", user=label, result=result)
            return result

        logger.info("Opened Slack DM", user=label, user_id=user_id, channel_id=result.channel_id)
        return ResolvedId(result.channel_id)
