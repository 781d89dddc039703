"""Shared test fixtures for slackrtm."""

from __future__ import annotations

import json
from unittest.mock import AsyncMock, MagicMock

import pytest
from aiohttp import web
from aiohttp.test_utils import TestServer

from slackrtm.types import SlackConnection

# ---------------------------------------------------------------------------
# Shared helpers (plain functions, not fixtures — importable by test files)
# ---------------------------------------------------------------------------


def make_settings(**overrides):
    """Create a Settings object from pure defaults (no config.toml, no .env).

    Usage::

        s = make_settings(slack=SlackConfig(api_base_url="http://localhost:1"))
    """
    from slackrtm.config import LoggingConfig, Settings, SlackConfig

    defaults = {"slack": SlackConfig(), "logging": LoggingConfig()}
    defaults.update(overrides)
    return Settings.model_construct(**defaults)


def make_lookups(
    *,
    channels: dict[str, str] | None = None,
    users: dict[str, str] | None = None,
    ims: dict[str, str] | None = None,
) -> MagicMock:
    """Lookup collaborator backed by dicts, with call tracking.

    ``channels``: "#name" → channel ID. ``users``: "@name" → user ID.
    ``ims``: "@name" → DM channel ID.
    """
    channels = channels or {}
    users = users or {}
    ims = ims or {}
    names = {user_id: mention for mention, user_id in users.items()}

    lookups = MagicMock(
        spec=[
            "lookup_channel_id",
            "lookup_user_id",
            "lookup_direct_message_id",
            "lookup_user_name",
        ]
    )
    lookups.lookup_channel_id.side_effect = channels.get
    lookups.lookup_user_id.side_effect = users.get
    lookups.lookup_direct_message_id.side_effect = ims.get
    lookups.lookup_user_name.side_effect = names.get
    return lookups


def make_connection(lookups=None, *, api_base_url: str = "http://slack.invalid") -> SlackConnection:
    client = MagicMock()
    client.send = AsyncMock(return_value=None)
    return SlackConnection(
        token="xoxb-test",
        socket=object(),
        client=client,
        lookups=lookups if lookups is not None else make_lookups(),
        api_base_url=api_base_url,
    )


def sent_envelopes(connection: SlackConnection) -> list[dict]:
    """Decode every frame handed to the connection's send primitive."""
    frames = []
    for call in connection.client.send.await_args_list:
        (kind, payload), socket = call.args
        assert kind == "text"
        assert socket is connection.socket
        frames.append(json.loads(payload))
    return frames


# ---------------------------------------------------------------------------
# Autouse fixtures
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def reset_settings(monkeypatch):
    """Ensure each test starts with a clean Settings singleton built from defaults."""
    monkeypatch.setattr("slackrtm.config._settings", make_settings())


# ---------------------------------------------------------------------------
# Reusable fixtures
# ---------------------------------------------------------------------------


class ImOpenStub:
    """Fake Slack Web API serving ``POST /api/im.open``."""

    def __init__(self) -> None:
        self.requests: list[dict[str, str]] = []
        self.status = 200
        self.body: object = {"ok": True, "channel": {"id": "D000"}}

    async def handle(self, request: web.Request) -> web.Response:
        form = await request.post()
        self.requests.append(dict(form))
        if isinstance(self.body, str):
            return web.Response(status=self.status, text=self.body)
        return web.json_response(self.body, status=self.status)


@pytest.fixture
async def im_open():
    """Start a local im.open endpoint; yields (stub, base_url)."""
    stub = ImOpenStub()
    app = web.Application()
    app.router.add_post("/api/im.open", stub.handle)
    server = TestServer(app)
    await server.start_server()
    yield stub, f"http://{server.host}:{server.port}"
    await server.close()
