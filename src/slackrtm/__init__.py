"""slackrtm — outbound messaging over a Slack RTM connection."""

from slackrtm.dispatcher import MessageDispatcher
from slackrtm.errors import SerializationFailure, SlackSendError, TargetNotFound
from slackrtm.logger import setup_logging
from slackrtm.lookups import StateLookups
from slackrtm.types import (
    DmOpenApplicationError,
    DmOpened,
    DmOpenTransportError,
    MessageKind,
    SlackConnection,
    parse_target,
)

__all__ = [
    "DmOpenApplicationError",
    "DmOpenTransportError",
    "DmOpened",
    "MessageDispatcher",
    "MessageKind",
    "SerializationFailure",
    "SlackConnection",
    "SlackSendError",
    "StateLookups",
    "TargetNotFound",
    "parse_target",
    "setup_logging",
]
