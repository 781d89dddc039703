"""Exceptions raised by the outbound dispatch path.

DM-open failures are not here: they are returned as values (see
``slackrtm.types.DmOpenFailure``) because a deactivated or unknown user is an
ordinary runtime condition, not a caller bug.
"""

from __future__ import annotations


class SlackSendError(Exception):
    """Base class for dispatch errors."""


class TargetNotFound(SlackSendError):
    """Raised when a ``#channel`` is unknown or a target does not resolve."""

    def __init__(self, target: str, detail: str = "not found") -> None:
        self.target = target
        super().__init__(f"{_describe(target)} {detail}")


class SerializationFailure(SlackSendError):
    """Raised when an envelope cannot be encoded as JSON."""


def _describe(target: str) -> str:
    if target.startswith("#"):
        return f"channel {target}"
    if target.startswith("@"):
        return f"user {target}"
    return f"target {target}"
