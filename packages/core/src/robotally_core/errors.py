"""Error taxonomy for notification handling.

Every error carries the HTTP status the webhook boundary answers with, so
the engine can raise plain exceptions and only the transport layer decides
how to present them. None of these are fatal to the process: each one
terminates the handling of a single notification.
"""

from __future__ import annotations


class RobotallyError(Exception):
    status_code: int = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class MalformedEvent(RobotallyError):
    """The notification body could not be decoded into a GitHub event."""

    status_code = 400


class InvalidSignature(RobotallyError):
    """The notification was not signed with any of the allowed secrets."""

    status_code = 403


class UnsupportedAction(RobotallyError):
    """The event action is neither "opened" nor "created"."""

    status_code = 405


class UpstreamError(RobotallyError):
    """A list/create/edit call against the comment store failed."""

    status_code = 500

    def __init__(self, operation: str, cause: Exception):
        super().__init__(f"Failed to {operation}: {cause}")
        self.operation = operation
        self.cause = cause
