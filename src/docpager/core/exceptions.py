"""Shared error hierarchy.

Errors carry an optional ``user_message`` suitable for showing to a chat user,
plus ``recoverable``/``severity`` hints that transports and retry helpers use to
decide whether an operation may be attempted again.
"""

from __future__ import annotations

from typing import Optional


class DocpagerError(Exception):
    """Base error for the rendering engine and its collaborators."""

    recoverable: bool = False
    severity: str = "error"

    def __init__(self, message: str, *, user_message: Optional[str] = None) -> None:
        super().__init__(message)
        self.user_message = user_message


class TransientError(DocpagerError):
    """Failure that may succeed when retried (network, rate limits).

    ``retry_after`` is the delay in seconds the remote side asked for, if any.
    """

    recoverable = True
    severity = "warning"

    def __init__(
        self,
        message: str,
        *,
        user_message: Optional[str] = None,
        retry_after: Optional[float] = None,
    ) -> None:
        super().__init__(message, user_message=user_message)
        self.retry_after = retry_after


class PermanentError(DocpagerError):
    """Failure that will not go away by retrying (validation, auth, config)."""

    recoverable = False
    severity = "error"


class DocumentStructureError(PermanentError):
    """The document tree violates a structural precondition."""


class InternalConsistencyError(DocpagerError):
    """An implementation defect was detected; never retried or recovered."""

    severity = "critical"


class WalkerDesyncError(InternalConsistencyError):
    """Two lockstep walkers reported different nodes or phases."""


class WalkerExhaustedError(InternalConsistencyError):
    """``increment`` was called on a walker that already finished."""


class RendererCoverageError(InternalConsistencyError):
    """A renderer table does not cover every node tag."""
