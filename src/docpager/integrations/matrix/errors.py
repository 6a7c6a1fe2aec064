from __future__ import annotations

from typing import Optional

from ...core.exceptions import DocpagerError, PermanentError, TransientError


class MatrixError(DocpagerError):
    """Base Matrix integration error."""


class MatrixAPIError(MatrixError):
    """Matrix client-server API request error."""

    def __init__(
        self,
        message: str,
        *,
        status_code: Optional[int] = None,
        errcode: Optional[str] = None,
        retry_after: Optional[float] = None,
        user_message: Optional[str] = None,
    ) -> None:
        if user_message is None:
            user_message = "Matrix homeserver rejected the message."
        super().__init__(message, user_message=user_message)
        self.status_code = status_code
        self.errcode = errcode
        self.retry_after = retry_after


class MatrixTransientError(MatrixAPIError, TransientError):
    """Retryable Matrix error (rate limits, server errors, network issues)."""

    recoverable = TransientError.recoverable
    severity = TransientError.severity


class MatrixPermanentError(MatrixAPIError, PermanentError):
    """Non-retryable Matrix error (auth failures, forbidden rooms, bad requests)."""

    recoverable = PermanentError.recoverable
    severity = PermanentError.severity
