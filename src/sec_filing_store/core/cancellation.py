"""
Caller-supplied timeouts and cancellation for read-only operations.

Search and metrics calls accept ``timeout`` (seconds) and/or a
``threading.Event``. They build a ``Deadline`` and call ``check()``
between store reads and inside long loops, so a cancelled call returns
promptly. These operations never write, so stopping early leaves the
store untouched.
"""

import threading
import time
from dataclasses import dataclass
from typing import Optional

from sec_filing_store.core.exceptions import InvalidParameterError, OperationCancelledError


@dataclass(frozen=True)
class Deadline:
    """An optional monotonic expiry time plus an optional cancel event."""

    expires_at: Optional[float] = None
    cancel_event: Optional[threading.Event] = None

    @classmethod
    def start(
        cls,
        timeout: Optional[float] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> "Deadline":
        if timeout is not None and timeout <= 0:
            raise InvalidParameterError(
                f"timeout must be > 0 seconds (got {timeout})", parameter="timeout"
            )
        expires_at = time.monotonic() + timeout if timeout is not None else None
        return cls(expires_at=expires_at, cancel_event=cancel_event)

    @property
    def remaining(self) -> Optional[float]:
        if self.expires_at is None:
            return None
        return max(0.0, self.expires_at - time.monotonic())

    def check(self, operation: str) -> None:
        """
        Raise if the caller cancelled or the timeout elapsed.

        Raises:
            OperationCancelledError: On cancellation or expiry.
        """
        if self.cancel_event is not None and self.cancel_event.is_set():
            raise OperationCancelledError(operation, details="cancelled by caller")
        if self.expires_at is not None and time.monotonic() >= self.expires_at:
            raise OperationCancelledError(operation, details="timed out")
