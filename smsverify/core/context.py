"""
smsverify/core/context.py

Purpose: Cancellation and deadlines for a blocking send

- Cancellation via a threading.Event that another thread may set
- Optional absolute deadline on an injectable monotonic clock
- Checked by the retry loop before each attempt and before each sleep
"""

import threading
import time
from typing import Callable, Optional

from smsverify.core.exceptions import SendCancelledError

Clock = Callable[[], float]


class SendContext:
    """
    Cancellation/deadline handle passed to a send.

    Usage:
        ctx = SendContext.with_timeout(30)
        service.send_verification_code("+15551234567", ctx)
    """

    def __init__(
        self,
        cancel_event: Optional[threading.Event] = None,
        deadline: Optional[float] = None,
        clock: Clock = time.monotonic,
    ):
        self.cancel_event = cancel_event if cancel_event is not None else threading.Event()
        self.deadline = deadline
        self.clock = clock

    @classmethod
    def with_timeout(
        cls,
        seconds: float,
        clock: Clock = time.monotonic,
        cancel_event: Optional[threading.Event] = None,
    ) -> "SendContext":
        return cls(cancel_event=cancel_event, deadline=clock() + seconds, clock=clock)

    def cancel(self) -> None:
        self.cancel_event.set()

    @property
    def cancelled(self) -> bool:
        return self.cancel_event.is_set()

    @property
    def expired(self) -> bool:
        return self.deadline is not None and self.clock() >= self.deadline

    def raise_if_done(
        self,
        destination: str,
        attempts: int,
        last_error: Optional[BaseException] = None,
    ) -> None:
        """
        Raises SendCancelledError if the context was cancelled or has expired.
        """
        if self.cancelled:
            raise SendCancelledError(destination, attempts, last_error, reason="cancelled")
        if self.expired:
            raise SendCancelledError(destination, attempts, last_error, reason="deadline exceeded")
