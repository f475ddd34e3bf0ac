from __future__ import annotations

from time import monotonic
from typing import Optional

from vocab_api.words.errors import RequestCancelled


class CancelToken:
    """
    Per-request cancellation flag with an optional deadline.

    Multi-step operations call `raise_if_cancelled` right before each
    network call so an aborted request stops at the next step.
    """

    __slots__ = ("_cancelled", "_deadline")

    def __init__(self, timeout: Optional[float] = None) -> None:
        self._cancelled = False
        self._deadline = monotonic() + timeout if timeout is not None else None

    def __repr__(self) -> str:
        return f"<CancelToken cancelled={self.cancelled}>"

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        if self._cancelled:
            return True

        return self._deadline is not None and monotonic() >= self._deadline

    def raise_if_cancelled(self) -> None:
        if self.cancelled:
            raise RequestCancelled("request was cancelled before the next step")
