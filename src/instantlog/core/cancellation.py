from __future__ import annotations

import threading


class CancellationToken:
    """Abandonment flag tied to the lifetime of a view.

    A request started under a token may still complete, but its result must
    be dropped once the token is cancelled.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()
