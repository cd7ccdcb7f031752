from __future__ import annotations

from dataclasses import dataclass
import threading

LOAD = "load"


@dataclass(frozen=True)
class Ticket:
    operation: str
    epoch: int
    seq: int


class ViewLifecycle:
    """Tracks whether a view may still apply the result of a background call.

    Every call takes a ticket from ``begin(operation)``. A result is applied
    only if the view is still mounted, has not been hidden since, and no newer
    call of the same operation started. Operations are independent: a page
    reload does not drop the outcome of a save. Late results are dropped
    rather than cancelled.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._epoch = 0
        self._latest: dict[str, int] = {}
        self._mounted = False

    @property
    def mounted(self) -> bool:
        return self._mounted

    def mount(self) -> None:
        with self._lock:
            self._mounted = True

    def unmount(self) -> None:
        with self._lock:
            self._mounted = False
            self._epoch += 1

    def begin(self, operation: str = LOAD) -> Ticket:
        with self._lock:
            seq = self._latest.get(operation, 0) + 1
            self._latest[operation] = seq
            return Ticket(operation, self._epoch, seq)

    def accepts(self, ticket: Ticket) -> bool:
        with self._lock:
            return (
                self._mounted
                and ticket.epoch == self._epoch
                and ticket.seq == self._latest.get(ticket.operation)
            )
