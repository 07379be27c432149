"""Fetch dispatch: one worker thread per package, one bounded result queue.

Workers only run the fetch and post the outcome. All exploration state is
mutated by the thread that calls ``receive``.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple

from constants import Constants
from common.errors import ChannelError
from common.logging_utils import extra_context, is_debug_enabled
from registry.index.models import PackageVersionRecord

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], Sequence[PackageVersionRecord]]


@dataclass(frozen=True)
class FetchOutcome:
    """Message posted by a worker: records on success, the exception otherwise."""
    name: str
    records: Optional[Tuple[PackageVersionRecord, ...]] = None
    error: Optional[BaseException] = None


class FetchDispatcher:
    """Spawns fetch workers and hands their results back to the coordinator."""

    def __init__(self, fetch: Fetcher, capacity: Optional[int] = None):
        """Initialize the dispatcher.

        Args:
            fetch: Callable returning the version records of a package name.
            capacity: Number of finished results buffered before workers block.
        """
        self._fetch = fetch
        self._results: "queue.Queue[FetchOutcome]" = queue.Queue(
            maxsize=capacity or Constants.RESULT_CHANNEL_SIZE
        )
        self.dispatched = 0

    def dispatch(self, name: str) -> None:
        """Start a worker fetching ``name``. Never blocks on the result queue."""
        worker = threading.Thread(
            target=self._work, args=(name,), name=f"fetch-{name}", daemon=True
        )
        self.dispatched += 1
        worker.start()
        if is_debug_enabled(logger):
            logger.debug(
                "Fetch dispatched",
                extra=extra_context(
                    event="dispatch",
                    component="dispatcher",
                    action="dispatch",
                    package=name,
                    count=self.dispatched
                )
            )

    def _work(self, name: str) -> None:
        try:
            outcome = FetchOutcome(name, records=tuple(self._fetch(name)))
        except Exception as exc:  # pylint: disable=broad-exception-caught
            outcome = FetchOutcome(name, error=exc)
        except BaseException as exc:  # pylint: disable=broad-exception-caught
            outcome = FetchOutcome(
                name,
                error=ChannelError(f"fetch worker for {name} exited without a result: {exc!r}", package=name),
            )
        self._results.put(outcome)

    def receive(self) -> Tuple[str, Tuple[PackageVersionRecord, ...]]:
        """Block until a worker finishes.

        Returns:
            tuple: ``(name, records)`` of the finished fetch.

        Raises:
            ExplorationError: Whatever the worker's fetch raised.
        """
        outcome = self._results.get()
        if outcome.error is not None:
            raise outcome.error
        return outcome.name, outcome.records or ()
