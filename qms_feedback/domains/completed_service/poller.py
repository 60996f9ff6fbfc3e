"""Recurring single-flight fetch of completed services."""

import asyncio
import logging
from typing import Callable

from qms_feedback.core.exceptions import FeedbackClientError
from qms_feedback.domains.completed_service.client import CompletedServiceClient
from qms_feedback.domains.completed_service.models import CompletedService

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 10.0

ResultCallback = Callable[[list[CompletedService]], None]
ErrorCallback = Callable[[FeedbackClientError], None]
StartCallback = Callable[[], None]


class CompletedServicePoller:
    """
    Keeps a department's completed-service list current.

    At most one fetch is outstanding at any time. A trigger that arrives while
    a fetch is in flight (timer tick, manual refresh, post-submit refresh) is
    dropped, never queued.

    Lifecycle: ``start()`` once, then ``stop()``. ``stop()`` is idempotent and
    no callback fires after it.
    """

    def __init__(
        self,
        client: CompletedServiceClient,
        department_id: int,
        interval: float = DEFAULT_POLL_INTERVAL,
        on_result: ResultCallback | None = None,
        on_error: ErrorCallback | None = None,
        on_fetch_start: StartCallback | None = None,
    ):
        if interval <= 0:
            raise ValueError("Poll interval must be positive")

        self._client = client
        self._department_id = department_id
        self._interval = interval
        self._on_result = on_result
        self._on_error = on_error
        self._on_fetch_start = on_fetch_start

        self._started = False
        self._stopped = False
        self._timer: asyncio.Task | None = None
        self._fetch: asyncio.Task | None = None

    @property
    def department_id(self) -> int:
        return self._department_id

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def in_flight(self) -> bool:
        return self._fetch is not None

    @property
    def active(self) -> bool:
        return self._started and not self._stopped

    def start(self) -> None:
        """Fetch immediately and begin the periodic timer."""
        if self._started or self._stopped:
            raise RuntimeError("Poller can only be started once")

        self._started = True
        logger.info(
            f"Polling department {self._department_id} every {self._interval}s"
        )
        self.trigger()
        self._timer = asyncio.create_task(self._run_timer())

    def stop(self) -> None:
        """Cancel the timer and any outstanding fetch."""
        if self._stopped:
            return

        self._stopped = True
        if self._timer is not None:
            self._timer.cancel()
        if self._fetch is not None:
            self._fetch.cancel()
        logger.info(f"Stopped polling department {self._department_id}")

    async def wait_closed(self) -> None:
        """Wait for cancelled tasks to unwind after ``stop()``."""
        tasks = [t for t in (self._timer, self._fetch) if t is not None]
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def trigger(self) -> asyncio.Task | None:
        """
        Start one fetch unless one is already outstanding.

        Returns:
            The fetch task, or None if the trigger was skipped
        """
        if not self.active:
            logger.debug(f"Department {self._department_id}: poller inactive, skipping")
            return None

        if self._fetch is not None:
            logger.debug(f"Department {self._department_id}: fetch in flight, skipping")
            return None

        if self._on_fetch_start:
            self._on_fetch_start()
        self._fetch = asyncio.create_task(self._fetch_once())
        return self._fetch

    async def _run_timer(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            self.trigger()

    async def _fetch_once(self) -> None:
        services: list[CompletedService] = []
        error: FeedbackClientError | None = None
        try:
            services = await self._client.fetch_completed_services(self._department_id)
        except FeedbackClientError as e:
            error = e
        finally:
            self._fetch = None

        if not self.active:
            return

        if error is not None:
            if self._on_error:
                self._on_error(error)
        elif self._on_result:
            self._on_result(services)
