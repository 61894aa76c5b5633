"""Fire-and-forget delivery of notifications on a worker pool.

The booking has already committed when a notification is handed off, so
delivery runs off the caller's thread and failures are only logged.
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor

from greenhaul.application.ports import Notifier, OrderCreatedNotification

logger = logging.getLogger(__name__)


class BackgroundNotifier(Notifier):

    def __init__(self, inner: Notifier, executor: ThreadPoolExecutor | None = None, workers: int = 2) -> None:
        self._inner = inner
        self._executor = executor or ThreadPoolExecutor(
            max_workers=workers,
            thread_name_prefix="greenhaul-notify",
        )

    def order_created(self, notification: OrderCreatedNotification) -> None:
        future = self._executor.submit(self._inner.order_created, notification)
        future.add_done_callback(lambda f: self._log_failure(f, notification.folio))

    @staticmethod
    def _log_failure(future: Future, folio: str) -> None:
        if future.cancelled():
            return
        exc = future.exception()
        if exc is not None:
            logger.error(
                "Notification for order %s failed",
                folio,
                exc_info=(type(exc), exc, exc.__traceback__),
            )

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
