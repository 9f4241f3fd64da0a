"""Blocking and callback entry points over a single core routine."""

from __future__ import annotations

import logging
from collections.abc import Callable
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)

Callback = Callable[[Any], None]


@dataclass(frozen=True)
class Outcome:
    """Result of a core routine: an error, a value, or neither."""

    error: Exception | None = None
    value: Any = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Dispatcher:
    """Run core routines either inline or on a background worker.

    Called without a callback, the routine runs on the caller's thread; its
    error is raised and its value returned. Called with a callback, the
    routine is submitted to the executor and a ``Future`` is returned
    immediately. The callback is invoked exactly once, with the error when the
    routine failed, otherwise with the value (``deliver_value=True``) or
    ``None``.
    """

    def __init__(self, max_workers: int = 1) -> None:
        # One worker keeps callback-mode operations in submission order
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="eth-connect"
        )

    def run(
        self,
        routine: Callable[[], Outcome],
        callback: Callback | None = None,
        *,
        deliver_value: bool = False,
    ) -> Any:
        if callback is None:
            outcome = routine()
            if outcome.error is not None:
                raise outcome.error
            return outcome.value

        return self._executor.submit(self._complete, routine, callback, deliver_value)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)

    @staticmethod
    def _complete(
        routine: Callable[[], Outcome], callback: Callback, deliver_value: bool
    ) -> Any:
        try:
            outcome = routine()
        except Exception as exc:
            logger.exception("Background routine failed")
            outcome = Outcome(error=exc)

        if outcome.error is not None:
            callback(outcome.error)
            raise outcome.error

        callback(outcome.value if deliver_value else None)
        return outcome.value

