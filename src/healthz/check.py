"""Single check evaluator — one thread and one stop event per registered check.

Two modes:
  periodic: runs ``fn`` immediately, then every ``period`` seconds
  static:   holds a value set by the caller, optionally expiring it
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable

from .config import settings
from .errors import Expired, Pending

logger = logging.getLogger(__name__)

# A check function returns None when healthy, or returns / raises an exception.
CheckFunc = Callable[[], "BaseException | None"]


class Check:
    """A named check whose current result can be read from any thread."""

    def __init__(
        self,
        name: str,
        *,
        fn: CheckFunc | None = None,
        period: float = 0.0,
        err: BaseException | None = None,
        expiry: float = 0.0,
    ) -> None:
        self.name = name
        self.fn = fn
        self.period = period
        self.expiry = expiry
        self._lock = threading.Lock()
        self._err = err
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @classmethod
    def periodic(cls, name: str, period: float, fn: CheckFunc) -> Check:
        if period <= 0:
            period = settings.check_period
        return cls(name, fn=fn, period=period, err=Pending())

    @classmethod
    def static(cls, name: str, err: BaseException | None, expiry: float = 0.0) -> Check:
        return cls(name, err=err, expiry=expiry)

    @property
    def is_static(self) -> bool:
        return self.fn is None

    def start(self) -> None:
        """Start the evaluation loop. Static checks without expiry need none."""
        if self.is_static:
            if self.expiry <= 0:
                return
            target = self._run_static
        else:
            target = self._run_periodic
        self._thread = threading.Thread(
            target=target, name=f"healthz-{self.name}", daemon=True,
        )
        self._thread.start()

    def stop(self) -> None:
        """Request the loop to exit. Safe to call any number of times."""
        self._stop.set()

    @property
    def stopped(self) -> bool:
        return self._stop.is_set()

    def join(self, timeout: float | None = None) -> None:
        if self._thread is not None:
            self._thread.join(timeout)

    def status(self) -> BaseException | None:
        """Latest result, None when healthy."""
        with self._lock:
            return self._err

    # ── Loops ────────────────────────────────────────────────────────────

    def _run_static(self) -> None:
        if self._stop.wait(self.expiry):
            return
        with self._lock:
            self._err = Expired(self.expiry)
        logger.warning("Check %s expired after %ss", self.name, self.expiry)

    def _run_periodic(self) -> None:
        self._run_once()
        while not self._stop.wait(self.period):
            self._run_once()

    def _run_once(self) -> None:
        try:
            err = self.fn()
        except Exception as e:
            err = e

        if self._stop.is_set():
            return  # replaced or deregistered while evaluating

        with self._lock:
            prev = self._err
            self._err = err

        if isinstance(prev, Pending):
            if err is not None:
                logger.warning("Check %s failing: %s", self.name, err)
        elif prev is None and err is not None:
            logger.warning("Check %s failing: %s", self.name, err)
        elif prev is not None and err is None:
            logger.info("Check %s recovered", self.name)
