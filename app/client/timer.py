import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class CountdownTimer:
    """
    Calls `on_tick` once per `interval` seconds on a daemon thread until
    `on_tick` returns True (expired) or `cancel()` is called.
    """

    def __init__(
        self,
        on_tick: Callable[[], bool],
        on_expire: Optional[Callable[[], None]] = None,
        interval: float = 1.0,
    ):
        self._on_tick = on_tick
        self._on_expire = on_expire
        self._interval = interval
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive() and not self._stopped.is_set()

    def start(self) -> None:
        if self.running:
            return
        self._stopped.clear()
        self._thread = threading.Thread(target=self._run, name="quiz-countdown", daemon=True)
        self._thread.start()

    def cancel(self, wait: bool = True) -> None:
        """Stops the countdown. With `wait=False` the thread is left to exit on its own."""
        self._stopped.set()
        thread = self._thread
        if wait and thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._interval * 2)
        self._thread = None

    def _run(self) -> None:
        while not self._stopped.wait(self._interval):
            try:
                expired = self._on_tick()
            except Exception:
                logger.error("Countdown tick failed, stopping timer", exc_info=True)
                self._stopped.set()
                return
            if expired:
                if self._stopped.is_set():
                    # Cancelled while the last tick ran
                    return
                self._stopped.set()
                if self._on_expire is not None:
                    self._on_expire()
                return
