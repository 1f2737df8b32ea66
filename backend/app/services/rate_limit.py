"""
Ограничение частоты запросов: фиксированное окно на клиента
"""
import math
import threading
import time
from typing import Callable, Dict, Tuple


class RateLimiter:
    """Не более max_requests запросов от одного клиента за window_seconds"""

    def __init__(
        self,
        max_requests: int,
        window_seconds: float,
        clock: Callable[[], float] = time.monotonic
    ):
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self._windows: Dict[str, Tuple[float, int]] = {}
        self._last_sweep = clock()
        self._lock = threading.Lock()

    def __len__(self) -> int:
        """Сколько клиентов сейчас отслеживается"""
        with self._lock:
            return len(self._windows)

    def _sweep(self, now: float) -> None:
        # Не чаще раза за окно: удалить клиентов с истёкшим окном
        if now - self._last_sweep < self.window_seconds:
            return
        self._windows = {
            key: (started, count)
            for key, (started, count) in self._windows.items()
            if now - started < self.window_seconds
        }
        self._last_sweep = now

    def hit(self, client_key: str) -> bool:
        """Засчитать запрос. False - лимит исчерпан."""
        now = self.clock()
        with self._lock:
            self._sweep(now)

            started, count = self._windows.get(client_key, (now, 0))
            if now - started >= self.window_seconds:
                started, count = now, 0

            if count >= self.max_requests:
                self._windows[client_key] = (started, count)
                return False

            self._windows[client_key] = (started, count + 1)
            return True

    def retry_after(self, client_key: str) -> int:
        """Секунд до начала нового окна"""
        now = self.clock()
        with self._lock:
            started, _ = self._windows.get(client_key, (now, 0))
        return max(0, math.ceil(self.window_seconds - (now - started)))

    def reset(self) -> None:
        with self._lock:
            self._windows.clear()
            self._last_sweep = self.clock()
