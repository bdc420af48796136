"""
Clock and task scheduling used by timed game phases.
"""

import threading
import time
from typing import Any, Callable


class Scheduler:
    """
    Source of time, waits and background tasks.

    The night-cycle engine and the game timer only suspend through this
    interface, so tests can swap in a virtual clock.
    """

    def now(self) -> float:
        """Current time in seconds since the epoch."""
        return time.time()

    def now_ms(self) -> int:
        """Current time in epoch milliseconds."""
        return int(self.now() * 1000)

    def sleep(self, seconds: float) -> None:
        time.sleep(seconds)

    def start_background_task(self, target: Callable[..., Any], *args, **kwargs) -> Any:
        """Run target concurrently with the caller."""
        thread = threading.Thread(target=target, args=args, kwargs=kwargs, daemon=True)
        thread.start()
        return thread


def format_elapsed(start_ms: int, now_ms: int) -> str:
    """Elapsed time as zero-padded HH:MM:SS."""
    elapsed = max(now_ms - start_ms, 0) // 1000
    hours = elapsed // 3600
    minutes = (elapsed % 3600) // 60
    seconds = elapsed % 60
    return f"{hours:02d}:{minutes:02d}:{seconds:02d}"
