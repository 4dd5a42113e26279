"""
utils.py

Small helpers shared by the loader and the renderer.

The public helpers:
- `safe_log_exception(msg, exc, **ctx)` : logs exceptions robustly
- `ProgressTimer(logger, interval)` : periodic "At index N" progress lines

"""

from typing import Any
import sys
import time
import logging

logger = logging.getLogger(__name__)


def safe_log_exception(msg: str, exc: Exception, log: logging.Logger = None, **ctx: Any) -> None:
    """Log an exception robustly.

    Attempts to call `log.exception` (module logger by default). If logging
    fails for any reason, falls back to writing a compact message to
    `sys.stderr`.
    """
    log = log if log is not None else logger
    try:
        if ctx:
            ctx_s = ' | '.join(f"{k}={v!r}" for k, v in ctx.items())
            log.exception('%s | %s | %s', msg, exc, ctx_s)
        else:
            log.exception('%s | %s', msg, exc)
    except Exception:
        try:
            sys.stderr.write(f'LOGGING FAILURE: {msg} {exc}\n')
        except Exception:
            pass


class ProgressTimer:
    """Emit an INFO line every `interval` items with the elapsed time.

    Usage:
        timer = ProgressTimer(logger, 500)
        for i, item in enumerate(items):
            ...
            timer.tick(i)
        timer.elapsed()
    """

    def __init__(self, log: logging.Logger, interval: int):
        self.log = log
        self.interval = int(interval)
        self.start = time.perf_counter()

    def elapsed(self) -> float:
        return time.perf_counter() - self.start

    def tick(self, index: int) -> bool:
        if index % self.interval == 0:
            self.log.info('  At index %d with time %.2fs', index, self.elapsed())
            return True
        return False
