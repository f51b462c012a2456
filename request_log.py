"""
Append-only request log.

One line per incoming request: ``<UTC ISO-8601 timestamp> - <METHOD> <PATH>``.
Writes are handed to a single worker thread so a slow or broken disk never
holds up a response; failures only reach the diagnostic logger.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone
from typing import Optional

logger = logging.getLogger(__name__)


def timestamp() -> str:
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class RequestLog:
    def __init__(self, path: str):
        self.path = path
        self._executor: Optional[ThreadPoolExecutor] = None

    def open(self):
        """Create the log file if missing and start the writer thread."""
        try:
            with open(self.path, "a", encoding="utf-8"):
                pass
        except OSError:
            logger.exception("Failed to create log file %s", self.path)
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="request-log")

    def close(self):
        """Flush pending lines and stop the writer thread."""
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def append(self, line: str):
        entry = f"{timestamp()} - {line}\n"
        if self._executor is None:
            # not started (or already closed): write inline
            self._write(entry)
        else:
            self._executor.submit(self._write, entry)

    def _write(self, entry: str):
        try:
            with open(self.path, "a", encoding="utf-8") as f:
                f.write(entry)
        except OSError:
            logger.exception("Failed to write to log file %s", self.path)
