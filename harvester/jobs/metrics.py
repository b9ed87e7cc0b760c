"""Metrics tracking for pagination progress."""
import time
import logging
from collections import defaultdict
from typing import Dict, Optional

logger = logging.getLogger(__name__)


class Metrics:
    """Track pages and records for one job and estimate time remaining."""

    def __init__(self, job_name: str, total_pages: Optional[int] = None):
        self.job_name = job_name
        self.total_pages = total_pages
        self.start_time = time.time()
        self.counters: Dict[str, int] = defaultdict(int)

    def increment(self, key: str, amount: int = 1) -> None:
        """Increment a counter."""
        self.counters[key] = self.counters.get(key, 0) + amount

    def record_page(self, received: int, added: int) -> None:
        self.increment("pages")
        self.increment("received", received)
        self.increment("added", added)

    @property
    def elapsed(self) -> float:
        return time.time() - self.start_time

    def get_rate(self) -> float:
        """Get current page rate (pages/second)."""
        elapsed = self.elapsed
        pages = self.counters.get("pages", 0)
        if elapsed > 0:
            return pages / elapsed
        return 0.0

    def get_eta(self, current_page: int) -> Optional[float]:
        """Seconds left until the last page, None while the total is unknown."""
        if not self.total_pages:
            return None
        rate = self.get_rate()
        if rate <= 0:
            return None
        remaining = max(self.total_pages - current_page, 0)
        return remaining / rate

    def format_eta(self, current_page: int) -> str:
        """Format ETA as human-readable string."""
        eta_seconds = self.get_eta(current_page)
        if eta_seconds is None:
            return "?"
        if eta_seconds < 60:
            return f"{eta_seconds:.0f}s"
        elif eta_seconds < 3600:
            return f"{eta_seconds / 60:.1f}m"
        else:
            return f"{eta_seconds / 3600:.1f}h"

    def report(self, page: int, received: int, added: int, stored: int) -> None:
        """Log the per-page progress line."""
        of_total = f"/{self.total_pages}" if self.total_pages else ""
        logger.info(
            f"[{self.job_name}] Page {page}{of_total}: received {received}, added {added}, "
            f"total stored {stored} | ETA: {self.format_eta(page)}"
        )

