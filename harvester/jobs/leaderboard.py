"""One-shot leaderboard fetch."""
import asyncio
import logging
import time
from pathlib import Path
from typing import Any, Optional
import httpx

from harvester.auth.cookies import CookieJar
from harvester.config import DATA_DIR
from harvester.fetch.client import PageFetcher, Sleep
from harvester.fetch.errors import FetchExhausted
from harvester.jobs.definitions import SHELLS, JobSpec
from harvester.jobs.runner import JobResult
from harvester.parse.models import PageResult, utc_timestamp
from harvester.store.snapshot import SnapshotWriter

logger = logging.getLogger(__name__)


class LeaderboardJob:
    """Single GET through the same retry policy, no checkpoint."""

    def __init__(
        self,
        job: JobSpec = SHELLS,
        data_dir: Optional[Path] = None,
        max_retries: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        self.job = job
        self.snapshots = SnapshotWriter((data_dir or DATA_DIR) / job.output_file, job.records_field)
        self.max_retries = max_retries
        self.transport = transport
        self.sleep = sleep

    async def run(self) -> JobResult:
        start_time = time.time()
        logger.info(f"[{self.job.name}] Fetching leaderboard...")
        async with PageFetcher(
            self.job.base_url,
            CookieJar(),
            max_retries=self.max_retries,
            transport=self.transport,
            sleep=self.sleep,
        ) as fetcher:
            try:
                entries = await fetcher.fetch_json(self.job.base_url, parse=self._parse)
            except FetchExhausted as e:
                logger.error(f"[{self.job.name}] Fatal error fetching leaderboard: {e}")
                return JobResult(
                    self.job.name, False, 0, 0, time.time() - start_time, error=str(e),
                    retries=fetcher.retry_count, backoff_seconds=fetcher.backoff_time_total,
                )

        logger.info(f"[{self.job.name}] Received {len(entries)} leaderboard entries.")
        await self.snapshots.write_document(
            {
                "scraped_at": utc_timestamp(),
                "total": len(entries),
                self.job.records_field: entries,
            }
        )
        logger.info(f"[{self.job.name}] Done. Saved {len(entries)} entries to {self.snapshots.path.name}.")
        return JobResult(
            self.job.name, True, len(entries), 1, time.time() - start_time,
            retries=fetcher.retry_count, backoff_seconds=fetcher.backoff_time_total,
        )

    def _parse(self, payload: Any) -> list[Any]:
        return PageResult.from_payload(payload, self.job.fallback_fields).records
