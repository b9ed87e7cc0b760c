"""Resumable pagination job runner."""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Optional
import httpx

from harvester.auth.cookies import CookieJar
from harvester.config import DATA_DIR, config
from harvester.fetch.client import PageFetcher, Sleep
from harvester.fetch.errors import CheckpointCorrupt, FetchExhausted
from harvester.jobs.definitions import JobSpec
from harvester.jobs.metrics import Metrics
from harvester.parse.identity import RecordIdentitySet
from harvester.parse.models import Checkpoint, FinalSnapshot, PageResult
from harvester.store.checkpoint import CheckpointStore
from harvester.store.snapshot import SnapshotWriter

logger = logging.getLogger(__name__)


class DriverState(str, Enum):
    INIT = "init"
    LOADING_CHECKPOINT = "loading_checkpoint"
    FETCHING = "fetching"
    MERGING = "merging"
    CHECKPOINTING = "checkpointing"
    DONE = "done"
    STOPPED_ON_ERROR = "stopped_on_error"


@dataclass
class JobResult:
    """Outcome of one job: either complete or stopped with a resumable checkpoint."""

    job: str
    ok: bool
    records: int
    pages: int
    elapsed_seconds: float
    error: Optional[str] = None
    retries: int = 0
    backoff_seconds: float = 0.0


class PaginationRunner:
    """Walks `base_url + page` until the data runs out.

    A checkpoint is written after every merged page and is the only state
    that survives the process. Pages are fetched strictly one after another.
    """

    def __init__(
        self,
        job: JobSpec,
        data_dir: Optional[Path] = None,
        seed_cookies: Optional[str] = None,
        max_retries: Optional[int] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        sleep: Sleep = asyncio.sleep,
    ):
        if not job.paginated:
            raise ValueError(f"Job {job.name} has no resume file and cannot be paginated")
        data_dir = data_dir or DATA_DIR
        self.job = job
        self.checkpoints = CheckpointStore(data_dir / job.resume_file, job.records_field)
        self.snapshots = SnapshotWriter(data_dir / job.output_file, job.records_field)
        self.seed_cookies = config.SEED_COOKIES if seed_cookies is None else seed_cookies
        self.max_retries = max_retries
        self.transport = transport
        self.sleep = sleep

        self.state = DriverState.INIT
        self.jar = CookieJar()
        self.seen = RecordIdentitySet()
        self.records: list[Any] = []
        self.page = 1
        self.total_pages: Optional[int] = None
        self.total_count: Optional[int] = None

    def _transition(self, state: DriverState) -> None:
        logger.debug(f"[{self.job.name}] {self.state.value} -> {state.value}")
        self.state = state

    async def run(self) -> JobResult:
        """Run the job to completion or to the first unfetchable page."""
        self._transition(DriverState.LOADING_CHECKPOINT)
        await self._load_checkpoint()
        metrics = Metrics(self.job.name, self.total_pages)

        async with PageFetcher(
            self.job.base_url,
            self.jar,
            records_fields=self.job.records_fields,
            max_retries=self.max_retries,
            transport=self.transport,
            sleep=self.sleep,
        ) as fetcher:
            while True:
                self._transition(DriverState.FETCHING)
                logger.info(f"[{self.job.name}] Fetching page {self.page}...")
                try:
                    result = await fetcher.fetch_page(self.page)
                except FetchExhausted as e:
                    self._transition(DriverState.STOPPED_ON_ERROR)
                    logger.error(f"[{self.job.name}] Fatal error fetching page {self.page}: {e}")
                    logger.error(f"[{self.job.name}] Progress saved. Re-run to resume from page {self.page}.")
                    return self._result(metrics, fetcher, ok=False, error=str(e))

                self._transition(DriverState.MERGING)
                self._capture_pagination(result, metrics)
                if not result.records:
                    logger.info(f"[{self.job.name}] No {self.job.records_field} in response, stopping.")
                    break

                added = self._merge(result.records)
                metrics.record_page(len(result.records), added)
                metrics.report(self.page, len(result.records), added, len(self.records))

                self._transition(DriverState.CHECKPOINTING)
                await self.checkpoints.save(self._checkpoint(next_page=self.page + 1))

                if self.total_pages and self.page >= self.total_pages:
                    logger.info(f"[{self.job.name}] Reached last page.")
                    break
                self.page += 1

        self._transition(DriverState.DONE)
        await self.snapshots.write(
            FinalSnapshot(
                expected_total=self.total_count,
                records=self.records,
                cookies=self.jar.to_dict(),
            )
        )
        self.checkpoints.clear()
        logger.info(
            f"[{self.job.name}] Done. Saved {len(self.records)} {self.job.records_field} "
            f"in {metrics.elapsed:.1f}s ({fetcher.retry_count} retries, "
            f"{fetcher.backoff_time_total:.0f}s backing off)."
        )
        return self._result(metrics, fetcher, ok=True)

    async def _load_checkpoint(self) -> None:
        try:
            checkpoint = await self.checkpoints.load()
        except CheckpointCorrupt as e:
            logger.warning(f"[{self.job.name}] {e}. Starting fresh.")
            self.checkpoints.clear()
            checkpoint = None

        if checkpoint is None:
            self._seed_cookies()
            return

        self.page = checkpoint.page
        self.records = list(checkpoint.records)
        self.total_pages = checkpoint.total_pages
        self.total_count = checkpoint.total_count
        self.jar.hydrate(checkpoint.cookies)
        self.seen = RecordIdentitySet(self.records)
        logger.info(
            f"[{self.job.name}] Resuming from page {self.page} "
            f"(already have {len(self.records)} {self.job.records_field}); "
            f"cookies: {', '.join(self.jar.names()) or 'none'}"
        )

    def _seed_cookies(self) -> None:
        if not self.seed_cookies:
            return
        self.jar.seed_from_header(self.seed_cookies)
        logger.info(f"[{self.job.name}] Loaded initial cookies: {', '.join(self.jar.names()) or 'none'}")

    def _capture_pagination(self, result: PageResult, metrics: Metrics) -> None:
        """Totals are taken from the first page that reports them, then kept."""
        if self.total_pages is not None or result.pagination is None:
            return
        self.total_pages = result.pagination.pages or None
        self.total_count = result.pagination.count or None
        metrics.total_pages = self.total_pages
        logger.info(
            f"[{self.job.name}] Discovered total pages={self.total_pages}, "
            f"total {self.job.records_field}={self.total_count}"
        )

    def _merge(self, batch: list[Any]) -> int:
        added = 0
        for record in batch:
            if self.seen.add(record):
                self.records.append(record)
                added += 1
        return added

    def _checkpoint(self, next_page: int) -> Checkpoint:
        return Checkpoint(
            page=next_page,
            records=self.records,
            total_pages=self.total_pages,
            total_count=self.total_count,
            cookies=self.jar.to_dict(),
        )

    def _result(
        self, metrics: Metrics, fetcher: PageFetcher, ok: bool, error: Optional[str] = None
    ) -> JobResult:
        return JobResult(
            job=self.job.name,
            ok=ok,
            records=len(self.records),
            pages=metrics.counters.get("pages", 0),
            elapsed_seconds=metrics.elapsed,
            error=error,
            retries=fetcher.retry_count,
            backoff_seconds=fetcher.backoff_time_total,
        )
