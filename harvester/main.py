"""Main entry point with CLI."""
import argparse
import asyncio
import logging
import sys
import time
from pathlib import Path
from typing import Optional, Sequence

from harvester.config import DATA_DIR, Config, config
from harvester.jobs.definitions import JOBS, get_job
from harvester.jobs.leaderboard import LeaderboardJob
from harvester.jobs.runner import JobResult, PaginationRunner
from harvester.logging_conf import setup_logging

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(description="Summer of Making harvester")
    parser.add_argument(
        "jobs",
        nargs="*",
        default=list(JOBS),
        metavar="JOB",
        help=f"Jobs to run in order (default: {' '.join(JOBS)})",
    )
    parser.add_argument(
        "--cookies",
        default=None,
        help="Initial Cookie header 'k1=v1; k2=v2', used only when no checkpoint exists "
        "(default: $SOM_COOKIES or $COOKIES)",
    )
    parser.add_argument(
        "--data-dir",
        type=Path,
        default=DATA_DIR,
        help=f"Directory for checkpoints and snapshots (default: {DATA_DIR})",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help=f"Log level (default: {config.LOG_LEVEL})",
    )
    args = parser.parse_args(argv)
    unknown = [name for name in args.jobs if name not in JOBS]
    if unknown:
        parser.error(f"unknown job(s): {', '.join(unknown)} (choose from {', '.join(JOBS)})")
    return args


async def run_jobs(
    job_names: Sequence[str],
    data_dir: Path,
    seed_cookies: Optional[str] = None,
    **job_kwargs,
) -> list[JobResult]:
    """Run jobs sequentially, stopping after the first failure."""
    results = []
    for name in job_names:
        job = get_job(name)
        logger.info(f"[runner] Starting: {job.name}")
        if job.paginated:
            runner = PaginationRunner(job, data_dir=data_dir, seed_cookies=seed_cookies, **job_kwargs)
        else:
            runner = LeaderboardJob(job, data_dir=data_dir, **job_kwargs)
        result = await runner.run()
        results.append(result)
        if not result.ok:
            logger.error(f"[runner] Error running {job.name}: {result.error}")
            logger.error("[runner] Stopping further execution.")
            break
        logger.info(f"[runner] Finished: {job.name} ({result.records} records, {result.elapsed_seconds:.1f}s)")
    return results


def main(argv: Optional[Sequence[str]] = None) -> None:
    """Main entry point."""
    args = parse_args(argv)
    setup_logging(args.log_level)

    try:
        Config.validate()
    except ValueError as e:
        logger.error(f"Configuration error: {e}")
        sys.exit(1)

    started_at = time.time()
    logger.info(f"[runner] Harvest starting: {', '.join(args.jobs)} -> {args.data_dir}")

    try:
        results = asyncio.run(run_jobs(args.jobs, args.data_dir, seed_cookies=args.cookies))
    except KeyboardInterrupt:
        logger.info("Interrupted by user. Re-run to resume.")
        sys.exit(1)
    except Exception as e:
        logger.error(f"Fatal error: {e}", exc_info=True)
        sys.exit(1)

    if not all(result.ok for result in results):
        sys.exit(1)

    minutes = (time.time() - started_at) / 60
    logger.info(f"[runner] All scrapers completed successfully in {minutes:.2f} minutes.")


if __name__ == "__main__":
    main()
