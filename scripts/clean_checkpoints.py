#!/usr/bin/env python3
"""Utility script to inspect or discard job checkpoints."""
import asyncio
import sys
from pathlib import Path

from harvester.config import DATA_DIR
from harvester.fetch.errors import CheckpointCorrupt
from harvester.jobs.definitions import JOBS
from harvester.store.checkpoint import CheckpointStore


def _stores(data_dir: Path) -> dict[str, CheckpointStore]:
    return {
        name: CheckpointStore(data_dir / job.resume_file, job.records_field)
        for name, job in JOBS.items()
        if job.paginated
    }


def show_stats(data_dir: Path = DATA_DIR) -> None:
    """Show where each paginated job would resume."""
    print(f"Data directory: {data_dir}")
    for name, store in _stores(data_dir).items():
        try:
            checkpoint = asyncio.run(store.load())
        except CheckpointCorrupt as e:
            print(f"{name}: CORRUPT ({e.cause})")
            continue
        if checkpoint is None:
            print(f"{name}: no checkpoint")
            continue
        total_pages = checkpoint.total_pages or "?"
        print(
            f"{name}: next page {checkpoint.page}/{total_pages}, "
            f"{len(checkpoint.records)} {store.records_field} stored, "
            f"cookies: {', '.join(checkpoint.cookies) or 'none'}"
        )


def clear(job_name: str, data_dir: Path = DATA_DIR) -> None:
    """Delete one job's checkpoint, or every checkpoint with 'all'."""
    stores = _stores(data_dir)
    if job_name != "all" and job_name not in stores:
        print(f"Unknown job: {job_name} (choose from {', '.join(stores)} or all)")
        sys.exit(1)

    for name, store in stores.items():
        if job_name not in ("all", name):
            continue
        if store.exists():
            store.clear()
            print(f"Deleted checkpoint for {name}; next run starts from page 1")
        else:
            print(f"No checkpoint for {name}")


if __name__ == "__main__":
    if len(sys.argv) < 2:
        print("Usage:")
        print("  python scripts/clean_checkpoints.py stats              # Show resume points")
        print("  python scripts/clean_checkpoints.py clear <job|all>    # Delete checkpoints")
        sys.exit(1)

    command = sys.argv[1]

    if command == "stats":
        show_stats()
    elif command == "clear":
        if len(sys.argv) < 3:
            print("Error: Please provide a job name or 'all'")
            sys.exit(1)
        target = sys.argv[2]
        if target == "all":
            confirm = input("Are you sure you want to delete ALL checkpoints? (yes/no): ")
            if confirm.lower() != "yes":
                print("Cancelled")
                sys.exit(0)
        clear(target)
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)
