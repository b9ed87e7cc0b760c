"""Scrape job definitions."""
from dataclasses import dataclass
from typing import Optional

from harvester.config import config


@dataclass(frozen=True)
class JobSpec:
    """Where a job reads pages from and where it keeps its files."""

    name: str
    base_url: str
    records_field: str
    output_file: str
    resume_file: Optional[str] = None
    fallback_fields: tuple[str, ...] = ()

    @property
    def records_fields(self) -> tuple[str, ...]:
        return (self.records_field, *self.fallback_fields)

    @property
    def paginated(self) -> bool:
        return self.resume_file is not None


USERS = JobSpec(
    name="users",
    base_url=config.USERS_URL,
    records_field="users",
    output_file="users.json",
    resume_file="resume.json",
)

PROJECTS = JobSpec(
    name="projects",
    base_url=config.PROJECTS_URL,
    records_field="projects",
    output_file="projects.json",
    resume_file="projects_resume.json",
    fallback_fields=("items",),
)

SHELLS = JobSpec(
    name="shells",
    base_url=config.LEADERBOARD_URL,
    records_field="entries",
    output_file="shells.json",
    fallback_fields=("items",),
)

JOBS: dict[str, JobSpec] = {job.name: job for job in (USERS, PROJECTS, SHELLS)}


def get_job(name: str) -> JobSpec:
    try:
        return JOBS[name]
    except KeyError:
        raise ValueError(f"Unknown job {name!r}, expected one of: {', '.join(JOBS)}") from None
