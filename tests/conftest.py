"""Shared fixtures."""
import dataclasses

import pytest

from harvester.jobs.definitions import PROJECTS, USERS
from fakes import RecordingSleep


@pytest.fixture
def fake_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture
def users_job():
    return dataclasses.replace(USERS, base_url="https://api.test/api/v1/users?page=")


@pytest.fixture
def projects_job():
    return dataclasses.replace(PROJECTS, base_url="https://api.test/api/v1/projects?devlogs=true&page=")
