"""Tests for the CLI orchestrator."""
import asyncio
import json

import httpx
import pytest

from harvester.main import parse_args, run_jobs


def make_transport(users_status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        path = request.url.path
        page = int(request.url.params.get("page", "1"))
        if path.endswith("/users"):
            if users_status != 200:
                return httpx.Response(users_status)
            users = [{"id": page}] if page == 1 else []
            return httpx.Response(200, json={"pagination": {"pages": 1, "count": 1}, "users": users})
        if path.endswith("/projects"):
            return httpx.Response(200, json={"projects": [{"id": 10}] if page == 1 else []})
        if path.endswith("/leaderboard"):
            return httpx.Response(200, json=[{"slack_id": "U1"}])
        return httpx.Response(404)

    return httpx.MockTransport(handler)


def test_parse_args_defaults():
    """Test all jobs run by default."""
    args = parse_args([])
    assert args.jobs == ["users", "projects", "shells"]
    assert args.cookies is None


def test_parse_args_selection_and_cookies(tmp_path):
    """Test job selection and option parsing."""
    args = parse_args(["shells", "users", "--cookies=a=1; b=2", "--data-dir", str(tmp_path)])
    assert args.jobs == ["shells", "users"]
    assert args.cookies == "a=1; b=2"
    assert args.data_dir == tmp_path


def test_parse_args_rejects_unknown_job():
    """Test unknown job names are rejected."""
    with pytest.raises(SystemExit):
        parse_args(["comments"])


def test_run_jobs_in_order(tmp_path, fake_sleep):
    """Test jobs run one after another in the given order."""
    results = asyncio.run(
        run_jobs(["users", "projects", "shells"], tmp_path, seed_cookies="", transport=make_transport(), sleep=fake_sleep)
    )

    assert [r.job for r in results] == ["users", "projects", "shells"]
    assert all(r.ok for r in results)
    assert json.loads((tmp_path / "users.json").read_text())["total"] == 1
    assert json.loads((tmp_path / "projects.json").read_text())["projects"] == [{"id": 10}]
    assert json.loads((tmp_path / "shells.json").read_text())["total"] == 1


def test_run_jobs_stops_after_failure(tmp_path, fake_sleep):
    """Test later jobs are skipped after a failure."""
    results = asyncio.run(
        run_jobs(["users", "shells"], tmp_path, seed_cookies="", transport=make_transport(503), sleep=fake_sleep)
    )

    assert [r.job for r in results] == ["users"]
    assert not results[0].ok
    assert not (tmp_path / "shells.json").exists()
