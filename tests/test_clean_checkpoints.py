"""Tests for the checkpoint maintenance script."""
import json

import pytest

from clean_checkpoints import clear, show_stats


def write_resume(data_dir, name, document):
    (data_dir / name).write_text(json.dumps(document))


def test_stats_reports_each_job(tmp_path, capsys):
    """Test stats describe each job's checkpoint, corrupt ones included."""
    write_resume(tmp_path, "resume.json", {"page": 4, "users": [{"id": 1}], "totalPages": 9, "cookies": {"s": "1"}})
    (tmp_path / "projects_resume.json").write_text("{broken")

    show_stats(tmp_path)

    out = capsys.readouterr().out
    assert "users: next page 4/9, 1 users stored, cookies: s" in out
    assert "projects: CORRUPT" in out


def test_stats_without_checkpoints(tmp_path, capsys):
    """Test stats for an empty data directory."""
    show_stats(tmp_path)
    out = capsys.readouterr().out
    assert "users: no checkpoint" in out
    assert "shells" not in out


def test_clear_single_job(tmp_path):
    """Test clearing one job leaves the others alone."""
    write_resume(tmp_path, "resume.json", {"page": 2, "users": []})
    write_resume(tmp_path, "projects_resume.json", {"page": 2, "projects": []})

    clear("users", tmp_path)

    assert not (tmp_path / "resume.json").exists()
    assert (tmp_path / "projects_resume.json").exists()


def test_clear_all(tmp_path):
    """Test clearing every job's checkpoint."""
    write_resume(tmp_path, "resume.json", {"page": 2, "users": []})
    write_resume(tmp_path, "projects_resume.json", {"page": 2, "projects": []})

    clear("all", tmp_path)

    assert not (tmp_path / "resume.json").exists()
    assert not (tmp_path / "projects_resume.json").exists()


def test_clear_unknown_job_exits(tmp_path):
    """Test an unknown job name exits."""
    with pytest.raises(SystemExit):
        clear("shells", tmp_path)
