"""Pytest configuration and shared fixtures for all tests."""

import json
from pathlib import Path

import pytest

from issue_router.common.config import IssueRouterSettings


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    """Run with no Issue Router variables set and no .env file in reach."""
    for name in IssueRouterSettings.model_fields:
        monkeypatch.delenv(name.upper(), raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch


@pytest.fixture
def write_issue_files(tmp_path):
    """Write issue record dicts into a directory, one JSON file each."""

    def _write(records, directory: Path = None):
        directory = directory or tmp_path / "issues"
        directory.mkdir(parents=True, exist_ok=True)
        for record in records:
            filename = f"{record['issue_num']}-issue.json"
            (directory / filename).write_text(json.dumps(record, indent=2), encoding="utf-8")
        return directory

    return _write
