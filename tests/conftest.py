"""Shared fixtures: build declaration trees on disk."""

import logging
from pathlib import Path

import pytest

from deploy_drift.utils.scan_stats import get_stats_tracker


def declaration(name: str | None, version: str | None, env: dict[str, str] | None = None) -> str:
    """Render a declaration file in the Terraform layout."""
    lines = []
    if name is not None:
        lines.append(f'app_name          = "{name}"')
    if version is not None:
        lines.append(f'container_version = "{version}"')
    if env is not None:
        lines.append("environment_vars = {")
        for key, value in env.items():
            lines.append(f'  "{key}" = "{value}"')
        lines.append("}")
    return "\n".join(lines) + "\n"


class RepoBuilder:
    """Writes declaration files below <root>/Terraform/Environments/<env>/workload."""

    def __init__(self, root: Path):
        self.root = root

    def workload(self, env: str) -> Path:
        path = self.root / "Terraform" / "Environments" / env / "workload"
        path.mkdir(parents=True, exist_ok=True)
        return path

    def add(
        self,
        env: str,
        relpath: str,
        name: str | None,
        version: str | None,
        env_vars: dict[str, str] | None = None,
    ) -> Path:
        path = self.workload(env) / relpath
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(declaration(name, version, env_vars), encoding="utf-8")
        return path


@pytest.fixture
def repo(tmp_path: Path) -> RepoBuilder:
    """Empty repository with prod and stage workload directories."""
    builder = RepoBuilder(tmp_path / "repo")
    builder.workload("prod")
    builder.workload("stage")
    return builder


@pytest.fixture(autouse=True)
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Keep user config files out of tests."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)
    return home


@pytest.fixture(autouse=True)
def reset_stats():
    """Scan statistics are process-wide; start each test clean."""
    tracker = get_stats_tracker()
    tracker.disable()
    tracker.reset()
    yield
    tracker.disable()
    tracker.reset()


@pytest.fixture(autouse=True)
def reset_logging():
    """CLI runs attach a handler to the runner's stderr; drop it afterwards."""
    yield
    logging.getLogger("deploy_drift").handlers.clear()
