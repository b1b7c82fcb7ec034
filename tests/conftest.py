"""
Shared test fixtures and configuration.
"""

from pathlib import Path
from unittest.mock import MagicMock

import pytest

from fakes import FakeGitHub, Remotes, mock_result
from gitoperator.core.config.loader import HookConfig, HookSettings


@pytest.fixture
def remotes(tmp_path: Path) -> Remotes:
    return Remotes(tmp_path / "remotes")


@pytest.fixture
def hook_config(remotes: Remotes) -> HookConfig:
    """Hook config pointing git at the local bare repositories."""
    return HookConfig(
        github_token="test-token",
        slack_channel="#ops",
        openai_api_key="sk-test",
        settings=HookSettings(git_base_url=remotes.base_url, git_timeout=60),
    )


@pytest.fixture
def fake_github(monkeypatch) -> FakeGitHub:
    fake = FakeGitHub()
    monkeypatch.setattr("gitoperator.core.services.git_gh_ops.run_gh", fake)
    return fake


@pytest.fixture
def kubectl(monkeypatch) -> MagicMock:
    mock = MagicMock(return_value=mock_result())
    monkeypatch.setattr("gitoperator.core.services.k8s_status._run_kubectl", mock)
    return mock
