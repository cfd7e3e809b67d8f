"""Shared test fixtures."""

from pathlib import Path

import pytest

import goose_connect.settings as settings_module
from goose_connect.models import ExecuteTaskRequest, GitHubInfo, ProviderInfo
from goose_connect.settings import GooseConnectSettings


@pytest.fixture(autouse=True)
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """Point the config file somewhere empty and drop GOOSECONNECT_* env vars."""
    monkeypatch.setattr(settings_module, "CONFIG_PATH", tmp_path / "missing-config.toml")
    for name in GooseConnectSettings.model_fields:
        monkeypatch.delenv(f"GOOSECONNECT_{name.upper()}", raising=False)
    settings_module._load_toml.cache_clear()
    yield
    settings_module._load_toml.cache_clear()


@pytest.fixture
def settings(tmp_path: Path) -> GooseConnectSettings:
    return GooseConnectSettings(
        base_dir=str(tmp_path / "base"),
        git_user="goose-bot",
        git_mail="goose-bot@example.com",
    )


@pytest.fixture
def provider_info() -> ProviderInfo:
    return ProviderInfo(
        model_name="gpt-4o",
        api_key="sk-test-openai-key",
        provider_name="openai",
        env={"GOOSE_TEMPERATURE": "0.2"},
    )


@pytest.fixture
def github_info() -> GitHubInfo:
    return GitHubInfo(
        api_token="ghs_installation",
        api_url="https://github.com",
        repo="kommon-ai/goose-connect",
        full_repo_url="https://github.com/kommon-ai/goose-connect",
        pr_number=42,
        issue_number=0,
        branch_name="feature/labels",
    )


@pytest.fixture
def execute_request(provider_info: ProviderInfo, github_info: GitHubInfo) -> ExecuteTaskRequest:
    return ExecuteTaskRequest(
        provider=provider_info,
        github=github_info,
        instruction="Fix the failing test",
        session_id="kommon-ai/goose-connect/pull/42",
    )
