"""Shared test fixtures."""

from pathlib import Path

import pytest

import jira_scp.settings as settings_module
from jira_scp.models import JiraIssue
from jira_scp.providers.base import IssueTracker
from jira_scp.settings import ScpSettings

BASE_URL = "https://example.atlassian.net"

_ENV_VARS = (
    "JIRA_INSTANCE_URL",
    "JIRA_USER_EMAIL",
    "JIRA_API_KEY",
    "JIRA_BRANCH_PATTERNS",
    "WORKSPACE_FOLDER_PATHS",
    "JIRA_SCP_PROFILE",
    "JIRA_SCP_LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def isolated_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    """No real env vars, no .env in cwd, no real config file, fresh toml cache."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(settings_module, "CONFIG_PATH", tmp_path / "no-config.toml")
    settings_module._load_toml.cache_clear()
    yield
    settings_module._load_toml.cache_clear()


@pytest.fixture
def settings() -> ScpSettings:
    return ScpSettings(
        jira_instance_url=BASE_URL,
        jira_user_email="dev@example.com",
        jira_api_key="atl_token_12345",
    )


def issue_payload(assignee: str | None = "Jane Doe", **overrides) -> dict:
    fields = {
        "summary": "Fix null check in auth middleware",
        "description": {
            "type": "doc",
            "version": 1,
            "content": [{"type": "paragraph", "content": [{"type": "text", "text": "Session can be None."}]}],
        },
        "status": {"name": "In Progress", "id": "3"},
        "priority": {"name": "High", "id": "2"},
        "assignee": {"displayName": assignee, "accountId": "abc"} if assignee else None,
        "labels": ["bug"],
    }
    fields.update(overrides)
    return {"id": "10001", "key": "ABC-123", "fields": fields}


@pytest.fixture
def jira_issue() -> JiraIssue:
    return JiraIssue.model_validate(issue_payload())


class FakeTracker(IssueTracker):
    """In-memory tracker; records every key it was asked for."""

    def __init__(self, issues: dict[str, JiraIssue] | None = None) -> None:
        self.issues = issues or {}
        self.requested: list[str] = []

    def get_issue(self, issue_key: str) -> JiraIssue | None:
        self.requested.append(issue_key)
        return self.issues.get(issue_key)

    def issue_url(self, issue_key: str) -> str:
        return f"{BASE_URL}/browse/{issue_key}"


@pytest.fixture
def tracker(jira_issue: JiraIssue) -> FakeTracker:
    return FakeTracker({"ABC-123": jira_issue})
