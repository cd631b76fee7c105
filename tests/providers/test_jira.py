"""Tests for JiraProvider using pytest-httpx."""

import base64
import logging
from unittest.mock import patch

import httpx
import pytest
from conftest import BASE_URL, issue_payload
from pytest_httpx import HTTPXMock

from jira_scp.models import JiraIssue
from jira_scp.providers.jira import JiraProvider
from jira_scp.settings import ScpSettings
from jira_scp.tools import get_jira_by_id

ISSUE_URL = f"{BASE_URL}/rest/api/3/issue/ABC-123"


class TestGetIssue:
    def test_returns_issue(self, settings: ScpSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=ISSUE_URL, json=issue_payload())
        issue = JiraProvider(settings).get_issue("ABC-123")

        assert isinstance(issue, JiraIssue)
        assert issue.fields.summary == "Fix null check in auth middleware"
        assert issue.fields.assignee is not None
        assert issue.fields.assignee.display_name == "Jane Doe"

    def test_basic_auth_sent(self, settings: ScpSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=ISSUE_URL, json=issue_payload())
        JiraProvider(settings).get_issue("ABC-123")

        request = httpx_mock.get_request()
        assert request is not None
        assert request.method == "GET"
        expected = base64.b64encode(b"dev@example.com:atl_token_12345").decode()
        assert request.headers["Authorization"] == f"Basic {expected}"
        assert request.headers["Accept"] == "application/json"

    def test_trailing_slash_in_base_url(self, httpx_mock: HTTPXMock) -> None:
        settings = ScpSettings(
            jira_instance_url=f"{BASE_URL}/",
            jira_user_email="dev@example.com",
            jira_api_key="atl_token_12345",
        )
        httpx_mock.add_response(url=ISSUE_URL, json=issue_payload())
        assert JiraProvider(settings).get_issue("ABC-123") is not None

    def test_unassigned_issue(self, settings: ScpSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=ISSUE_URL, json=issue_payload(assignee=None))
        issue = JiraProvider(settings).get_issue("ABC-123")
        assert issue is not None
        assert issue.fields.assignee is None

    @pytest.mark.parametrize("status_code", [401, 404, 500])
    def test_http_error_returns_none(
        self, status_code: int, settings: ScpSettings, httpx_mock: HTTPXMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        httpx_mock.add_response(url=ISSUE_URL, status_code=status_code, json={"errorMessages": ["nope"]})
        with caplog.at_level(logging.ERROR, logger="jira_scp.providers.jira"):
            assert JiraProvider(settings).get_issue("ABC-123") is None
        assert str(status_code) in caplog.text

    def test_network_error_returns_none(self, settings: ScpSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_exception(httpx.ConnectError("connection refused"), url=ISSUE_URL)
        assert JiraProvider(settings).get_issue("ABC-123") is None

    def test_unexpected_shape_returns_none(
        self, settings: ScpSettings, httpx_mock: HTTPXMock, caplog: pytest.LogCaptureFixture
    ) -> None:
        httpx_mock.add_response(url=ISSUE_URL, json={"fields": {"summary": "no status"}})
        with caplog.at_level(logging.ERROR, logger="jira_scp.providers.jira"):
            assert JiraProvider(settings).get_issue("ABC-123") is None
        assert "Unexpected Jira response shape" in caplog.text

    def test_non_json_body_returns_none(self, settings: ScpSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(url=ISSUE_URL, text="<html>login</html>")
        assert JiraProvider(settings).get_issue("ABC-123") is None


    def test_non_printable_key_is_escaped(self, settings: ScpSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(status_code=404)
        response = get_jira_by_id(JiraProvider(settings), "ABC-1\x00x")

        assert response.success is False
        request = httpx_mock.get_request()
        assert request is not None
        assert request.url.raw_path == b"/rest/api/3/issue/ABC-1%00x"

    def test_key_cannot_leave_issue_path(self, settings: ScpSettings, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(status_code=404)
        assert JiraProvider(settings).get_issue("ABC-1/../../myself?expand=all") is None

        request = httpx_mock.get_request()
        assert request is not None
        assert request.url.raw_path == b"/rest/api/3/issue/ABC-1%2F..%2F..%2Fmyself%3Fexpand%3Dall"

    def test_invalid_url_returns_none(self, settings: ScpSettings) -> None:
        with patch("httpx.get", side_effect=httpx.InvalidURL("Invalid non-printable ASCII character in URL")):
            assert JiraProvider(settings).get_issue("ABC-123") is None


class TestProvider:
    def test_issue_url(self, settings: ScpSettings) -> None:
        assert JiraProvider(settings).issue_url("ABC-123") == "https://example.atlassian.net/browse/ABC-123"

    def test_missing_credentials_raise(self) -> None:
        with pytest.raises(RuntimeError, match="required"):
            JiraProvider(ScpSettings(jira_instance_url=BASE_URL))
