"""Jira Cloud REST API v3 provider."""

import logging
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from jira_scp.models import JiraIssue
from jira_scp.providers.base import IssueTracker
from jira_scp.settings import ScpSettings

logger = logging.getLogger(__name__)

ISSUE_PATH = "/rest/api/3/issue/{key}"


class JiraProvider(IssueTracker):
    def __init__(self, settings: ScpSettings) -> None:
        if not (settings.jira_base_url and settings.jira_user_email and settings.jira_api_key):
            raise RuntimeError("jira_instance_url, jira_user_email and jira_api_key are required")
        self._base_url = settings.jira_base_url
        self._auth = (settings.jira_user_email, settings.jira_api_key.get_secret_value())
        self._headers = {"Accept": "application/json"}

    def issue_url(self, issue_key: str) -> str:
        return f"{self._base_url}/browse/{issue_key}"

    def _get(self, path: str) -> dict:
        # Single attempt, httpx default timeout
        response = httpx.get(f"{self._base_url}{path}", auth=self._auth, headers=self._headers)
        response.raise_for_status()
        return response.json()

    def get_issue(self, issue_key: str) -> JiraIssue | None:
        try:
            data = self._get(ISSUE_PATH.format(key=quote(issue_key, safe="")))
            return JiraIssue.model_validate(data)
        except ValidationError as exc:
            logger.error("Unexpected Jira response shape for %s: %s", issue_key, exc.errors())
        except httpx.HTTPStatusError as exc:
            logger.error(
                "Jira API request for %s failed: %s %s",
                issue_key,
                exc.response.status_code,
                exc.response.text[:500],
            )
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.error("Jira API request for %s failed: %s", issue_key, exc)
        except ValueError as exc:
            # Body was not JSON
            logger.error("Jira API returned a non-JSON body for %s: %s", issue_key, exc)
        return None
