"""Abstract base class for issue trackers."""

from abc import ABC, abstractmethod

from jira_scp.models import JiraIssue


class IssueTracker(ABC):
    @abstractmethod
    def get_issue(self, issue_key: str) -> JiraIssue | None:
        """Fetch one issue; None on any failure, which implementations log."""

    @abstractmethod
    def issue_url(self, issue_key: str) -> str: ...
