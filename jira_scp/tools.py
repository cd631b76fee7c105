"""Tool operations: turn git and Jira lookups into normalized responses.

Domain failures (not a repository, no key in the branch name, Jira lookup
failed) come back as failure responses. Nothing here raises for them, so the
calling agent always gets a parseable result.
"""

import logging
import re
from collections.abc import Sequence
from pathlib import Path

from jira_scp.extract import extract_issue_key
from jira_scp.git import GitError, NotAGitRepository, resolve_current_branch
from jira_scp.models import BranchInfo, BranchResponse, IssueInfo, IssueResponse, JiraIssue
from jira_scp.providers.base import IssueTracker

logger = logging.getLogger(__name__)

UNASSIGNED = "Unassigned"


def issue_info(tracker: IssueTracker, issue_key: str, issue: JiraIssue, branch: str = "") -> IssueInfo:
    url = tracker.issue_url(issue_key)
    fields = issue.fields
    return IssueInfo(
        branch=branch,
        url=url,
        markdown_link=f"[{issue_key}]({url})",
        summary=fields.summary,
        description=fields.description,
        status=fields.status.name,
        priority=fields.priority.name,
        assignee=fields.assignee.display_name if fields.assignee else UNASSIGNED,
    )


def _branch_or_failure(workdir: Path) -> tuple[str | None, str | None]:
    """Return (branch, None) or (None, failure message)."""
    try:
        branch = resolve_current_branch(workdir)
    except NotAGitRepository as exc:
        logger.warning("%s", exc)
        return None, f"{exc.path} is not a git repository"
    except GitError as exc:
        logger.error("%s", exc)
        return None, f"Could not determine the current git branch in {workdir}"
    logger.debug("Current branch: %s", branch)
    return branch, None


def _fetch_failed(issue_key: str) -> IssueResponse:
    return IssueResponse.failure(f"Failed to fetch Jira issue {issue_key}")


def get_current_branch_name(workdir: Path) -> BranchResponse:
    branch, error = _branch_or_failure(workdir)
    if error:
        return BranchResponse.failure(error)
    return BranchResponse(success=True, data=BranchInfo(branch=branch))


def get_jira_info(tracker: IssueTracker, workdir: Path, patterns: Sequence[re.Pattern[str]]) -> IssueResponse:
    """Resolve the current branch, extract its issue key and fetch the issue."""
    branch, error = _branch_or_failure(workdir)
    if error:
        return IssueResponse.failure(error)

    issue_key = extract_issue_key(branch, patterns)
    logger.debug("Extracted issue key: %s", issue_key)
    if not issue_key:
        return IssueResponse.failure(f"Could not extract a Jira issue key from branch '{branch}'")

    issue = tracker.get_issue(issue_key)
    if issue is None:
        return _fetch_failed(issue_key)
    return IssueResponse(success=True, data=issue_info(tracker, issue_key, issue, branch=branch))


def get_jira_by_id(tracker: IssueTracker, issue_key: str) -> IssueResponse:
    issue_key = issue_key.strip()
    if not issue_key:
        return IssueResponse.failure("An issue key is required")

    issue = tracker.get_issue(issue_key)
    if issue is None:
        return _fetch_failed(issue_key)
    return IssueResponse(success=True, data=issue_info(tracker, issue_key, issue))
