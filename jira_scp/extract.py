"""Jira issue key extraction from git branch names."""

import logging
import re
from collections.abc import Sequence

logger = logging.getLogger(__name__)

# Tried in order, first match wins. Each has exactly one capturing group.
DEFAULT_BRANCH_PATTERNS = (
    r"dev_[a-zA-Z]+-([A-Z]+-\d+)",  # dev_alice-ABC-123
    r"feature/[a-zA-Z]+-([A-Z]+-\d+)",  # feature/alice-ABC-123
    r"bugfix/[a-zA-Z]+-([A-Z]+-\d+)",  # bugfix/alice-ABC-123
    r"dev_[a-zA-Z]+_([A-Z]+-\d+)",  # dev_alice_ABC-123
)


def _split_sources(sources: str | Sequence[str] | None) -> list[str]:
    if sources is None:
        return []
    if isinstance(sources, str):
        sources = sources.split(",")
    return [s.strip() for s in sources if s and s.strip()]


def compile_patterns(sources: str | Sequence[str] | None = None) -> list[re.Pattern[str]]:
    """Compile configured pattern sources, falling back to DEFAULT_BRANCH_PATTERNS.

    sources may be a comma-separated string (as read from JIRA_BRANCH_PATTERNS)
    or a sequence of regex strings. Sources that do not compile, or that have no
    capturing group, are skipped with a warning instead of failing the lookup.
    """
    configured = _split_sources(sources)
    if not configured:
        return [re.compile(p) for p in DEFAULT_BRANCH_PATTERNS]

    patterns = []
    for source in configured:
        try:
            pattern = re.compile(source)
        except re.error as exc:
            logger.warning("Ignoring invalid branch pattern %r: %s", source, exc)
            continue
        if pattern.groups < 1:
            logger.warning("Ignoring branch pattern %r: it has no capturing group", source)
            continue
        patterns.append(pattern)

    if not patterns:
        logger.warning("No usable branch patterns configured, using the defaults")
        return [re.compile(p) for p in DEFAULT_BRANCH_PATTERNS]
    return patterns


def extract_issue_key(branch: str, patterns: Sequence[re.Pattern[str]]) -> str | None:
    """Return the issue key captured by the first matching pattern, or None."""
    if not branch:
        return None
    for pattern in patterns:
        match = pattern.search(branch)
        if match:
            return match.group(1)
    return None
