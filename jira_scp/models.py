"""Shared pydantic models — Jira wire shapes and the tool responses built from them."""

import json
from typing import Any, Self

from pydantic import BaseModel, ConfigDict, Field, model_validator

# ---------------------------------------------------------------------------
# Jira REST v3 boundary: only the fields we read, everything else ignored
# ---------------------------------------------------------------------------


class JiraNamed(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str


class JiraAssignee(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    display_name: str = Field(alias="displayName")


class JiraFields(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    summary: str
    description: Any = None  # Atlassian Document Format, passed through untouched
    status: JiraNamed
    priority: JiraNamed
    assignee: JiraAssignee | None = None


class JiraIssue(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    key: str | None = None
    fields: JiraFields


# ---------------------------------------------------------------------------
# Tool responses
# ---------------------------------------------------------------------------


class IssueInfo(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    branch: str  # "" when looked up by key
    url: str
    markdown_link: str = Field(alias="markdownLink")
    summary: str
    description: Any = None
    status: str
    priority: str
    assignee: str


class BranchInfo(BaseModel):
    model_config = ConfigDict(frozen=True)

    branch: str


class ToolResponse(BaseModel):
    """Either {success: true, data} or {success: false, message}, never both."""

    model_config = ConfigDict(frozen=True)

    success: bool
    message: str | None = None

    @model_validator(mode="after")
    def _exactly_one_variant(self) -> "ToolResponse":
        data = getattr(self, "data", None)
        if self.success and (data is None or self.message is not None):
            raise ValueError("successful response needs data and no message")
        if not self.success and (not self.message or data is not None):
            raise ValueError("failed response needs a message and no data")
        return self

    @classmethod
    def failure(cls, message: str) -> Self:
        return cls(success=False, message=message)

    def to_json(self) -> str:
        payload = self.model_dump(mode="json", by_alias=True)
        payload = {k: v for k, v in payload.items() if v is not None}
        return json.dumps(payload, indent=2, ensure_ascii=False)


class IssueResponse(ToolResponse):
    data: IssueInfo | None = None


class BranchResponse(ToolResponse):
    data: BranchInfo | None = None
