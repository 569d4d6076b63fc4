"""Pytest configuration and fixtures."""

from collections.abc import Callable
from datetime import datetime
from typing import Any

import pytest

from gh_notion_sync.models import (
    Comment,
    GitHubIssue,
    IssueState,
    Label,
    RowHandle,
    User,
)


def issue_payload(number: int, **overrides: Any) -> dict[str, Any]:
    """Build an issue object shaped like the GitHub REST API's."""
    data: dict[str, Any] = {
        "number": number,
        "title": f"Issue {number}",
        "state": "open",
        "comments": 0,
        "html_url": f"https://github.com/owner/repo/issues/{number}",
        "labels": [],
        "assignee": None,
        "created_at": "2024-01-10T09:00:00Z",
    }
    data.update(overrides)
    return data


class FakeNotion:
    """In-memory stand-in for NotionClient."""

    def __init__(self, rows: dict[str, int] | None = None) -> None:
        self.rows: dict[str, int] = dict(rows or {})
        self.created: list[tuple[str, dict[str, Any]]] = []
        self.updated: list[tuple[str, dict[str, Any]]] = []
        self.fail_on: int | None = None
        self.closed = False
        self._next_id = 0

    async def fetch_row_handles(self, database_id: str) -> list[RowHandle]:
        return [RowHandle(row_id=row_id, issue_number=n) for row_id, n in self.rows.items()]

    async def create_page(self, database_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        number = properties["Issue Number"]["number"]
        if number == self.fail_on:
            raise RuntimeError(f"create failed for #{number}")
        self._next_id += 1
        row_id = f"new-{self._next_id}"
        self.rows[row_id] = number
        self.created.append((database_id, properties))
        return {"id": row_id}

    async def update_page(self, page_id: str, properties: dict[str, Any]) -> dict[str, Any]:
        number = properties["Issue Number"]["number"]
        if number == self.fail_on:
            raise RuntimeError(f"update failed for #{number}")
        self.updated.append((page_id, properties))
        return {"id": page_id}

    async def close(self) -> None:
        self.closed = True


class FakeGitHub:
    """In-memory stand-in for GitHubClient."""

    def __init__(self, issues: list[GitHubIssue]) -> None:
        self.issues = issues
        self.requested: list[tuple[str, str]] = []
        self.closed = False

    async def fetch_open_issues(self, owner: str, repo: str) -> list[GitHubIssue]:
        self.requested.append((owner, repo))
        return list(self.issues)

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_issue() -> Callable[..., GitHubIssue]:
    """Factory for GitHubIssue objects with sensible defaults."""

    def _make(number: int, **overrides: Any) -> GitHubIssue:
        fields: dict[str, Any] = {
            "number": number,
            "title": f"Issue {number}",
            "state": IssueState.OPEN,
            "comment_count": 0,
            "url": f"https://github.com/owner/repo/issues/{number}",
            "follow_up": True,
            "created_at": datetime(2024, 1, 10, 9, 0),
        }
        fields.update(overrides)
        return GitHubIssue(**fields)

    return _make


@pytest.fixture
def sample_issue() -> GitHubIssue:
    """Create a fully populated GitHub issue."""
    return GitHubIssue(
        number=123,
        title="Test Issue Title",
        state=IssueState.OPEN,
        comment_count=4,
        url="https://github.com/owner/repo/issues/123",
        labels=[
            Label(name="bug", color="d73a4a"),
            Label(name="enhancement", color="a2eeef"),
        ],
        assignee="testuser",
        follow_up=False,
        created_at=datetime(2024, 1, 10, 9, 0),
    )


@pytest.fixture
def maintainer_comment() -> Comment:
    """Create a comment written by the repository owner."""
    return Comment(
        id=1,
        author=User(login="owner"),
        author_association="OWNER",
        created_at=datetime(2024, 1, 15, 10, 30),
    )


@pytest.fixture
def outsider_comment() -> Comment:
    """Create a comment written by someone with no repository role."""
    return Comment(
        id=2,
        author=User(login="reporter"),
        author_association="NONE",
        created_at=datetime(2024, 1, 16, 8, 0),
    )
