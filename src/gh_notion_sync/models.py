"""
Pydantic models for GitHub issues and Notion database rows.

This module defines the data models used throughout the application,
providing strong typing, validation, and serialization capabilities.
"""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from .exceptions import InvalidRepositoryError


class IssueState(str, Enum):
    """GitHub issue state."""

    OPEN = "open"
    CLOSED = "closed"


class User(BaseModel):
    """GitHub user representation."""

    model_config = ConfigDict(frozen=True)

    login: str


class Label(BaseModel):
    """GitHub issue label."""

    model_config = ConfigDict(frozen=True)

    name: str
    color: str | None = None


class Comment(BaseModel):
    """GitHub issue comment, reduced to what follow-up detection needs."""

    model_config = ConfigDict(frozen=True)

    id: int
    author: User | None = None
    author_association: str = "NONE"
    created_at: datetime | None = None


class GitHubIssue(BaseModel):
    """
    An open GitHub issue as it is written to the Notion database.

    The assignee is kept as an optional login here; the "None" text the
    database shows for unassigned issues is produced only when the row
    properties are built.
    """

    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    state: IssueState
    comment_count: int = Field(default=0, ge=0)
    url: HttpUrl
    labels: list[Label] = Field(default_factory=list)
    assignee: str | None = None
    follow_up: bool
    created_at: datetime

    @property
    def label_names(self) -> list[str]:
        """Get label names, without duplicates, in listing order."""
        return list(dict.fromkeys(label.name for label in self.labels))

    @property
    def assignee_display(self) -> str:
        """Get the assignee login, or the text "None" when unassigned."""
        return self.assignee if self.assignee else "None"


class RowHandle(BaseModel):
    """A Notion database row linked to a GitHub issue number."""

    model_config = ConfigDict(frozen=True)

    row_id: str
    issue_number: int


class PageUpdate(BaseModel):
    """An issue paired with the Notion row it overwrites."""

    model_config = ConfigDict(frozen=True)

    row_id: str
    issue: GitHubIssue


class SyncPlan(BaseModel):
    """Issues split into rows to create and rows to update."""

    model_config = ConfigDict(frozen=True)

    pages_to_create: list[GitHubIssue] = Field(default_factory=list)
    pages_to_update: list[PageUpdate] = Field(default_factory=list)

    @property
    def total(self) -> int:
        """Total number of write operations in the plan."""
        return len(self.pages_to_create) + len(self.pages_to_update)

    def summary(self) -> str:
        """Generate human-readable summary."""
        return (
            f"{len(self.pages_to_create)} to create, "
            f"{len(self.pages_to_update)} to update"
        )


class SyncResult(BaseModel):
    """Result of a sync run."""

    model_config = ConfigDict(frozen=False)

    total_issues: int = 0
    total_rows: int = 0
    created: int = 0
    updated: int = 0
    batches: int = 0
    dry_run: bool = False

    @property
    def has_changes(self) -> bool:
        """Check if any rows were written."""
        return self.created > 0 or self.updated > 0

    def summary(self) -> str:
        """Generate human-readable summary."""
        verb = "Would write" if self.dry_run else "Wrote"
        lines = [
            f"Sync complete: {self.total_issues} GitHub issues, {self.total_rows} Notion rows",
            f"  Created: {self.created}",
            f"  Updated: {self.updated}",
            f"  {verb} {self.batches} batches",
        ]
        return "\n".join(lines)


class SyncConfig(BaseModel):
    """Configuration for sync operations."""

    model_config = ConfigDict(frozen=True)

    repo: str  # Format: owner/repo
    database_id: str
    batch_size: int = Field(default=10, ge=1)
    dry_run: bool = False

    @property
    def owner(self) -> str:
        """Get repository owner."""
        return self._split()[0]

    @property
    def repo_name(self) -> str:
        """Get repository name."""
        return self._split()[1]

    def _split(self) -> tuple[str, str]:
        if self.repo.count("/") != 1:
            raise InvalidRepositoryError(self.repo)
        owner, name = self.repo.split("/")
        if not owner or not name:
            raise InvalidRepositoryError(self.repo)
        return owner, name
