"""Tests for Pydantic models."""

import pytest
from pydantic import ValidationError

from gh_notion_sync.exceptions import InvalidRepositoryError
from gh_notion_sync.models import (
    GitHubIssue,
    IssueState,
    Label,
    SyncConfig,
    SyncPlan,
    SyncResult,
)


class TestGitHubIssue:
    """Tests for GitHubIssue model."""

    def test_create_issue(self, sample_issue: GitHubIssue) -> None:
        assert sample_issue.number == 123
        assert sample_issue.title == "Test Issue Title"
        assert sample_issue.state == IssueState.OPEN
        assert sample_issue.follow_up is False

    def test_label_names(self, sample_issue: GitHubIssue) -> None:
        assert sample_issue.label_names == ["bug", "enhancement"]

    def test_label_names_deduplicated(self, make_issue) -> None:
        issue = make_issue(1, labels=[Label(name="bug"), Label(name="ui"), Label(name="bug")])
        assert issue.label_names == ["bug", "ui"]

    def test_assignee_display(self, sample_issue: GitHubIssue, make_issue) -> None:
        assert sample_issue.assignee_display == "testuser"
        assert make_issue(1).assignee is None
        assert make_issue(1).assignee_display == "None"

    def test_negative_comment_count_rejected(self, make_issue) -> None:
        with pytest.raises(ValidationError):
            make_issue(1, comment_count=-1)

    def test_follow_up_is_required(self) -> None:
        with pytest.raises(ValidationError):
            GitHubIssue(
                number=1,
                title="No classification",
                state=IssueState.OPEN,
                url="https://github.com/owner/repo/issues/1",
                created_at="2024-01-10T09:00:00Z",
            )

    def test_issue_is_frozen(self, sample_issue: GitHubIssue) -> None:
        with pytest.raises(ValidationError):
            sample_issue.title = "changed"  # type: ignore[misc]


class TestSyncPlan:
    """Tests for SyncPlan model."""

    def test_total_and_summary(self, make_issue) -> None:
        plan = SyncPlan(pages_to_create=[make_issue(1), make_issue(2)])
        assert plan.total == 2
        assert plan.summary() == "2 to create, 0 to update"


class TestSyncResult:
    """Tests for SyncResult model."""

    def test_has_changes(self) -> None:
        result = SyncResult()
        assert result.has_changes is False

        result.updated = 1
        assert result.has_changes is True

    def test_summary(self) -> None:
        result = SyncResult(total_issues=5, total_rows=3, created=2, updated=3, batches=2)

        summary = result.summary()
        assert "5 GitHub issues" in summary
        assert "3 Notion rows" in summary
        assert "Created: 2" in summary
        assert "Updated: 3" in summary
        assert "Wrote 2 batches" in summary

    def test_dry_run_summary(self) -> None:
        assert "Would write" in SyncResult(dry_run=True).summary()


class TestSyncConfig:
    """Tests for SyncConfig model."""

    def test_owner_and_repo_name(self) -> None:
        config = SyncConfig(repo="octocat/Hello-World", database_id="db")
        assert config.owner == "octocat"
        assert config.repo_name == "Hello-World"
        assert config.batch_size == 10

    @pytest.mark.parametrize("repo", ["noslash", "a/b/c", "/repo", "owner/"])
    def test_invalid_repo(self, repo: str) -> None:
        config = SyncConfig(repo=repo, database_id="db")
        with pytest.raises(InvalidRepositoryError):
            _ = config.owner

    def test_batch_size_must_be_positive(self) -> None:
        with pytest.raises(ValidationError):
            SyncConfig(repo="a/b", database_id="db", batch_size=0)
