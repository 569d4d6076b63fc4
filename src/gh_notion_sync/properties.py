"""
Notion property formatting for GitHub issues.

The database schema is fixed: property names and types here must match
the columns of the target database exactly.
"""

from typing import Any

from .models import GitHubIssue

NAME = "Name"
ISSUE_NUMBER = "Issue Number"
STATE = "State"
NUMBER_OF_COMMENTS = "Number of Comments"
ISSUE_URL = "Issue URL"
LABELS = "Labels"
FOLLOW_UP = "Follow Up"
ASSIGNEE = "Assignee"


def rich_text(content: str) -> list[dict[str, Any]]:
    """Build a single-span rich text value."""
    return [{"type": "text", "text": {"content": content}}]


def issue_to_properties(issue: GitHubIssue) -> dict[str, Any]:
    """
    Convert an issue into Notion page property values.

    Args:
        issue: Issue to convert

    Returns:
        Property values keyed by property name, usable for both page
        creation and page updates
    """
    return {
        NAME: {"title": rich_text(issue.title)},
        ISSUE_NUMBER: {"number": issue.number},
        STATE: {"select": {"name": issue.state.value}},
        NUMBER_OF_COMMENTS: {"number": issue.comment_count},
        ISSUE_URL: {"url": str(issue.url)},
        LABELS: {"multi_select": [{"name": name} for name in issue.label_names]},
        FOLLOW_UP: {"select": {"name": "true" if issue.follow_up else "false"}},
        ASSIGNEE: {"rich_text": rich_text(issue.assignee_display)},
    }
