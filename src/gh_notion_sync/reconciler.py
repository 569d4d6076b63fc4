"""
Reconciliation of GitHub issues against existing Notion rows.

Issues are matched to rows by issue number. An issue with a known row is
updated in place; any other issue gets a new row. Nothing here performs
I/O, so the same inputs always produce the same plan.
"""

import logging
from collections.abc import Iterable, Mapping

from .models import GitHubIssue, PageUpdate, RowHandle, SyncPlan

logger = logging.getLogger(__name__)


def build_identifier_map(handles: Iterable[RowHandle]) -> dict[int, str]:
    """
    Index Notion rows by the issue number they track.

    If the database holds several rows for one issue, the first row
    listed wins and the others are left untouched.

    Args:
        handles: Rows read from the database

    Returns:
        Mapping of issue number to row id
    """
    identifier_map: dict[int, str] = {}
    for handle in handles:
        if handle.issue_number in identifier_map:
            logger.warning(
                f"Issue #{handle.issue_number} has more than one row; "
                f"keeping {identifier_map[handle.issue_number]}, ignoring {handle.row_id}"
            )
            continue
        identifier_map[handle.issue_number] = handle.row_id
    return identifier_map


def plan_operations(
    issues: Iterable[GitHubIssue],
    identifier_map: Mapping[int, str],
) -> SyncPlan:
    """
    Split issues into rows to create and rows to update.

    Args:
        issues: Issues fetched from GitHub
        identifier_map: Issue number to row id, from build_identifier_map

    Returns:
        SyncPlan where every issue appears exactly once, in input order
    """
    pages_to_create: list[GitHubIssue] = []
    pages_to_update: list[PageUpdate] = []

    for issue in issues:
        row_id = identifier_map.get(issue.number)
        if row_id is None:
            pages_to_create.append(issue)
        else:
            pages_to_update.append(PageUpdate(row_id=row_id, issue=issue))

    return SyncPlan(pages_to_create=pages_to_create, pages_to_update=pages_to_update)
