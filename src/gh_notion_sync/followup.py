"""
Follow-up detection for GitHub issues.

An issue needs follow-up when nobody has commented yet, or when the most
recent comment did not come from a repository maintainer.
"""

from .models import Comment

MAINTAINER_ASSOCIATIONS = frozenset({"COLLABORATOR", "OWNER", "MEMBER"})


def is_maintainer(association: str | None) -> bool:
    """Check whether a GitHub author association belongs to a maintainer."""
    return (association or "").upper() in MAINTAINER_ASSOCIATIONS


def needs_follow_up(latest_comment: Comment | None) -> bool:
    """
    Decide whether an issue is waiting on a maintainer.

    Args:
        latest_comment: The newest comment on the issue, or None if the
            issue has no comments

    Returns:
        True unless a maintainer wrote the newest comment
    """
    if latest_comment is None:
        return True
    return not is_maintainer(latest_comment.author_association)
