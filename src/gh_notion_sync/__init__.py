"""
gh-notion-sync: Sync open GitHub issues into a Notion database.

This package keeps one Notion database row per open GitHub issue,
creating rows for new issues and refreshing the fields of rows that
already exist.
"""

__version__ = "1.0.0"
