"""
Exception hierarchy for gh-notion-sync.

This module defines custom exceptions with clear messages and
actionable guidance for users.
"""


class GitHubNotionSyncError(Exception):
    """Base exception for all gh-notion-sync errors."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\n\nHint: {self.hint}"
        return self.message


# GitHub API Errors


class GitHubClientError(GitHubNotionSyncError):
    """Base class for GitHub API related errors."""


class GitHubAuthError(GitHubClientError):
    """GitHub authentication failed or not configured."""

    def __init__(self, details: str = "") -> None:
        message = "GitHub authentication failed"
        if details:
            message = f"{message}: {details}"
        super().__init__(
            message,
            "Check that GITHUB_KEY holds a valid token with read access to the repository",
        )


class GitHubAPIError(GitHubClientError):
    """GitHub API returned an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        status_info = f" (HTTP {status_code})" if status_code else ""
        super().__init__(
            f"GitHub API error{status_info}: {message}",
            "Check that the repository exists and you have access to it",
        )


class GitHubNetworkError(GitHubClientError):
    """Network error communicating with GitHub."""

    def __init__(self, details: str = "") -> None:
        message = "Network error connecting to GitHub"
        if details:
            message = f"{message}: {details}"
        super().__init__(
            message,
            "Check your internet connection and try again",
        )


class GitHubRateLimitError(GitHubClientError):
    """GitHub API rate limit exceeded."""

    def __init__(self, reset_time: str | None = None) -> None:
        message = "GitHub API rate limit exceeded"
        hint = "Wait a few minutes and try again"
        if reset_time:
            hint = f"Rate limit resets at {reset_time}. Wait and try again."
        super().__init__(message, hint)


class GitHubTimeoutError(GitHubClientError):
    """GitHub API request timed out."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            f"GitHub API request timed out after {timeout_seconds} seconds",
            "Raise --timeout or check your network",
        )


# Notion API Errors


class NotionClientError(GitHubNotionSyncError):
    """Base class for Notion API related errors."""


class NotionAuthError(NotionClientError):
    """Notion rejected the integration token."""

    def __init__(self, details: str = "") -> None:
        message = "Notion authentication failed"
        if details:
            message = f"{message}: {details}"
        super().__init__(
            message,
            "Check NOTION_KEY and that the database is shared with the integration",
        )


class NotionAPIError(NotionClientError):
    """Notion API returned an error."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        code: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.code = code
        status_info = f" (HTTP {status_code})" if status_code else ""
        code_info = f" [{code}]" if code else ""
        super().__init__(
            f"Notion API error{status_info}{code_info}: {message}",
            "Check that the database exists and matches the expected schema",
        )


class NotionNetworkError(NotionClientError):
    """Network error communicating with Notion."""

    def __init__(self, details: str = "") -> None:
        message = "Network error connecting to Notion"
        if details:
            message = f"{message}: {details}"
        super().__init__(
            message,
            "Check your internet connection and try again",
        )


class NotionRateLimitError(NotionClientError):
    """Notion API rate limit exceeded."""

    def __init__(self, retry_after: str | None = None) -> None:
        message = "Notion API rate limit exceeded"
        hint = "Lower --batch-size or wait a moment and try again"
        if retry_after:
            hint = f"Retry after {retry_after} seconds, or lower --batch-size"
        super().__init__(message, hint)


class NotionTimeoutError(NotionClientError):
    """Notion API request timed out."""

    def __init__(self, timeout_seconds: float) -> None:
        super().__init__(
            f"Notion API request timed out after {timeout_seconds} seconds",
            "Raise --timeout or check your network",
        )


class NotionSchemaError(NotionClientError):
    """A database row lacks a property the sync relies on."""

    def __init__(self, page_id: str, property_name: str) -> None:
        super().__init__(
            f"Page '{page_id}' has no '{property_name}' property",
            f"Add a '{property_name}' number property to the database",
        )


# Configuration Errors


class ConfigError(GitHubNotionSyncError):
    """Configuration error."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message, hint)


class InvalidRepositoryError(ConfigError):
    """Invalid repository format."""

    def __init__(self, repo: str) -> None:
        super().__init__(
            f"Invalid repository format: '{repo}'",
            "Use format 'owner/repo', e.g., 'octocat/Hello-World'",
        )
