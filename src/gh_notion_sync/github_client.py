"""
GitHub REST API client for fetching issues.

This module handles all interactions with the GitHub REST API,
including paginated issue listing, latest-comment lookup for
follow-up detection, and translating HTTP failures into our
exception hierarchy.
"""

import logging
from collections.abc import AsyncIterator
from datetime import UTC, datetime
from typing import Any

import httpx

from .exceptions import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubNetworkError,
    GitHubRateLimitError,
    GitHubTimeoutError,
)
from .followup import needs_follow_up
from .models import Comment, GitHubIssue, IssueState, Label, User

logger = logging.getLogger(__name__)


class GitHubClient:
    """
    Client for interacting with GitHub via its REST API.

    This client provides async methods for fetching open issues and
    their newest comment, with error handling and timeout management.
    Nothing is retried: the first failure propagates to the caller.
    """

    DEFAULT_BASE_URL = "https://api.github.com"
    DEFAULT_TIMEOUT = 30  # seconds
    PAGE_SIZE = 100

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the GitHub client.

        Args:
            token: Personal access token or app token
            base_url: API base URL (override for GitHub Enterprise)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        self.base_url = base_url.rstrip("/")
        self.token = token
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/vnd.github+json",
                    "X-GitHub-Api-Version": "2022-11-28",
                },
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _request(
        self,
        method: str,
        url: str,
        params: dict[str, Any] | None = None,
    ) -> httpx.Response:
        """
        Make an API request with error handling.

        Args:
            method: HTTP method
            url: API path, or an absolute URL taken from a Link header
            params: Query parameters

        Returns:
            The successful response

        Raises:
            Various GitHubClientError subclasses based on failure type
        """
        client = await self._get_client()
        logger.debug(f"{method} {url} {params or ''}")

        try:
            response = await client.request(method, url, params=params)
        except httpx.TimeoutException as e:
            raise GitHubTimeoutError(self.timeout) from e
        except httpx.TransportError as e:
            raise GitHubNetworkError(str(e)) from e

        if response.status_code == 401:
            raise GitHubAuthError("Invalid or expired token")

        if response.status_code in (403, 429):
            if (
                response.status_code == 429
                or response.headers.get("x-ratelimit-remaining") == "0"
                or "rate limit" in response.text.lower()
            ):
                raise GitHubRateLimitError(self._reset_time(response))
            raise GitHubAuthError(f"Access forbidden: {response.text}")

        if response.status_code == 404:
            raise GitHubAPIError(f"Not found: {url}", 404)

        if response.status_code >= 400:
            raise GitHubAPIError(response.text, response.status_code)

        return response

    def _reset_time(self, response: httpx.Response) -> str | None:
        """Format the rate-limit reset header as an ISO timestamp."""
        reset = response.headers.get("x-ratelimit-reset")
        if not reset:
            return None
        try:
            return datetime.fromtimestamp(int(reset), UTC).isoformat()
        except ValueError:
            return None

    async def _paginate(
        self,
        path: str,
        params: dict[str, Any],
    ) -> AsyncIterator[list[dict[str, Any]]]:
        """Yield each page of a list endpoint, following Link rel="next"."""
        url: str | None = path
        page_params: dict[str, Any] | None = params

        while url is not None:
            response = await self._request("GET", url, params=page_params)
            data = response.json()
            if not isinstance(data, list):
                raise GitHubAPIError(f"Expected a list from {path}")
            yield data

            url = response.links.get("next", {}).get("url")
            # The next link already carries the query string
            page_params = None

    async def check_connection(self) -> bool:
        """
        Check that the token is accepted.

        Returns:
            True if connection is successful

        Raises:
            GitHubAuthError: If authentication fails
            GitHubNetworkError: If connection fails
        """
        response = await self._request("GET", "/user")
        logger.debug(f"Authenticated to GitHub as {response.json().get('login')}")
        return True

    def _parse_datetime(self, value: str | None) -> datetime | None:
        """Parse ISO datetime string from the GitHub API."""
        if not value:
            return None
        try:
            if value.endswith("Z"):
                value = value[:-1] + "+00:00"
            return datetime.fromisoformat(value)
        except (ValueError, TypeError):
            logger.warning(f"Failed to parse datetime: {value}")
            return None

    def _parse_comment(self, data: dict[str, Any]) -> Comment:
        """Parse comment data from a GitHub API response."""
        user = data.get("user")
        return Comment(
            id=data.get("id", 0),
            author=User(login=user.get("login", "unknown")) if user else None,
            author_association=data.get("author_association") or "NONE",
            created_at=self._parse_datetime(data.get("created_at")),
        )

    def _parse_issue(self, data: dict[str, Any], follow_up: bool) -> GitHubIssue:
        """Parse issue JSON from the GitHub API into a GitHubIssue model."""
        labels = [
            Label(name=lbl.get("name", ""), color=lbl.get("color"))
            for lbl in data.get("labels") or []
            if isinstance(lbl, dict)
        ]
        assignee = data.get("assignee")

        state_str = (data.get("state") or "open").lower()
        state = IssueState.CLOSED if state_str == "closed" else IssueState.OPEN

        return GitHubIssue(
            number=data["number"],
            title=data["title"],
            state=state,
            comment_count=data.get("comments", 0),
            url=data["html_url"],
            labels=labels,
            assignee=assignee.get("login") if assignee else None,
            follow_up=follow_up,
            created_at=self._parse_datetime(data["created_at"]),
        )

    async def fetch_latest_comment(
        self,
        owner: str,
        repo: str,
        issue_number: int,
        comment_count: int,
    ) -> Comment | None:
        """
        Fetch only the newest comment on an issue.

        The per-issue comments endpoint always lists oldest first, so with
        one comment per page the newest comment sits on the last page.

        Args:
            owner: Repository owner
            repo: Repository name
            issue_number: Issue number
            comment_count: Number of comments reported by the issue listing

        Returns:
            The newest Comment, or None if the issue has no comments
        """
        path = f"/repos/{owner}/{repo}/issues/{issue_number}/comments"
        response = await self._request(
            "GET",
            path,
            params={"per_page": 1, "page": comment_count},
        )
        data = response.json()
        if not isinstance(data, list) or not data:
            return None
        return self._parse_comment(data[0])

    async def fetch_open_issues(self, owner: str, repo: str) -> list[GitHubIssue]:
        """
        Fetch all open issues of a repository, excluding pull requests.

        Each issue carries its follow-up flag, derived from the newest
        comment on the issue.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            List of GitHubIssue objects in listing order
        """
        logger.info(f"Fetching open issues from {owner}/{repo}")

        issues: list[GitHubIssue] = []
        skipped_pulls = 0
        params = {"state": "open", "per_page": self.PAGE_SIZE}

        async for page in self._paginate(f"/repos/{owner}/{repo}/issues", params):
            for issue_data in page:
                if "pull_request" in issue_data:
                    skipped_pulls += 1
                    continue

                latest: Comment | None = None
                comment_count = issue_data.get("comments", 0)
                if comment_count > 0:
                    latest = await self.fetch_latest_comment(
                        owner, repo, issue_data["number"], comment_count
                    )

                issues.append(self._parse_issue(issue_data, needs_follow_up(latest)))

        logger.debug(f"Skipped {skipped_pulls} pull requests")
        return issues

    async def list_collaborators(self, owner: str, repo: str) -> list[User]:
        """
        List the collaborators of a repository.

        Args:
            owner: Repository owner
            repo: Repository name

        Returns:
            List of User objects
        """
        users: list[User] = []
        params = {"per_page": self.PAGE_SIZE}
        async for page in self._paginate(f"/repos/{owner}/{repo}/collaborators", params):
            users.extend(User(login=u.get("login", "unknown")) for u in page)
        return users
