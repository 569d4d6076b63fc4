"""
Main sync orchestrator.

This module coordinates the sync process:
1. Read existing rows from the Notion database
2. Fetch open issues from GitHub
3. Plan which rows to create and which to update
4. Write the changes in batches
"""

import asyncio
import logging

from .batch import BatchWriter, chunk
from .github_client import GitHubClient
from .models import SyncConfig, SyncPlan, SyncResult
from .notion_client import NotionClient
from .reconciler import build_identifier_map, plan_operations

logger = logging.getLogger(__name__)


class IssueSync:
    """
    Orchestrates the sync between a GitHub repository and a Notion database.

    This is the main entry point for sync operations, coordinating
    the two API clients, the reconciler, and the batch writer. Any
    client error aborts the run; rows written by earlier batches stay
    in place and are refreshed by the next run.
    """

    def __init__(self, github: GitHubClient, notion: NotionClient) -> None:
        """
        Initialize the sync orchestrator.

        Args:
            github: Client used to read issues
            notion: Client used to read and write database rows
        """
        self.github = github
        self.notion = notion

    async def close(self) -> None:
        """Close both API clients."""
        await self.github.close()
        await self.notion.close()

    async def plan(self, config: SyncConfig) -> tuple[SyncPlan, int]:
        """
        Read both sides and work out the writes needed.

        Args:
            config: Sync configuration

        Returns:
            Tuple of (plan, number of rows found in the database)
        """
        # Validates the repository before any request is made
        owner, repo_name = config.owner, config.repo_name

        logger.info(f"Reading rows from Notion database {config.database_id}...")
        handles = await self.notion.fetch_row_handles(config.database_id)
        identifier_map = build_identifier_map(handles)

        logger.info("Fetching issues from GitHub repository...")
        issues = await self.github.fetch_open_issues(owner, repo_name)
        logger.info(f"Fetched {len(issues)} issues from GitHub repository.")

        return plan_operations(issues, identifier_map), len(handles)

    async def sync(self, config: SyncConfig) -> SyncResult:
        """
        Sync open GitHub issues into the Notion database.

        Args:
            config: Sync configuration

        Returns:
            SyncResult with statistics about the sync

        Raises:
            InvalidRepositoryError: If the repository format is invalid
            GitHubClientError: If the GitHub API fails
            NotionClientError: If the Notion API fails
        """
        logger.info(f"Starting sync: {config.repo} -> {config.database_id}")

        plan, total_rows = await self.plan(config)
        result = SyncResult(
            total_issues=plan.total,
            total_rows=total_rows,
            dry_run=config.dry_run,
        )

        logger.info(f"{len(plan.pages_to_create)} new issues to add to Notion.")
        logger.info(f"{len(plan.pages_to_update)} issues to update in Notion.")

        if config.dry_run:
            logger.info("Dry run - not writing changes")
            result.created = len(plan.pages_to_create)
            result.updated = len(plan.pages_to_update)
            result.batches = len(chunk(plan.pages_to_create, config.batch_size)) + len(
                chunk(plan.pages_to_update, config.batch_size)
            )
            return result

        writer = BatchWriter(self.notion, config.database_id, config.batch_size)

        result.batches += await writer.create_pages(plan.pages_to_create)
        result.created = len(plan.pages_to_create)

        result.batches += await writer.update_pages(plan.pages_to_update)
        result.updated = len(plan.pages_to_update)

        logger.info("Notion database is synced with GitHub.")
        return result


async def _run(
    config: SyncConfig,
    github_token: str,
    notion_token: str,
    timeout: float,
) -> SyncResult:
    syncer = IssueSync(
        GitHubClient(github_token, timeout=timeout),
        NotionClient(notion_token, timeout=timeout),
    )
    try:
        return await syncer.sync(config)
    finally:
        await syncer.close()


def run_sync(
    config: SyncConfig,
    github_token: str,
    notion_token: str,
    timeout: float = 30,
) -> SyncResult:
    """
    Synchronous wrapper for IssueSync.sync().

    This is a convenience function for running sync from non-async code.

    Args:
        config: Sync configuration
        github_token: GitHub API token
        notion_token: Notion integration token
        timeout: HTTP timeout in seconds for both APIs

    Returns:
        SyncResult with sync statistics
    """
    return asyncio.run(_run(config, github_token, notion_token, timeout))
