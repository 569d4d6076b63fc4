"""
Batched writes to the Notion database.

Writes within a batch run concurrently; a batch must finish before the
next one starts. This bounds the number of requests in flight against
Notion's rate limits.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from .models import GitHubIssue, PageUpdate
from .notion_client import NotionClient
from .properties import issue_to_properties

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_BATCH_SIZE = 10


def chunk(items: Sequence[T], size: int) -> list[list[T]]:
    """
    Split items into consecutive chunks of at most ``size`` items.

    Raises:
        ValueError: If size is less than 1
    """
    if size < 1:
        raise ValueError(f"Batch size must be at least 1, got {size}")
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


async def run_in_batches(
    items: Sequence[T],
    size: int,
    operation: Callable[[T], Awaitable[object]],
) -> int:
    """
    Apply an async operation to every item, one batch at a time.

    Args:
        items: Items to process
        size: Maximum number of concurrent operations
        operation: Coroutine function applied to each item

    Returns:
        Number of batches run

    Raises:
        The first exception raised by an operation, once every operation
        in its batch has finished. Batches completed before the failure
        stay applied.
    """
    batches = chunk(items, size)
    for batch in batches:
        results = await asyncio.gather(
            *(operation(item) for item in batch),
            return_exceptions=True,
        )
        errors = [r for r in results if isinstance(r, BaseException)]
        if errors:
            for error in errors[1:]:
                logger.error(f"Also failed in this batch: {error}")
            raise errors[0]
        logger.info(f"Completed batch size: {len(batch)}")
    return len(batches)


class BatchWriter:
    """Creates and updates Notion rows for issues in fixed-size batches."""

    def __init__(
        self,
        notion: NotionClient,
        database_id: str,
        batch_size: int = DEFAULT_BATCH_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError(f"Batch size must be at least 1, got {batch_size}")
        self.notion = notion
        self.database_id = database_id
        self.batch_size = batch_size

    async def _create(self, issue: GitHubIssue) -> None:
        await self.notion.create_page(self.database_id, issue_to_properties(issue))

    async def _update(self, update: PageUpdate) -> None:
        await self.notion.update_page(update.row_id, issue_to_properties(update.issue))

    async def create_pages(self, issues: Sequence[GitHubIssue]) -> int:
        """Create a row for each issue. Returns the number of batches run."""
        return await run_in_batches(issues, self.batch_size, self._create)

    async def update_pages(self, updates: Sequence[PageUpdate]) -> int:
        """Overwrite the row of each issue. Returns the number of batches run."""
        return await run_in_batches(updates, self.batch_size, self._update)
