"""Continuation-token listing aggregator."""

from typing import Callable, List, Optional

from storage_deploy.storage.base import ListPage, StorageEntry
from storage_deploy.utils.errors import (
    DeploymentError,
    ErrorContext,
    ListingFailedError,
    TooManyPagesError,
)
from storage_deploy.utils.logging import get_logger
from storage_deploy.utils.retry import RetryStrategy

logger = get_logger(__name__)

# Fetches one page: (prefix, continuation token or None) -> ListPage
PageFetcher = Callable[[str, Optional[str]], ListPage]


class PaginatedLister:
    """Walks a paged listing to completion."""

    def __init__(self, retry_strategy: RetryStrategy, max_pages: Optional[int] = 50):
        """Initialize paginated lister.

        Args:
            retry_strategy: Retry strategy applied to every page fetch
            max_pages: Maximum pages to load before giving up, None for no limit
        """
        if max_pages is not None and max_pages < 1:
            raise ValueError(f"max_pages must be at least 1, got {max_pages}")

        self.retry_strategy = retry_strategy
        self.max_pages = max_pages

    def list_all(self, prefix: str, fetch_page: PageFetcher) -> List[StorageEntry]:
        """Load every page under ``prefix``.

        Entries keep page order and their order within each page.

        Args:
            prefix: Name prefix to list
            fetch_page: Callable fetching a single page

        Returns:
            All entries

        Raises:
            ListingFailedError: If a page could not be fetched within the retry limit
            TooManyPagesError: If more than ``max_pages`` pages are reported
        """
        results: List[StorageEntry] = []
        token: Optional[str] = None
        page_number = 0

        while True:
            page_number += 1
            logger.debug(f"loading page {page_number} of existing files")

            try:
                page = self.retry_strategy.execute_with_retry(fetch_page, prefix, token)
            except Exception as e:
                raise ListingFailedError(
                    f"Failed to load page {page_number} of {prefix or 'the container'}: {e}",
                    context=ErrorContext(
                        object_key=prefix,
                        operation='list_page',
                        error_code=e.context.error_code if isinstance(e, DeploymentError) else None,
                        additional_info={'page': page_number}
                    ),
                    cause=e
                ) from e

            results.extend(page.entries)

            if not page.next_token:
                break

            if self.max_pages is not None and page_number >= self.max_pages:
                raise TooManyPagesError(self.max_pages)

            token = page.next_token

        logger.debug(f"loaded {page_number} pages")

        return results
