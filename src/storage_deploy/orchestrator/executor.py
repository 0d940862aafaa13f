"""Bounded-concurrency batch executor with per-item failure isolation."""

from typing import Any, Callable, Generic, List, Optional, Sequence, TypeVar
from dataclasses import dataclass
from concurrent.futures import ThreadPoolExecutor, as_completed
from enum import Enum
import time

from storage_deploy.utils.logging import get_logger
from storage_deploy.utils.errors import DeploymentError, ItemFailedError, ErrorContext

logger = get_logger(__name__)

T = TypeVar('T')
R = TypeVar('R')


class ItemStatus(Enum):
    """Outcome of a single batch item."""
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class ItemResult(Generic[T, R]):
    """Result of running the operation on one item."""

    index: int
    item: T
    status: ItemStatus
    value: Optional[R] = None
    error: Optional[DeploymentError] = None
    duration: float = 0.0  # seconds

    def is_success(self) -> bool:
        """Check if the item succeeded."""
        return self.status == ItemStatus.SUCCESS

    def is_failed(self) -> bool:
        """Check if the item failed."""
        return self.status == ItemStatus.FAILED


class BatchResult(List[ItemResult]):
    """Item results in input order."""

    def values(self) -> List[Any]:
        """Success values in input order; failed slots hold None."""
        return [r.value for r in self]

    def successes(self) -> List[ItemResult]:
        return [r for r in self if r.is_success()]

    def failures(self) -> List[ItemResult]:
        return [r for r in self if r.is_failed()]

    def has_failures(self) -> bool:
        return any(r.is_failed() for r in self)


# Called with each item result as soon as it completes
ProgressCallback = Callable[[ItemResult], None]


class BoundedBatchExecutor:
    """Runs an operation over many items with a fixed concurrency ceiling."""

    def __init__(self, concurrency: int = 50):
        """Initialize batch executor.

        Args:
            concurrency: Maximum number of operations in flight at once
        """
        if concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {concurrency}")

        self.concurrency = concurrency
        self.logger = get_logger(__name__)

    def run(
        self,
        items: Sequence[T],
        operation: Callable[[T], R],
        progress_callback: Optional[ProgressCallback] = None
    ) -> BatchResult:
        """Apply ``operation`` to every item.

        The i-th result always belongs to the i-th item, whatever order the
        operations finish in. An exception from one item is captured in its
        result and never stops the other items.

        Args:
            items: Items to process
            operation: Callable applied to each item
            progress_callback: Optional callback for each completed item

        Returns:
            BatchResult with one ItemResult per item
        """
        if not items:
            return BatchResult()

        results: List[Optional[ItemResult]] = [None] * len(items)
        workers = min(self.concurrency, len(items))
        self.logger.debug(f"Running {len(items)} items with {workers} workers")

        with ThreadPoolExecutor(max_workers=workers) as executor:
            future_to_index = {
                executor.submit(self._run_item, index, item, operation): index
                for index, item in enumerate(items)
            }

            for future in as_completed(future_to_index):
                index = future_to_index[future]
                result = future.result()
                results[index] = result

                if progress_callback:
                    progress_callback(result)

        return BatchResult(results)

    def _run_item(self, index: int, item: T, operation: Callable[[T], R]) -> ItemResult:
        """Run one item, capturing any failure into its result.

        Args:
            index: Position of the item in the input
            item: The item
            operation: Callable applied to the item

        Returns:
            ItemResult
        """
        start = time.monotonic()

        try:
            value = operation(item)
            return ItemResult(
                index=index,
                item=item,
                status=ItemStatus.SUCCESS,
                value=value,
                duration=time.monotonic() - start
            )

        except Exception as e:
            error = ItemFailedError(
                message=f"Item {index} failed: {e}",
                context=ErrorContext(
                    object_key=e.context.object_key if isinstance(e, DeploymentError) else None,
                    additional_info={'index': index}
                ),
                cause=e
            )
            self.logger.error(f"Item {index} failed: {e}")

            return ItemResult(
                index=index,
                item=item,
                status=ItemStatus.FAILED,
                error=error,
                duration=time.monotonic() - start
            )
