"""Sparse, page-filled record cache for the table and map views.

After a count query the cache holds one slot per matching record, all of
them ``UNFETCHED``. Pages are filled on demand (plus a small prefetch
window up front) so the page strip is correct long before the data is.
A random sample, when requested, is held separately and overlays the
cache until the user dismisses it.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from folklore.archive_client import ArchiveClient, ArchiveError, AuthExpired
from folklore.config import Settings, get_settings
from folklore.models.fields import FilterCriteria
from folklore.models.schemas import FolkloreRecord
from folklore.utils.logger import get_logger

from browser.services.filter_state import FilterState
from browser.state import PaginationState

logger = get_logger(__name__)


class _Unfetched:
    """Marker for a cache slot whose record has not been fetched yet."""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "UNFETCHED"


UNFETCHED = _Unfetched()


@dataclass(frozen=True)
class PageFill:
    """Outcome of merging one fetched page into the cache."""

    start: int
    expected: int
    received: int

    @property
    def is_short(self) -> bool:
        return self.received < self.expected


class RandomSampleOverlay:
    """Server-drawn random records shown in place of the cache."""

    def __init__(self):
        self.records: List[FolkloreRecord] = []
        self.active = False

    def activate(self, records: Sequence[FolkloreRecord]) -> None:
        self.records = list(records)
        self.active = True

    def clear(self) -> None:
        self.active = False


def _log_fetch_failure(action: str, exc: ArchiveError) -> None:
    if isinstance(exc, AuthExpired):
        logger.warning("%s aborted, session expired: %s", action, exc)
    else:
        logger.error("%s failed: %s", action, exc)


class SparsePageCache:
    """Index-addressable record sequence for the applied filter set."""

    def __init__(
        self,
        client: ArchiveClient,
        settings: Optional[Settings] = None,
        pagination: Optional[PaginationState] = None,
    ):
        self.client = client
        self.settings = settings or get_settings()
        self.pagination = pagination or PaginationState(
            items_per_page=self.settings.items_per_page
        )
        self.records: List[Any] = []
        self.overlay = RandomSampleOverlay()
        self._filters: Optional[FilterCriteria] = None

    # ------------------------------------------------------------------
    # Fetching
    # ------------------------------------------------------------------

    @staticmethod
    def _merge(records: List[Any], start: int, page_size: int, data: Sequence[FolkloreRecord]) -> PageFill:
        expected = max(0, min(page_size, len(records) - start))
        received = 0
        for offset, record in enumerate(data[:expected]):
            index = start + offset
            if records[index] is UNFETCHED:
                records[index] = record
            received += 1
        return PageFill(start=start, expected=expected, received=received)

    def fetch_initial(self, filter_state: FilterState) -> bool:
        """
        Rebuild the cache for the current filters.

        Counts the matches, allocates that many empty slots and fills the
        prefetch window. Nothing is replaced unless every request succeeds.

        Returns:
            True when the cache was rebuilt
        """
        filters = filter_state.snapshot()
        page_size = self.settings.prefetch_page_size
        try:
            total = self.client.count(filters)
            records: List[Any] = [UNFETCHED] * total
            for page in range(self.settings.prefetch_pages):
                start = page * page_size
                if start >= total:
                    break
                data = self.client.paginated(page + 1, page_size, filters)
                fill = self._merge(records, start, page_size, data)
                if fill.is_short:
                    logger.warning(
                        "Prefetch page %d returned %d of %d records",
                        page + 1, fill.received, fill.expected,
                    )
        except ArchiveError as exc:
            _log_fetch_failure("Initial fetch", exc)
            return False

        self.records = records
        self._filters = filters
        self.pagination.current_page = 0
        filter_state.mark_applied(filters)
        logger.info("Cache rebuilt: %d records", total)
        return True

    def page_bounds(self, page_index: int) -> tuple:
        size = self.pagination.items_per_page
        start = page_index * size
        return start, min(start + size, len(self.records))

    def is_page_loaded(self, page_index: int) -> bool:
        """True when every slot of the page holds a record.

        A short final page is judged against its real length, so only a
        page the provider under-delivered counts as not loaded.
        """
        start, end = self.page_bounds(page_index)
        return all(self.records[i] is not UNFETCHED for i in range(start, end))

    def go_to_page(self, page_index: int) -> bool:
        """
        Move to a zero-based page, fetching it if any of its slots are empty.

        Returns:
            False if a needed fetch failed (the cursor still moves)
        """
        if page_index < 0 or (page_index > 0 and page_index >= self.total_pages()):
            raise ValueError(f"Page {page_index} out of range (0..{self.total_pages() - 1})")
        self.pagination.current_page = page_index
        if self.overlay.active or self.is_page_loaded(page_index):
            return True

        size = self.pagination.items_per_page
        try:
            data = self.client.paginated(page_index + 1, size, self._filters or {})
        except ArchiveError as exc:
            _log_fetch_failure(f"Fetch of page {page_index + 1}", exc)
            return False

        fill = self._merge(self.records, page_index * size, size, data)
        if fill.is_short:
            logger.warning(
                "Page %d returned %d of %d records; it will be refetched on the next visit",
                page_index + 1, fill.received, fill.expected,
            )
        return True

    def fetch_random_sample(
        self,
        filters: Optional[FilterCriteria] = None,
        folder_path: Optional[Sequence[str]] = None,
    ) -> bool:
        """
        Replace the overlay with a random sample and show it.

        Exactly one scope is used: ``folder_path`` when given, else ``filters``.
        An empty sample leaves the display unchanged.
        """
        try:
            if folder_path is not None:
                sample = self.client.random_in_folder(folder_path)
            else:
                sample = self.client.random(filters or {})
        except ArchiveError as exc:
            _log_fetch_failure("Random sample", exc)
            return False

        if not sample:
            logger.info("Random sample came back empty")
            return False
        self.overlay.activate(sample)
        self.pagination.current_page = 0
        return True

    def undo_random(self) -> None:
        self.overlay.clear()
        last = max(0, self.total_pages() - 1)
        self.pagination.current_page = min(self.pagination.current_page, last)

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def set_items_per_page(self, items_per_page: int) -> None:
        if items_per_page <= 0:
            raise ValueError("items_per_page must be positive")
        self.pagination.items_per_page = items_per_page
        self.pagination.current_page = 0

    def set_max_items(self, max_items: Optional[int]) -> None:
        if max_items is not None and max_items < 0:
            raise ValueError("max_items must be non-negative")
        self.pagination.max_items = max_items
        self.pagination.current_page = 0

    def reset_pagination(self) -> None:
        self.pagination.items_per_page = self.settings.items_per_page
        self.pagination.current_page = 0
        self.pagination.max_items = None

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def active_records(self) -> List[Any]:
        return self.overlay.records if self.overlay.active else self.records

    def _visible_length(self) -> int:
        length = len(self.active_records())
        if self.pagination.max_items is not None:
            length = min(length, self.pagination.max_items)
        return length

    def paginated_slice(self) -> List[Any]:
        """Records on the current page; unfetched slots appear as ``UNFETCHED``."""
        start = self.pagination.current_page * self.pagination.items_per_page
        end = min(start + self.pagination.items_per_page, self._visible_length())
        return self.active_records()[start:end]

    def total_pages(self) -> int:
        return math.ceil(self._visible_length() / self.pagination.items_per_page)

    def __len__(self) -> int:
        return len(self.records)
