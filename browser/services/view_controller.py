"""Mode state machine and user-action handlers.

The controller owns the filter state, the sparse page cache (table and
map modes) and the folder navigator (index mode), and decides which of
them a user action touches.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Union

from folklore.archive_client import ArchiveClient, ArchiveError
from folklore.config import Settings, get_settings
from folklore.models.fields import FilterCriteria, field_to_path
from folklore.models.schemas import FolkloreRecord
from folklore.utils.logger import get_logger

from browser.services.filter_state import FilterState
from browser.services.folder_navigator import FolderNavigator
from browser.services.page_cache import SparsePageCache
from browser.services.pagination import PageEntry, compute_display_pages, display_current_page
from browser.state import BrowserState, TimeState, ViewMode
from browser.utils.async_tasks import run_with_loading

logger = get_logger(__name__)


class ViewController:
    """Drives the table / index / map views over one data provider."""

    def __init__(
        self,
        client: ArchiveClient,
        settings: Optional[Settings] = None,
        filter_state: Optional[FilterState] = None,
        state: Optional[BrowserState] = None,
    ):
        self.client = client
        self.settings = settings or get_settings()
        self.filters = filter_state or FilterState()
        self.state = state or BrowserState(
            time=TimeState(
                start_year=self.settings.map_start_year,
                end_year=self.settings.map_end_year,
                time_window=self.settings.map_time_window,
                current_year=self.settings.map_start_year,
            )
        )
        self.cache = SparsePageCache(client, self.settings)
        self.navigator = FolderNavigator(client)
        self.unique_options: Dict[str, List[str]] = {}
        self.index_applied: Optional[FilterCriteria] = None

    @property
    def mode(self) -> ViewMode:
        return self.state.view_mode

    # ------------------------------------------------------------------
    # Mode transitions
    # ------------------------------------------------------------------

    def switch_to(self, mode: Union[ViewMode, str]) -> bool:
        """Enter ``mode`` and run its entry action. Safe to repeat."""
        mode = ViewMode(mode)
        self.state.view_mode = mode
        logger.info("Switched to %s view", mode.value)

        if mode is ViewMode.TABLE:
            return self.cache.fetch_initial(self.filters)
        if mode is ViewMode.INDEX:
            self.index_applied = self.filters.snapshot()
            return self.navigator.load_root()
        self.filters.mark_applied()
        self._reload_map()
        return True

    def _reload_map(self) -> None:
        self.state.flip_to_reload_map = not self.state.flip_to_reload_map

    # ------------------------------------------------------------------
    # Filters
    # ------------------------------------------------------------------

    def _apply_filters(self) -> bool:
        if self.mode is ViewMode.INDEX:
            if not self.filters.has_changed(self.index_applied):
                logger.debug("Filters unchanged since last index load")
                return False
            self.index_applied = self.filters.snapshot()
            return self.navigator.load_root()

        if not self.filters.has_changed():
            logger.debug("Filters unchanged since last apply")
            return False
        if self.mode is ViewMode.TABLE:
            return self.cache.fetch_initial(self.filters)
        self.filters.mark_applied()
        self._reload_map()
        return True

    def apply_filters(self) -> bool:
        """Refetch for the current filters if they differ from the applied ones."""
        return bool(run_with_loading(self.state, self._apply_filters))

    def clear_filters(self) -> None:
        self.filters.clear()

    def populate_unique_options(self) -> bool:
        """Load the selectable values of every discrete filter, once."""
        if self.unique_options:
            return True
        try:
            self.unique_options = self.client.filter_options(field_to_path(self.filters.fields))
        except ArchiveError as exc:
            logger.error("Filter options failed: %s", exc)
            return False
        return True

    # ------------------------------------------------------------------
    # Random sample
    # ------------------------------------------------------------------

    def _fetch_random(self) -> bool:
        if self.mode is ViewMode.INDEX:
            return self.cache.fetch_random_sample(folder_path=self.navigator.cleaned_path)
        return self.cache.fetch_random_sample(filters=self.filters.snapshot())

    def fetch_random(self) -> bool:
        return bool(run_with_loading(self.state, self._fetch_random))

    def undo_random(self) -> None:
        self.cache.undo_random()

    @property
    def is_random(self) -> bool:
        return self.cache.overlay.active

    # ------------------------------------------------------------------
    # Pagination
    # ------------------------------------------------------------------

    def go_to_page(self, page_index: int) -> bool:
        return bool(run_with_loading(self.state, self.cache.go_to_page, page_index))

    def go_to_page_index(self, page: PageEntry) -> bool:
        """Handle a click on the page strip (1-based; ellipsis markers are ignored)."""
        if isinstance(page, bool) or not isinstance(page, int):
            return False
        return self.go_to_page(page - 1)

    def reset_user_pagination(self) -> None:
        self.cache.reset_pagination()

    def total_pages(self) -> int:
        return self.cache.total_pages()

    def display_pages(self) -> List[PageEntry]:
        return compute_display_pages(display_current_page(self.cache.pagination), self.total_pages())

    # ------------------------------------------------------------------
    # Index
    # ------------------------------------------------------------------

    def select_segment(self, depth: int, name: str) -> bool:
        """Pick a folder at ``depth`` and load the records it holds."""
        if not run_with_loading(self.state, self.navigator.select_segment, depth, name):
            return False
        if self.navigator.cleaned_path:
            return self.navigator.fetch_leaf_records()
        self.navigator.leaf_records = []
        return True

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch_map_data(self) -> List[FolkloreRecord]:
        """Every record matching the applied filters, for the map to plot."""
        filters = self.filters.last_applied
        if filters is None:
            filters = self.filters.snapshot()
        try:
            return self.client.all_records(filters)
        except ArchiveError as exc:
            logger.error("Map data failed: %s", exc)
            return []

    def current_records(self) -> List[Any]:
        """What the active view shows right now."""
        if self.mode is ViewMode.INDEX and not self.is_random:
            return list(self.navigator.leaf_records)
        return self.cache.paginated_slice()
