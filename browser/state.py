"""Browser state containers.

Plain dataclasses read by the rendering layer and mutated only by the
browser services.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple


class ViewMode(str, Enum):
    TABLE = "table"
    INDEX = "index"
    MAP = "map"


@dataclass
class PaginationState:
    """Zero-based page cursor over the active record sequence.

    ``max_items`` optionally caps how many records the user wants to page
    through; None means the whole sequence.
    """

    items_per_page: int = 20
    current_page: int = 0
    max_items: Optional[int] = None


@dataclass
class TimeState:
    """Year slider for the map view."""

    start_year: int = 1960
    end_year: int = 1960
    time_window: int = 500
    current_year: int = 1960

    def set_current_year(self, year: int) -> int:
        self.current_year = max(self.start_year, min(self.end_year, year))
        return self.current_year

    @property
    def visible_range(self) -> Tuple[int, int]:
        """Years shown around the current year, clipped to the slider bounds."""
        half = self.time_window // 2
        return (
            max(self.start_year, self.current_year - half),
            min(self.end_year, self.current_year + half),
        )


@dataclass
class BrowserState:
    """Holds ephemeral UI state shared by the controller and the renderer."""

    view_mode: ViewMode = ViewMode.TABLE
    is_loading: bool = False
    # Toggled to make the map re-query; the value itself carries no meaning
    flip_to_reload_map: bool = False
    time: TimeState = field(default_factory=TimeState)
