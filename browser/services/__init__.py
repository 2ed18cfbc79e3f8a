from .filter_state import FilterState
from .folder_navigator import FolderNavigator, clean_path
from .page_cache import UNFETCHED, PageFill, RandomSampleOverlay, SparsePageCache
from .pagination import ELLIPSIS, compute_display_pages, display_current_page
from .view_controller import ViewController

__all__ = [
    "FilterState",
    "FolderNavigator",
    "clean_path",
    "UNFETCHED",
    "PageFill",
    "RandomSampleOverlay",
    "SparsePageCache",
    "ELLIPSIS",
    "compute_display_pages",
    "display_current_page",
    "ViewController",
]
