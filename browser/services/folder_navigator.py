"""Drill-down through the archive's hierarchical folder index.

``path`` holds the chosen folder name per depth and ends in a blank slot
for the level the user has not picked yet. ``listings`` holds, per depth,
the names that can be picked there, so both lists always have the same
length. A folder whose listing is empty (or a lone blank) is a leaf and
gets no blank slot after it.
"""

from __future__ import annotations

from typing import List, Optional

from folklore.archive_client import ArchiveClient, ArchiveError
from folklore.models.schemas import FolkloreRecord
from folklore.utils.logger import get_logger

logger = get_logger(__name__)


def clean_path(path: List[str]) -> List[str]:
    """The resolved prefix of ``path``: everything before the first blank."""
    cleaned: List[str] = []
    for segment in path:
        if not segment:
            break
        cleaned.append(segment)
    return cleaned


def _is_leaf_listing(names: List[str]) -> bool:
    return not names or (len(names) == 1 and not names[0])


class FolderNavigator:
    def __init__(self, client: ArchiveClient):
        self.client = client
        self.path: List[str] = [""]
        self.listings: List[List[str]] = [[]]
        self.leaf_records: List[FolkloreRecord] = []

    @property
    def cleaned_path(self) -> List[str]:
        # Recomputed on every read; truncation at any depth can change it
        return clean_path(self.path)

    def reset(self) -> None:
        self.path = [""]
        self.listings = [[]]
        self.leaf_records = []

    def load_root(self) -> bool:
        """Reset to the top of the index and list its folders."""
        try:
            names = self.client.folder_contents([], return_records=False)
        except ArchiveError as exc:
            logger.error("Root folder listing failed: %s", exc)
            return False
        self.path = [""]
        self.listings = [names]
        self.leaf_records = []
        return True

    def select_segment(self, depth: int, name: str) -> bool:
        """
        Choose ``name`` at ``depth``, dropping every deeper choice.

        If the chosen folder has sub-folders, their names become the next
        level and a new blank slot is appended.

        Returns:
            True when the path changed (a failed listing changes nothing)
        """
        if depth < 0 or depth >= len(self.path):
            raise ValueError(f"Depth {depth} outside current path of length {len(self.path)}")

        path = self.path[: depth + 1]
        listings = self.listings[: depth + 1]
        path[depth] = name

        if name:
            try:
                children = self.client.folder_contents(clean_path(path), return_records=False)
            except ArchiveError as exc:
                logger.error("Listing of %s failed: %s", "/".join(clean_path(path)), exc)
                return False
            if not _is_leaf_listing(children):
                listings.append(children)
                path.append("")

        self.path = path
        self.listings = listings
        return True

    def fetch_leaf_records(self, cleaned_path: Optional[List[str]] = None) -> bool:
        """Load the records stored directly in ``cleaned_path`` (default: the resolved folder)."""
        cleaned = self.cleaned_path if cleaned_path is None else cleaned_path
        try:
            records = self.client.folder_contents(cleaned, return_records=True)
        except ArchiveError as exc:
            logger.error("Records of %s failed: %s", "/".join(cleaned), exc)
            return False
        self.leaf_records = records
        return True
