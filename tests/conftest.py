import os
import sys
from unittest.mock import Mock

import pytest

# Ensure project root is on path
ROOT = os.path.dirname(os.path.dirname(__file__))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

from folklore.archive_client import ArchiveClient
from folklore.config import Settings
from folklore.models.schemas import FolkloreRecord


FOLDER_TREE = {
    (): ["California", "Oregon"],
    ("California",): ["Spanish", "English"],
    ("California", "Spanish"): ["Madrid", "Sevilla"],
    ("California", "Spanish", "Madrid"): [""],
    ("California", "English"): [],
}


def make_records(n, prefix="r"):
    return [FolkloreRecord(id=f"{prefix}{i}") for i in range(n)]


def make_client(total=250, records=None):
    """Mock archive client serving ``total`` records and FOLDER_TREE."""
    records = records if records is not None else make_records(total)
    client = Mock(spec=ArchiveClient)
    client.count.side_effect = lambda filters: len(records)
    client.paginated.side_effect = lambda page, size, filters: records[(page - 1) * size: page * size]
    client.random.side_effect = lambda filters: make_records(3, prefix="rand")
    client.random_in_folder.side_effect = lambda path: make_records(2, prefix="folder")
    client.all_records.side_effect = lambda filters: list(records)
    client.filter_options.return_value = {"genre": ["Legend", "Myth"]}

    def folder_contents(path, return_records=False):
        if return_records:
            return [FolkloreRecord(id="/".join(path))]
        return list(FOLDER_TREE.get(tuple(path), []))

    client.folder_contents.side_effect = folder_contents
    return client


@pytest.fixture()
def settings(tmp_path):
    return Settings(
        api_base="http://archive.test",
        auth_base="http://archive.test/api/auth",
        session_file=str(tmp_path / "user.json"),
        items_per_page=20,
        prefetch_pages=5,
        prefetch_page_size=20,
        map_start_year=1960,
        map_end_year=2024,
        map_time_window=500,
    )


@pytest.fixture()
def client():
    return make_client()
