"""
Tests for browser/services/page_cache.py.
The data provider is a Mock; call counts stand in for network requests.
"""

import pytest

from folklore.archive_client import AuthExpired, NetworkFailure
from browser.services.filter_state import FilterState
from browser.services.page_cache import UNFETCHED, SparsePageCache

from conftest import make_client, make_records


@pytest.fixture()
def filters():
    return FilterState()


@pytest.fixture()
def cache(client, settings):
    return SparsePageCache(client, settings)


# ===========================================================================
# fetch_initial
# ===========================================================================


class TestFetchInitial:
    def test_allocates_count_slots_and_prefetches_five_pages(self, cache, client, filters):
        assert cache.fetch_initial(filters) is True

        assert len(cache) == 250
        assert all(r is not UNFETCHED for r in cache.records[:100])
        assert all(r is UNFETCHED for r in cache.records[100:])
        assert [c.args[0] for c in client.paginated.call_args_list] == [1, 2, 3, 4, 5]
        assert cache.pagination.current_page == 0

    def test_records_applied_filters(self, cache, filters):
        filters.toggle_value("folklore.genre", "Legend")
        cache.fetch_initial(filters)
        assert filters.last_applied == {**filters.current}
        assert filters.has_changed() is False

    def test_prefetch_stops_at_end_of_collection(self, settings, filters):
        client = make_client(total=45)
        cache = SparsePageCache(client, settings)
        cache.fetch_initial(filters)

        assert client.paginated.call_count == 3
        assert len(cache) == 45
        assert UNFETCHED not in cache.records

    def test_empty_collection(self, settings, filters):
        client = make_client(total=0)
        cache = SparsePageCache(client, settings)
        assert cache.fetch_initial(filters) is True
        assert len(cache) == 0
        assert cache.total_pages() == 0
        assert cache.paginated_slice() == []
        client.paginated.assert_not_called()

    def test_resets_page_and_keeps_overlay(self, cache, filters):
        cache.fetch_initial(filters)
        cache.go_to_page(7)
        cache.fetch_random_sample(filters=filters.snapshot())
        assert cache.overlay.active

        filters.toggle_value("folklore.genre", "Myth")
        cache.fetch_initial(filters)
        assert cache.pagination.current_page == 0
        assert cache.overlay.active is True
        assert len(cache) == 250

        cache.undo_random()
        assert cache.paginated_slice()[0].id == "r0"

    def test_count_failure_keeps_prior_cache(self, cache, client, filters):
        cache.fetch_initial(filters)
        before = list(cache.records)
        applied = filters.last_applied

        filters.toggle_value("folklore.genre", "Myth")
        client.count.side_effect = NetworkFailure("down")
        assert cache.fetch_initial(filters) is False

        assert cache.records == before
        assert filters.last_applied == applied

    def test_prefetch_failure_keeps_prior_cache(self, cache, client, filters):
        def flaky(page, size, f):
            if page == 3:
                raise NetworkFailure("timeout")
            return make_records(size)

        client.paginated.side_effect = flaky
        assert cache.fetch_initial(filters) is False
        assert cache.records == []
        assert filters.last_applied is None

    def test_auth_expiry_aborts(self, cache, client, filters):
        client.count.side_effect = AuthExpired("401")
        assert cache.fetch_initial(filters) is False
        assert len(cache) == 0


# ===========================================================================
# go_to_page
# ===========================================================================


class TestGoToPage:
    def test_fetches_unfilled_page_once(self, cache, client, filters):
        cache.fetch_initial(filters)
        client.paginated.reset_mock()

        assert cache.go_to_page(7) is True
        assert cache.go_to_page(7) is True

        client.paginated.assert_called_once_with(8, 20, filters.last_applied)
        assert [r.id for r in cache.paginated_slice()] == [f"r{i}" for i in range(140, 160)]

    def test_prefetched_page_needs_no_fetch(self, cache, client, filters):
        cache.fetch_initial(filters)
        client.paginated.reset_mock()
        cache.go_to_page(3)
        client.paginated.assert_not_called()
        assert cache.pagination.current_page == 3

    def test_uses_applied_filters_not_pending_edits(self, cache, client, filters):
        cache.fetch_initial(filters)
        applied = filters.last_applied
        filters.toggle_value("folklore.genre", "Legend")

        cache.go_to_page(9)
        assert client.paginated.call_args.args[2] == applied

    def test_short_last_page_is_bounds_checked(self, settings, filters):
        client = make_client(total=245)
        cache = SparsePageCache(client, settings)
        cache.fetch_initial(filters)
        # Provider misbehaves and sends a full page past the end
        client.paginated.side_effect = lambda page, size, f: make_records(size, prefix="x")

        cache.go_to_page(12)
        assert len(cache) == 245
        assert len(cache.paginated_slice()) == 5
        assert cache.is_page_loaded(12)

    def test_under_filled_page_is_refetched(self, cache, client, filters):
        cache.fetch_initial(filters)
        client.paginated.side_effect = lambda page, size, f: make_records(10, prefix="half")

        cache.go_to_page(6)
        assert cache.is_page_loaded(6) is False
        cache.go_to_page(6)
        assert client.paginated.call_count == 5 + 2

    def test_failure_moves_cursor_but_keeps_slots(self, cache, client, filters):
        cache.fetch_initial(filters)
        client.paginated.side_effect = NetworkFailure("down")

        assert cache.go_to_page(8) is False
        assert cache.pagination.current_page == 8
        assert all(r is UNFETCHED for r in cache.paginated_slice())

    def test_filled_slots_are_not_overwritten(self, cache, client, filters):
        cache.fetch_initial(filters)
        first = cache.records[0]
        cache.set_items_per_page(150)
        client.paginated.side_effect = lambda page, size, f: make_records(size, prefix="new")

        cache.go_to_page(0)
        assert cache.records[0] is first
        assert cache.records[120].id == "new120"

    @pytest.mark.parametrize("page", [-1, 13])
    def test_out_of_range_pages_rejected(self, cache, filters, page):
        cache.fetch_initial(filters)
        with pytest.raises(ValueError):
            cache.go_to_page(page)


# ===========================================================================
# Random sample overlay
# ===========================================================================


class TestRandomSample:
    def test_overlay_replaces_view(self, cache, client, filters):
        cache.fetch_initial(filters)
        cache.go_to_page(2)

        assert cache.fetch_random_sample(filters=filters.snapshot()) is True
        assert cache.pagination.current_page == 0
        assert [r.id for r in cache.paginated_slice()] == ["rand0", "rand1", "rand2"]
        assert cache.total_pages() == 1

    def test_folder_scope(self, cache, client):
        cache.fetch_random_sample(folder_path=["California"])
        client.random_in_folder.assert_called_once_with(["California"])
        client.random.assert_not_called()

    def test_empty_sample_is_a_no_op(self, cache, client, filters):
        cache.fetch_initial(filters)
        client.random.side_effect = lambda f: []
        assert cache.fetch_random_sample(filters={}) is False
        assert cache.overlay.active is False

    def test_failure_keeps_previous_overlay(self, cache, client, filters):
        cache.fetch_random_sample(filters={})
        client.random.side_effect = NetworkFailure("down")
        assert cache.fetch_random_sample(filters={}) is False
        assert cache.overlay.active
        assert len(cache.overlay.records) == 3

    def test_undo_restores_cache_view(self, cache, filters):
        cache.fetch_initial(filters)
        cache.fetch_random_sample(filters={})
        cache.undo_random()
        assert cache.overlay.active is False
        assert cache.total_pages() == 13
        assert cache.paginated_slice()[0].id == "r0"


# ===========================================================================
# Pagination reads
# ===========================================================================


class TestPaginationReads:
    def test_total_pages_rounds_up(self, cache, filters):
        cache.fetch_initial(filters)
        assert cache.total_pages() == 13

    def test_items_per_page_change_resets_page(self, cache, filters):
        cache.fetch_initial(filters)
        cache.go_to_page(4)
        cache.set_items_per_page(50)
        assert cache.pagination.current_page == 0
        assert cache.total_pages() == 5

    def test_max_items_caps_slice_and_pages(self, cache, filters):
        cache.fetch_initial(filters)
        cache.set_max_items(30)
        assert cache.total_pages() == 2
        cache.go_to_page(1)
        assert len(cache.paginated_slice()) == 10

    def test_reset_pagination(self, cache, filters):
        cache.fetch_initial(filters)
        cache.set_items_per_page(7)
        cache.set_max_items(3)
        cache.reset_pagination()
        assert cache.pagination.items_per_page == 20
        assert cache.pagination.max_items is None
        assert cache.total_pages() == 13

    def test_invalid_page_size(self, cache):
        with pytest.raises(ValueError):
            cache.set_items_per_page(0)

    def test_sentinel_is_falsy(self):
        assert not UNFETCHED
        assert repr(UNFETCHED) == "UNFETCHED"
