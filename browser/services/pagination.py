"""Page strip computation.

Turns a page count into a short, stable list of page buttons such as
``1 2 … 6 7 8 … 19 20``.
"""

from __future__ import annotations

from typing import List, Union

from browser.state import PaginationState

ELLIPSIS = "…"

PageEntry = Union[int, str]


def compute_display_pages(current: int, total: int) -> List[PageEntry]:
    """
    Build the page strip.

    Args:
        current: 1-based current page
        total: Number of pages

    Returns:
        Page numbers with ``ELLIPSIS`` markers between non-adjacent runs
    """
    if total <= 5:
        return list(range(1, total + 1))

    start = max(3, current - 1)
    end = min(total - 2, current + 1)
    leading = current > 4
    trailing = current < total - 3
    # On the first or last page the window would be empty; keep one middle
    # page on that side and drop its marker, e.g. 1 2 3 19 20.
    if start > end:
        if current < 3:
            end = start
            trailing = False
        else:
            start = end
            leading = False

    pages: List[PageEntry] = [1, 2]
    if leading:
        pages.append(ELLIPSIS)
    pages.extend(range(start, end + 1))
    if trailing:
        pages.append(ELLIPSIS)
    pages.extend([total - 1, total])

    # The window can abut the fixed head or tail
    return [p for i, p in enumerate(pages) if i == 0 or p != pages[i - 1]]


def display_current_page(pagination: PaginationState) -> int:
    return pagination.current_page + 1
