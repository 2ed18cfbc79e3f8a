#!/usr/bin/env python
"""Terminal front end for the folklore archive browser.

Usage:
    python browse.py --filter folklore.genre=Legend --page 3
    python browse.py --mode index --folder California --folder Spanish
    python browse.py --random

This will:
- Check the session (opening the sign-in page if there is none)
- Enter the requested view and apply the filters
- Print the visible records and the page strip
"""
import argparse
import sys
from typing import List

from folklore.models.fields import get_nested_value, visible_fields
from folklore.utils.logger import setup_logging

from browser.app import BrowserApp
from browser.services.page_cache import UNFETCHED
from browser.state import ViewMode


def _split_assignment(raw: str) -> tuple:
    key, sep, value = raw.partition("=")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected path=value, got {raw!r}")
    return key, value


def _format_record(record) -> str:
    if record is UNFETCHED:
        return "(loading)"
    cells: List[str] = []
    for f in visible_fields():
        value = get_nested_value(record, f.path)
        if value in (None, "", []):
            continue
        if isinstance(value, list):
            value = ", ".join(str(v) for v in value if v)
        cells.append(f"{f.label}: {getattr(value, 'value', value)}")
    return " | ".join(cells) or record.id


def main():
    parser = argparse.ArgumentParser(description="Browse the folklore archive")
    parser.add_argument(
        "--mode", choices=[m.value for m in ViewMode], default=ViewMode.TABLE.value
    )
    parser.add_argument(
        "--filter", action="append", default=[], type=_split_assignment,
        help="Accept a value for a filter path (repeatable)",
    )
    parser.add_argument(
        "--text", action="append", default=[], type=_split_assignment,
        help="Free-text query for a text filter path",
    )
    parser.add_argument("--page", type=int, default=1, help="1-based page to show")
    parser.add_argument("--per-page", type=int, default=None, help="Records per page")
    parser.add_argument("--folder", action="append", default=[], help="Folder to descend into (repeatable)")
    parser.add_argument("--random", action="store_true", help="Show a random sample instead")
    parser.add_argument("--log-level", default="INFO")
    args = parser.parse_args()

    setup_logging(args.log_level)
    app = BrowserApp()
    if not app.ensure_signed_in():
        print("Not signed in; complete sign-in in the browser and run again.")
        return 1

    controller = app.controller
    try:
        for key, value in args.filter:
            controller.filters.toggle_value(key, value)
        for key, value in args.text:
            controller.filters.set_text(key, value)
    except ValueError as exc:
        parser.error(str(exc))

    mode = ViewMode(args.mode)
    if not app.run(mode):
        print("Could not load the archive; see the log for details.")
        return 1

    if mode is ViewMode.INDEX:
        for depth, name in enumerate(args.folder):
            controller.select_segment(depth, name)
        print("Path: /" + "/".join(controller.navigator.cleaned_path))
        if controller.navigator.listings[-1] and controller.navigator.path[-1] == "":
            print("Folders: " + ", ".join(controller.navigator.listings[-1]))
    elif mode is ViewMode.MAP:
        records = controller.fetch_map_data()
        print(f"{len(records)} records to plot")
        return 0

    if args.per_page:
        controller.cache.set_items_per_page(args.per_page)
    if args.random:
        controller.fetch_random()
    elif mode is ViewMode.TABLE and args.page > 1:
        try:
            controller.go_to_page_index(args.page)
        except ValueError as exc:
            parser.error(str(exc))

    for record in controller.current_records():
        print(_format_record(record))
    if mode is ViewMode.TABLE or controller.is_random:
        print("Pages: " + " ".join(str(p) for p in controller.display_pages()))
    return 0


if __name__ == "__main__":
    sys.exit(main())
