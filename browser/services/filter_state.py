"""Selected filter criteria and the last-applied snapshot.

Edits to the criteria never trigger a fetch on their own; the controller
compares against the snapshot when the user applies them.
"""

from __future__ import annotations

import copy
from typing import Iterable, List, Optional

from folklore.models.fields import FIELDS, FieldDefinition, FilterCriteria, empty_criteria


class FilterState:
    def __init__(self, fields: List[FieldDefinition] = FIELDS):
        self.fields = fields
        self.current: FilterCriteria = empty_criteria(fields)
        self.last_applied: Optional[FilterCriteria] = None

    def _check_key(self, key: str) -> None:
        if key not in self.current:
            raise ValueError(f"Unknown filter key: {key}")

    def set_values(self, key: str, values: Iterable[str]) -> None:
        """Replace the accepted values of a multi-select filter."""
        self._check_key(key)
        if isinstance(self.current[key], str):
            raise ValueError(f"{key} is a text filter")
        self.current[key] = list(values)

    def toggle_value(self, key: str, value: str) -> None:
        self._check_key(key)
        selected = self.current[key]
        if isinstance(selected, str):
            raise ValueError(f"{key} is a text filter")
        if value in selected:
            selected.remove(value)
        else:
            selected.append(value)

    def set_text(self, key: str, query: str) -> None:
        self._check_key(key)
        if not isinstance(self.current[key], str):
            raise ValueError(f"{key} is a multi-select filter")
        self.current[key] = query

    def clear(self) -> None:
        """Back to the unconstrained baseline. Does not apply."""
        self.current = empty_criteria(self.fields)

    def snapshot(self) -> FilterCriteria:
        return copy.deepcopy(self.current)

    def has_changed(self, baseline: Optional[FilterCriteria] = None) -> bool:
        """True when the criteria differ structurally from ``baseline``
        (the last-applied snapshot by default)."""
        reference = self.last_applied if baseline is None else baseline
        return self.current != reference

    def mark_applied(self, snapshot: Optional[FilterCriteria] = None) -> None:
        self.last_applied = copy.deepcopy(snapshot if snapshot is not None else self.current)
