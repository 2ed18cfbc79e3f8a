"""Static catalog of displayable and filterable record attributes.

Each field names a dotted path into a record. Filter criteria are keyed by
that path, so the catalog also defines the fixed key set of every filter
mapping the browser builds.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Union

from pydantic import BaseModel

FilterValue = Union[List[str], str]
FilterCriteria = Dict[str, FilterValue]


@dataclass(frozen=True)
class FieldDefinition:
    key: str
    label: str
    path: str
    filterable: bool = False
    hidden: bool = False
    # Free-text filter instead of a multi-select over discrete values
    text: bool = False


FIELDS: List[FieldDefinition] = [
    FieldDefinition("contributor_name", "Contributor Name", "contributor.name"),
    FieldDefinition("age_bucket", "Contributor Age", "contributor.age_bucket"),
    FieldDefinition("gender", "Contributor Gender", "contributor.gender"),
    FieldDefinition("item", "Folklore Item", "folklore.item", filterable=True, text=True),
    FieldDefinition("genre", "Genre", "folklore.genre", filterable=True),
    FieldDefinition(
        "language_of_origin",
        "Language of Origin",
        "folklore.language_of_origin",
        filterable=True,
    ),
    FieldDefinition("collector_name", "Collector Name", "collector.name"),
    FieldDefinition("date_collected", "Date Collected", "date_collected"),
    FieldDefinition(
        "location_collected",
        "Location Collected",
        "location_collected.city",
        filterable=True,
    ),
    FieldDefinition(
        "place_mentioned",
        "City Mentioned",
        "folklore.place_mentioned.city",
        filterable=True,
        hidden=True,
    ),
]


def get_nested_value(obj: Any, path: str) -> Any:
    """Walk a dotted path through models, dicts and lists.

    Lists are mapped element-wise, so ``folklore.place_mentioned.city``
    yields the list of mentioned cities. Missing segments yield None.
    """
    acc = obj
    for part in path.split("."):
        if acc is None:
            return None
        if isinstance(acc, list):
            acc = [get_nested_value(item, part) for item in acc]
        elif isinstance(acc, dict):
            acc = acc.get(part)
        elif isinstance(acc, BaseModel):
            acc = getattr(acc, part, None)
        else:
            return None
    return acc


def filterable_fields(fields: List[FieldDefinition] = FIELDS) -> List[FieldDefinition]:
    return [f for f in fields if f.filterable]


def visible_fields(fields: List[FieldDefinition] = FIELDS) -> List[FieldDefinition]:
    return [f for f in fields if not f.hidden]


def field_to_path(fields: List[FieldDefinition] = FIELDS) -> Dict[str, str]:
    """Map discrete filter keys to their record paths (the filter options query)."""
    return {f.key: f.path for f in fields if f.filterable and not f.text}


def empty_criteria(fields: List[FieldDefinition] = FIELDS) -> FilterCriteria:
    """Baseline criteria: every filter present and unconstrained."""
    return {f.path: ("" if f.text else []) for f in fields if f.filterable}
