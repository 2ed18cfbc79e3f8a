"""Record schema and field catalog."""
from .schemas import (
    AgeBucket,
    Analysis,
    Collector,
    Context,
    Contributor,
    Folklore,
    FolkloreRecord,
    Location,
)
from .fields import (
    FIELDS,
    FieldDefinition,
    empty_criteria,
    field_to_path,
    filterable_fields,
    get_nested_value,
    visible_fields,
)

__all__ = [
    "AgeBucket",
    "Analysis",
    "Collector",
    "Context",
    "Contributor",
    "Folklore",
    "FolkloreRecord",
    "Location",
    "FIELDS",
    "FieldDefinition",
    "empty_criteria",
    "field_to_path",
    "filterable_fields",
    "get_nested_value",
    "visible_fields",
]
