"""Taskboard Records — field descriptors and task shapes."""

from .field import (
    FIELD_TYPE_OPTIONS,
    FieldDescriptor,
    FieldType,
    derive_field_name,
    field_key,
    new_field_id,
    parse_fields,
)
from .task import (
    TaggedValue,
    Task,
    normalize_date_value,
    tag_task_values,
    task_id,
    task_org,
)

__all__ = [
    "FIELD_TYPE_OPTIONS",
    "FieldDescriptor",
    "FieldType",
    "derive_field_name",
    "field_key",
    "new_field_id",
    "parse_fields",
    "TaggedValue",
    "Task",
    "normalize_date_value",
    "tag_task_values",
    "task_id",
    "task_org",
]
