"""
Task record — an open mapping from field name to value.

A task's shape is whatever FieldDescriptors existed when it was last saved:
older tasks may carry keys that are no longer configured, and newly
configured fields are absent until the task is edited. At the form
boundary, values for configured fields are tagged with their field type
and date values are normalised to YYYY-MM-DD.
"""

from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Sequence

from pydantic import BaseModel

from taskboard.engine.errors import TaskboardValidationError
from taskboard.records.field import FieldDescriptor, FieldType

Task = Dict[str, Any]


class TaggedValue(BaseModel):
    """A task value paired with the type of the field that owns it."""

    type: str
    value: str = ""


def task_id(task: Mapping[str, Any]) -> Optional[str]:
    value = task.get("_id")
    return None if value is None else str(value)


def task_org(task: Mapping[str, Any]) -> Optional[str]:
    value = task.get("organizationId")
    return None if value is None else str(value)


def normalize_date_value(value: Any, field_name: Optional[str] = None) -> str:
    """
    Normalise a date-ish value to an ISO calendar date (YYYY-MM-DD).

    Accepts date/datetime objects and ISO strings with or without a time
    part ('2024-05-01T00:00:00.000Z'). Empty values stay "".
    """
    if value is None or value == "":
        return ""
    if isinstance(value, datetime):
        return value.date().isoformat()
    if isinstance(value, date):
        return value.isoformat()
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text[:10]).isoformat()
        except ValueError:
            pass
    raise TaskboardValidationError(
        f"Not a calendar date: {value!r}",
        field_name=field_name,
        value=value,
    )


def _coerce_value(field: FieldDescriptor, value: Any) -> str:
    if field.type == FieldType.DATE.value:
        return normalize_date_value(value, field.name)
    if value is None:
        return ""
    return str(value)


def tag_task_values(
    values: Mapping[str, Any],
    fields: Sequence[FieldDescriptor],
) -> Dict[str, TaggedValue]:
    """
    Tag every configured field's value with its type.

    Fields with a type this client does not render are skipped; keys in
    *values* that are not configured are not tagged.

    Raises:
        TaskboardValidationError if a date field holds an unparseable value.
    """
    tagged: Dict[str, TaggedValue] = {}
    for field in fields:
        if not field.is_known_type:
            continue
        tagged[field.name] = TaggedValue(
            type=field.type,
            value=_coerce_value(field, values.get(field.name)),
        )
    return tagged

