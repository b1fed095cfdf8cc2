"""FieldDescriptor record — one configured form field / table column."""

from __future__ import annotations

import re
import time
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, Field

_WHITESPACE_RE = re.compile(r"\s+")


class FieldType(str, Enum):
    TEXT = "text"
    EMAIL = "email"
    DATE = "date"

    @classmethod
    def values(cls) -> List[str]:
        return [member.value for member in cls]

    @classmethod
    def is_known(cls, value: str) -> bool:
        return value in cls.values()


FIELD_TYPE_OPTIONS: List[Dict[str, str]] = [
    {"key": FieldType.TEXT.value, "text": "Text"},
    {"key": FieldType.EMAIL.value, "text": "Email"},
    {"key": FieldType.DATE.value, "text": "Date"},
]


class FieldDescriptor(BaseModel):
    """
    A configured field: `name` is the data key on tasks, `label` the display
    text, `type` one of text/email/date.

    `type` stays a plain string so descriptors carrying a type this client
    does not know survive a load/save round-trip; the task form simply does
    not render them.
    """

    model_config = ConfigDict(extra="ignore")

    id: Optional[str] = Field(default=None, description="Editor handle (epoch millis)")
    name: str = Field(description="Unique data key on tasks")
    label: str = Field(description="Display text")
    type: str = Field(default=FieldType.TEXT.value)

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)

    @property
    def is_known_type(self) -> bool:
        return FieldType.is_known(self.type)


def derive_field_name(label: str) -> str:
    """'Due Date ' → 'duedate': lower-case, all whitespace removed."""
    return _WHITESPACE_RE.sub("", label.lower())


def new_field_id(existing: Iterable[Optional[str]] = ()) -> str:
    """Epoch milliseconds as a string, bumped past any id in *existing*."""
    taken = {i for i in existing if i}
    candidate = int(time.time() * 1000)
    while str(candidate) in taken:
        candidate += 1
    return str(candidate)


def field_key(field: FieldDescriptor) -> str:
    """Handle used by the editor: the id when present, else the name."""
    return field.id if field.id else field.name


def parse_fields(raw: Iterable[Dict[str, Any]]) -> List[FieldDescriptor]:
    """Parse backend descriptor dicts, preserving order."""
    return [FieldDescriptor.model_validate(item) for item in raw]
