"""
Taskboard Error Hierarchy — Structured exceptions for the UI controllers.

Every error carries free-form context (endpoint, field name, action, ...)
that serializes to JSON for the structured log files.

Hierarchy:
    TaskboardError
    ├── TaskboardValidationError     — User input / task value rejected
    ├── TaskboardIntegrationError    — Backend call failed (transport or non-2xx)
    ├── TaskboardConfigError         — Invalid taskboard.yaml
    └── TaskboardStaleResponseError  — Response superseded by a newer request
"""

from __future__ import annotations

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional


class TaskboardError(Exception):
    """
    Base error for all Taskboard failures.
    All context is serializable to JSON.
    """

    def __init__(self, message: str, **context: Any):
        self.message = message
        self.error_type: str = self.__class__.__name__
        self.context: Dict[str, Any] = context
        self.timestamp: str = datetime.now(timezone.utc).isoformat()
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize error to a JSON-compatible dict for logging."""
        return {
            "error_type": self.error_type,
            "message": self.message,
            "timestamp": self.timestamp,
            "context": {k: str(v) for k, v in self.context.items()},
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), default=str)

    def __repr__(self) -> str:
        parts = [f"{self.error_type}: {self.message}"]
        for key in sorted(self.context):
            parts.append(f"{key}={self.context[key]}")
        return " | ".join(parts)


class TaskboardValidationError(TaskboardError):
    """
    Input validation failed (blank label, unknown field type, bad value).
    Includes the offending field name when there is one.
    """

    def __init__(self, message: str, **context: Any):
        self.field_name: Optional[str] = context.get("field_name")
        super().__init__(message, **context)

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["field_name"] = self.field_name
        return d


class TaskboardIntegrationError(TaskboardError):
    """
    Backend call failed.

    status_code is None for transport failures (connection refused, timeout,
    unparseable body) and the HTTP status for application-level failures.
    """

    def __init__(self, message: str, **context: Any):
        self.endpoint: Optional[str] = context.get("endpoint")
        self.method: Optional[str] = context.get("method")
        self.status_code: Optional[int] = context.get("status_code")
        self.response_body: Optional[str] = context.get("response_body")
        super().__init__(message, **context)

    @property
    def is_transport_error(self) -> bool:
        return self.status_code is None

    def to_dict(self) -> Dict[str, Any]:
        d = super().to_dict()
        d["endpoint"] = self.endpoint
        d["method"] = self.method
        d["status_code"] = self.status_code
        return d


class TaskboardConfigError(TaskboardError):
    """Configuration error — invalid taskboard.yaml."""
    pass


class TaskboardStaleResponseError(TaskboardError):
    """A response arrived after a newer request for the same action was issued."""

    def __init__(self, message: str, **context: Any):
        self.action: Optional[str] = context.get("action")
        self.token: Optional[int] = context.get("token")
        super().__init__(message, **context)
