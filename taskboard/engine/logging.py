"""
Taskboard Logging — Structured JSON file-based logging.

Implements:
- FileLogger: Per-object-type, per-category log files (daily rotation)
- Log entry builders for backend calls, field/task events, system events
- Global logger install/lookup (init_logging / log / shutdown_logging)

Writes are synchronous: the UI runs no background work, so entries land
in {directory}/{object_type}/{category}/{YYYY-MM-DD}.jsonl as they happen.
"""

from __future__ import annotations

import json
import logging
import threading
from collections import defaultdict
from datetime import date, datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger("taskboard.engine.logging")

# Valid object types and their permitted categories
OBJECT_TYPE_CATEGORIES = {
    "backend": ["execution", "errors"],
    "fields": ["execution"],
    "tasks": ["execution"],
    "system": ["execution"],
}


class LogEntry:
    """A structured log entry destined for a specific file."""

    __slots__ = ("object_type", "category", "data")

    def __init__(self, object_type: str, category: str, data: Dict[str, Any]):
        self.object_type = object_type
        self.category = category
        self.data = data

    def to_json(self) -> str:
        return json.dumps(self.data, default=str, separators=(",", ":"))


class FileLogger:
    """
    Writes structured JSON log entries to per-object-type, per-category files.
    Files rotate daily: logs/{object_type}/{category}/{YYYY-MM-DD}.jsonl

    Thread-safe — uses a lock per file path.
    """

    def __init__(self, log_dir: str = ".taskboard/logs"):
        self._log_dir = Path(log_dir)
        self._file_locks: Dict[str, threading.Lock] = defaultdict(threading.Lock)
        self._ensure_directories()

    def _ensure_directories(self) -> None:
        for obj_type, categories in OBJECT_TYPE_CATEGORIES.items():
            for cat in categories:
                (self._log_dir / obj_type / cat).mkdir(parents=True, exist_ok=True)

    def write(self, entry: LogEntry) -> None:
        """Write a single log entry to the appropriate file."""
        file_path = self._resolve_path(entry.object_type, entry.category)
        key = str(file_path)

        with self._file_locks[key]:
            with open(file_path, "a", encoding="utf-8") as f:
                f.write(entry.to_json())
                f.write("\n")

    def _resolve_path(self, object_type: str, category: str) -> Path:
        """Resolve the log file path for today's date."""
        if category not in OBJECT_TYPE_CATEGORIES.get(object_type, []):
            object_type, category = "system", "execution"
        today = date.today().isoformat()
        return self._log_dir / object_type / category / f"{today}.jsonl"

    @property
    def log_dir(self) -> Path:
        return self._log_dir

    def query(
        self,
        object_type: str,
        category: str,
        *,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        filters: Optional[Dict[str, Any]] = None,
        limit: int = 500,
    ) -> List[Dict[str, Any]]:
        """
        Query log entries for a given object_type/category, newest first.

        Args:
            start_date: Earliest date to include (defaults to 7 days ago).
            end_date: Latest date to include (defaults to today).
            filters: Only entries whose top-level keys equal ALL of these.
            limit: Max number of entries to return.
        """
        if end_date is None:
            end_date = date.today()
        if start_date is None:
            start_date = end_date - timedelta(days=7)

        log_base = self._log_dir / object_type / category
        if not log_base.exists():
            return []

        results: List[Dict[str, Any]] = []
        current = end_date
        while current >= start_date:
            file_path = log_base / f"{current.isoformat()}.jsonl"
            if file_path.exists():
                # Lines within a file are chronological
                results.extend(reversed(self._read_jsonl(file_path, filters)))
            current -= timedelta(days=1)
        return results[:limit]

    @staticmethod
    def _read_jsonl(
        path: Path,
        filters: Optional[Dict[str, Any]],
    ) -> List[Dict[str, Any]]:
        entries: List[Dict[str, Any]] = []
        try:
            with open(path, "r", encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if not line:
                        continue
                    try:
                        data = json.loads(line)
                    except json.JSONDecodeError:
                        continue
                    if filters and not all(data.get(k) == v for k, v in filters.items()):
                        continue
                    entries.append(data)
        except OSError as exc:
            logger.warning("Could not read log file %s: %s", path, exc)
        return entries


# ---------------------------------------------------------------------------
# Log Entry Builders
# ---------------------------------------------------------------------------

def _base_entry(event: str, level: str, **extra: Any) -> Dict[str, Any]:
    """Build a base log entry with common fields."""
    entry: Dict[str, Any] = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "level": level,
        "event": event,
    }
    entry.update(extra)
    return entry


def log_backend_call(
    method: str,
    url: str,
    status_code: Optional[int],
    duration_ms: float,
    success: bool,
    error: Optional[str] = None,
    log_payload: bool = False,
    request_body: Optional[Any] = None,
) -> LogEntry:
    """Build a backend call log entry. status_code is None on transport failure."""
    data = _base_entry(
        event="backend_called",
        level="INFO" if success else "ERROR",
        method=method,
        url=url,
        status_code=status_code,
        duration_ms=round(duration_ms, 2),
        success=success,
    )
    if error:
        data["error"] = error
    if log_payload and request_body is not None:
        data["request_body"] = request_body
    return LogEntry("backend", "execution" if success else "errors", data)


def log_field_event(
    event: str,
    field_id: Optional[str] = None,
    field_name: Optional[str] = None,
    level: str = "INFO",
    **details: Any,
) -> LogEntry:
    """Build a field configuration event (added/removed/reordered/saved/...)."""
    data = _base_entry(event=event, level=level, **details)
    if field_id is not None:
        data["field_id"] = field_id
    if field_name is not None:
        data["field_name"] = field_name
    return LogEntry("fields", "execution", data)


def log_task_event(
    event: str,
    task_id: Optional[str] = None,
    level: str = "INFO",
    **details: Any,
) -> LogEntry:
    """Build a task event (created/updated/deleted/refreshed/...)."""
    data = _base_entry(event=event, level=level, **details)
    if task_id is not None:
        data["task_id"] = task_id
    return LogEntry("tasks", "execution", data)


def log_system_event(
    event: str,
    level: str = "INFO",
    details: Optional[Dict[str, Any]] = None,
) -> LogEntry:
    """Build a system event log entry (startup, config load, shutdown)."""
    data = _base_entry(event=event, level=level)
    if details:
        data["details"] = details
    return LogEntry("system", "execution", data)


# ---------------------------------------------------------------------------
# Convenience: Global File Logger Singleton
# ---------------------------------------------------------------------------

_global_logger: Optional[FileLogger] = None


def init_logging(log_dir: str = ".taskboard/logs", level: str = "INFO") -> FileLogger:
    """Install the global FileLogger and set the stdlib level for taskboard.*"""
    global _global_logger
    logging.getLogger("taskboard").setLevel(level)
    _global_logger = FileLogger(log_dir=log_dir)
    return _global_logger


def get_file_logger() -> Optional[FileLogger]:
    """Get the global FileLogger."""
    return _global_logger


def log(entry: LogEntry) -> bool:
    """Write a log entry through the global FileLogger, if installed."""
    if _global_logger is None:
        return False
    try:
        _global_logger.write(entry)
    except OSError as e:
        logger.error(f"Log write error: {e}")
        return False
    return True


def shutdown_logging() -> None:
    """Drop the global FileLogger."""
    global _global_logger
    _global_logger = None
