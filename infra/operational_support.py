from __future__ import annotations

import json
import logging
import os
import re
import sys
import threading
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import date, datetime, timezone
from decimal import Decimal
from enum import Enum
from pathlib import Path
from threading import Lock
from typing import Any, Iterator, Mapping

from infra.path import user_data_dir
from infra.version import get_app_version

logger = logging.getLogger(__name__)

REDACTED = "<redacted>"
REDACTED_EMAIL = "<redacted-email>"
REDACTED_ADDRESS = "<redacted-address>"
EVENTS_FILE_NAME = "support-events.jsonl"

_TRACE_ID_CTX: ContextVar[str | None] = ContextVar("gig_trace_id", default=None)
_SECRET_KEY_PARTS = (
    "password",
    "passwd",
    "token",
    "secret",
    "api_key",
    "apikey",
    "authorization",
    "cookie",
    "session",
    "private_key",
)
# home and gig addresses identify the worker
_ADDRESS_KEY_PARTS = ("address", "origin", "destination")
_EMAIL_PATTERN = re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b")
_SECRET_PAIR_PATTERN = re.compile(
    r"(?i)\b(password|passwd|token|secret|api[_-]?key|authorization)\b\s*[:=]\s*([^\s,;]+)"
)
_BEARER_PATTERN = re.compile(r"(?i)\bbearer\s+[A-Za-z0-9._\-~=+/]+")
# query-string credentials, e.g. the maps API key in a request URL
_URL_KEY_PATTERN = re.compile(r"(?i)([?&](?:key|api_key|apikey|token|signature)=)[^&\s#]+")


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def create_incident_id() -> str:
    stamp = datetime.now(timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"inc-{stamp}-{uuid.uuid4().hex[:8]}"


def current_trace_id() -> str | None:
    cleaned = str(_TRACE_ID_CTX.get() or "").strip()
    return cleaned or None


@contextmanager
def bind_trace_id(trace_id: str | None) -> Iterator[str]:
    """Tag log records and support events emitted inside the block."""
    normalized = (trace_id or "").strip() or create_incident_id()
    token = _TRACE_ID_CTX.set(normalized)
    try:
        yield normalized
    finally:
        _TRACE_ID_CTX.reset(token)


def _key_replacement(key: object) -> str | None:
    normalized = str(key or "").strip().lower().replace("-", "_")
    if any(part in normalized for part in _SECRET_KEY_PARTS):
        return REDACTED
    if any(part in normalized for part in _ADDRESS_KEY_PARTS):
        return REDACTED_ADDRESS
    return None


def redact_text(value: str) -> str:
    text = str(value or "")
    text = _URL_KEY_PATTERN.sub(lambda m: f"{m.group(1)}{REDACTED}", text)
    text = _EMAIL_PATTERN.sub(REDACTED_EMAIL, text)
    text = _SECRET_PAIR_PATTERN.sub(lambda m: f"{m.group(1)}={REDACTED}", text)
    text = _BEARER_PATTERN.sub(f"Bearer {REDACTED}", text)
    return text


def redact_value(value: Any, *, _depth: int = 0, _max_depth: int = 8) -> Any:
    """JSON-safe copy of ``value`` with secrets, e-mails and addresses masked."""
    if _depth >= _max_depth:
        return "<max-depth>"
    if value is None or isinstance(value, (bool, int, float)):
        return value
    if isinstance(value, Decimal):
        return str(value)
    if isinstance(value, Enum):
        return redact_value(value.value, _depth=_depth + 1, _max_depth=_max_depth)
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    if isinstance(value, Mapping):
        out: dict[str, Any] = {}
        for key, item in value.items():
            replacement = _key_replacement(key)
            if replacement is not None and item is not None:
                out[str(key)] = replacement
            else:
                out[str(key)] = redact_value(item, _depth=_depth + 1, _max_depth=_max_depth)
        return out
    if isinstance(value, (list, tuple, set, frozenset)):
        items = sorted(value, key=str) if isinstance(value, (set, frozenset)) else value
        return [redact_value(item, _depth=_depth + 1, _max_depth=_max_depth) for item in items]
    return redact_text(str(value))


class TraceIdLogFilter(logging.Filter):
    def filter(self, record: logging.LogRecord) -> bool:
        record.trace_id = current_trace_id() or "-"
        return True


class OperationalSupport:
    """Append-only JSONL log of support events (captured payments, crashes, startup)."""

    def __init__(self, events_path: str | Path | None = None) -> None:
        if events_path is None:
            events_path = user_data_dir() / "logs" / EVENTS_FILE_NAME
        self._events_path = Path(events_path)
        self._events_path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()

    @property
    def events_path(self) -> Path:
        return self._events_path

    def emit_event(
        self,
        *,
        event_type: str,
        message: str,
        level: str = "INFO",
        trace_id: str | None = None,
        data: Mapping[str, Any] | None = None,
    ) -> str:
        resolved_trace = (trace_id or current_trace_id() or create_incident_id()).strip()
        payload: dict[str, Any] = {
            "timestamp_utc": _utc_now_iso(),
            "event_type": (event_type or "").strip() or "support.event",
            "level": (level or "INFO").strip().upper(),
            "trace_id": resolved_trace,
            "message": redact_text(message or ""),
            "app_version": get_app_version(),
            "pid": os.getpid(),
        }
        if data:
            payload["data"] = redact_value(dict(data))

        line = json.dumps(payload, ensure_ascii=True, sort_keys=True)
        with self._lock:
            with self._events_path.open("a", encoding="utf-8") as handle:
                handle.write(line + "\n")
        return resolved_trace

    def record_gig_event(self, event_type: str, gig_id: int, message: str, **data: Any) -> str:
        return self.emit_event(
            event_type=f"gig.{event_type}",
            message=message,
            data={"gig_id": gig_id, **data},
        )

    def capture_exception(
        self,
        *,
        exc_type: type[BaseException],
        exc_value: BaseException,
        exc_traceback: Any,
        context: str,
        trace_id: str | None = None,
    ) -> str:
        stack = "".join(traceback.format_exception(exc_type, exc_value, exc_traceback))
        return self.emit_event(
            event_type="app.crash",
            level="ERROR",
            trace_id=trace_id,
            message=f"Unhandled exception in {context}: {exc_value}",
            data={
                "context": context,
                "exception_type": getattr(exc_type, "__name__", str(exc_type)),
                "stacktrace": stack,
            },
        )

    def read_events(
        self,
        *,
        trace_id: str | None = None,
        event_type: str | None = None,
    ) -> list[dict[str, Any]]:
        if not self._events_path.exists():
            return []
        wanted_trace = (trace_id or "").strip()
        events: list[dict[str, Any]] = []
        for line in self._events_path.read_text(encoding="utf-8", errors="ignore").splitlines():
            try:
                payload = json.loads(line)
            except json.JSONDecodeError:
                continue
            if not isinstance(payload, dict):
                continue
            if wanted_trace and str(payload.get("trace_id") or "").strip() != wanted_trace:
                continue
            if event_type and payload.get("event_type") != event_type:
                continue
            events.append(payload)
        return events


_GLOBAL_SUPPORT: OperationalSupport | None = None
_HOOKS_INSTALLED = False


def get_operational_support() -> OperationalSupport:
    global _GLOBAL_SUPPORT
    if _GLOBAL_SUPPORT is None:
        _GLOBAL_SUPPORT = OperationalSupport()
    return _GLOBAL_SUPPORT


def _capture_quietly(recorder: OperationalSupport, exc_type, exc_value, exc_tb, context: str) -> None:
    # a failing recorder must not hide the original crash
    try:
        recorder.capture_exception(exc_type=exc_type, exc_value=exc_value, exc_traceback=exc_tb, context=context)
    except Exception:
        logger.debug("Could not record crash event", exc_info=True)


def install_global_exception_hooks(support: OperationalSupport | None = None) -> None:
    global _HOOKS_INSTALLED
    if _HOOKS_INSTALLED:
        return

    recorder = support or get_operational_support()
    previous_sys_hook = sys.excepthook
    previous_thread_hook = threading.excepthook

    def _sys_hook(exc_type: type[BaseException], exc_value: BaseException, exc_tb: Any) -> None:
        _capture_quietly(recorder, exc_type, exc_value, exc_tb, "main-thread")
        previous_sys_hook(exc_type, exc_value, exc_tb)

    def _thread_hook(args: Any) -> None:
        thread_name = getattr(args.thread, "name", None) or "worker-thread"
        _capture_quietly(recorder, args.exc_type, args.exc_value, args.exc_traceback, f"thread:{thread_name}")
        previous_thread_hook(args)

    sys.excepthook = _sys_hook
    threading.excepthook = _thread_hook
    _HOOKS_INSTALLED = True


__all__ = [
    "OperationalSupport",
    "REDACTED",
    "REDACTED_EMAIL",
    "REDACTED_ADDRESS",
    "EVENTS_FILE_NAME",
    "TraceIdLogFilter",
    "bind_trace_id",
    "create_incident_id",
    "current_trace_id",
    "get_operational_support",
    "install_global_exception_hooks",
    "redact_text",
    "redact_value",
]
