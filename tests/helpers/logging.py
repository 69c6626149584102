"""Logger stand-in that keeps event-style log calls for assertions."""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional


class RecordingLogger:
    """Drop-in for a module-level ``logger`` that records every call."""

    def __init__(self) -> None:
        self.records: List[Dict[str, Any]] = []

    def _record(self, level: str, message: str, *args: Any, **kwargs: Any) -> None:
        self.records.append(
            {
                "level": level,
                "message": message,
                "args": args,
                "extra": dict(kwargs.get("extra") or {}),
                "exc_info": kwargs.get("exc_info"),
            }
        )

    def debug(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._record("debug", message, *args, **kwargs)

    def info(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._record("info", message, *args, **kwargs)

    def warning(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._record("warning", message, *args, **kwargs)

    def error(self, message: str, *args: Any, **kwargs: Any) -> None:
        self._record("error", message, *args, **kwargs)

    def messages(self, level: Optional[str] = None) -> List[str]:
        return [
            record["message"]
            for record in self.records
            if level is None or record["level"] == level
        ]


def find_log(
    records: List[Dict[str, Any]], *, level: str, message: str
) -> Dict[str, Any]:
    for record in records:
        if record["level"] == level and record["message"] == message:
            return record
    seen = [(record["level"], record["message"]) for record in records]
    raise AssertionError(f"No {level} log '{message}' recorded; saw {seen}")


def assert_extra_contains(record: Dict[str, Any], **expected: Any) -> None:
    extra = record["extra"]
    for key, value in expected.items():
        assert extra.get(key) == value, (
            f"extra[{key!r}] was {extra.get(key)!r}, expected {value!r}"
        )


def assert_extra_has_keys(record: Dict[str, Any], keys: Iterable[str]) -> None:
    missing = [key for key in keys if key not in record["extra"]]
    assert not missing, f"Log extra is missing {missing}"
