"""Operational utilities for Favocoin."""

from __future__ import annotations

import json
from datetime import date, datetime, timezone
from fractions import Fraction
from pathlib import Path
from typing import Iterator


def _encode(value: object) -> object:
    if isinstance(value, Fraction):
        return str(value)
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return str(value)


class StructuredLogger:
    """Record economy events as JSON lines.

    Recent events stay in memory (bounded by ``capacity``) for the admin
    screens; when ``path`` is set every event is also appended to that file
    and can be read back with :meth:`replay`.
    """

    def __init__(self, *, path: Path | str | None = None, capacity: int = 1000) -> None:
        self.path = Path(path) if path is not None else None
        self._capacity = capacity
        self._recent: list[dict] = []

    def log(self, event_type: str, **fields: object) -> dict:
        record = {"timestamp": datetime.now(timezone.utc).isoformat(), "event": event_type, **fields}
        self._recent.append(record)
        overflow = len(self._recent) - self._capacity
        if overflow > 0:
            del self._recent[:overflow]
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as handle:
                handle.write(json.dumps(record, default=_encode, ensure_ascii=False) + "\n")
        return record

    def tail(self, limit: int = 50) -> tuple[dict, ...]:
        return tuple(self._recent[-limit:])

    def events(self, event_type: str, **match: object) -> tuple[dict, ...]:
        """Return retained events of ``event_type`` whose fields equal ``match``."""

        return tuple(
            record
            for record in self._recent
            if record["event"] == event_type and all(record.get(key) == value for key, value in match.items())
        )

    def replay(self) -> Iterator[dict]:
        """Yield every event written to ``path``, oldest first."""

        if self.path is None or not self.path.exists():
            return
        with self.path.open(encoding="utf-8") as handle:
            for line in handle:
                if line.strip():
                    yield json.loads(line)


__all__ = ["StructuredLogger"]
