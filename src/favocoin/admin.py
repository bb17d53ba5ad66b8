"""Audit trail for store administration and purchases."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class AuditEvent:
    """Who changed which store item or ledger, and how."""

    actor: str
    action: str
    target: str
    timestamp: datetime = field(default_factory=_utcnow)
    details: Dict[str, Any] = field(default_factory=dict)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "actor": self.actor,
            "action": self.action,
            "target": self.target,
            "timestamp": self.timestamp.isoformat(),
            "details": dict(self.details),
        }


class AuditLog:
    """Collect audit events; item edits keep a before/after snapshot."""

    def __init__(self) -> None:
        self._entries: list[AuditEvent] = []

    def record(
        self,
        actor: str,
        action: str,
        target: str,
        *,
        details: Optional[dict] = None,
    ) -> AuditEvent:
        event = AuditEvent(actor=actor, action=action, target=target, details=dict(details or {}))
        self._entries.append(event)
        return event

    def entries(
        self,
        *,
        action: str | None = None,
        target: str | None = None,
        actor: str | None = None,
    ) -> tuple[AuditEvent, ...]:
        return tuple(
            entry
            for entry in self._entries
            if (action is None or entry.action == action)
            and (target is None or entry.target == target)
            and (actor is None or entry.actor == actor)
        )

    def latest(self) -> AuditEvent | None:
        return self._entries[-1] if self._entries else None


__all__ = ["AuditEvent", "AuditLog"]
