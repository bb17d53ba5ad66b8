"""JSON export helpers and event listeners for Favocoin."""

from __future__ import annotations

import json
from typing import Callable, Dict, Iterable, Optional

from .models import LedgerEntry, PurchaseReceipt, StoreItem
from .money import round_for_display
from .ops import StructuredLogger

Listener = Callable[[Dict[str, object]], None]


def coins(amount) -> float:
    return float(round_for_display(amount))


class ApiExporter:
    """Convert Favocoin data structures to JSON friendly dictionaries."""

    def entry(self, entry: LedgerEntry) -> Dict[str, object]:
        return {
            "id": entry.id,
            "student_id": entry.student_id,
            "date": entry.date.isoformat(),
            "type": entry.type.value,
            "description": entry.description,
            "amount": coins(entry.amount),
            "exact_amount": str(entry.amount),
        }

    def item(self, item: StoreItem) -> Dict[str, object]:
        return {
            "id": item.id,
            "name": item.name,
            "description": item.description,
            "price": coins(item.price),
            "stock": item.stock,
            "image_url": item.image_url,
        }

    def receipt(self, receipt: PurchaseReceipt) -> Dict[str, object]:
        return {
            "item_id": receipt.item_id,
            "item_name": receipt.item_name,
            "share": coins(receipt.share),
            "exact_share": str(receipt.share),
            "participants": list(receipt.participant_ids),
            "remaining_stock": receipt.remaining_stock,
            "entries": [self.entry(entry) for entry in receipt.entries],
        }

    def student_snapshot(self, student_id: str, balance, history: Iterable[LedgerEntry]) -> Dict[str, object]:
        return {
            "student_id": student_id,
            "balance": coins(balance),
            "exact_balance": str(balance),
            "history": [self.entry(entry) for entry in history],
        }

    def to_json(self, payload: Dict[str, object]) -> str:
        return json.dumps(payload, sort_keys=True, ensure_ascii=False)


class WebhookDispatcher:
    """Synchronous broadcaster for ledger and purchase events.

    Events are sent after the ledger write has committed, so a failing
    listener is logged and skipped rather than raised to the caller.
    """

    def __init__(self, logger: Optional[StructuredLogger] = None) -> None:
        self._listeners: list[Listener] = []
        self._logger = logger

    def register(self, listener: Listener) -> None:
        self._listeners.append(listener)

    def unregister(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def dispatch(self, event: Dict[str, object]) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as exc:
                if self._logger is not None:
                    self._logger.log(
                        "webhook_failed",
                        webhook_event=event.get("event"),
                        listener=getattr(listener, "__name__", repr(listener)),
                        error=f"{type(exc).__name__}: {exc}",
                    )


__all__ = ["ApiExporter", "WebhookDispatcher", "coins"]
