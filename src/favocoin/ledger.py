"""Append-only transaction ledger and balance aggregation."""

from __future__ import annotations

import csv
from datetime import date
from fractions import Fraction
from io import StringIO
from typing import Iterable, Optional, Sequence, Tuple

from .models import EntryType, LedgerEntry
from .money import ZERO, AmountLike, format_coins, round_for_display, to_amount
from .repository import FavocoinRepository


def fold_balance(entries: Iterable[LedgerEntry]) -> Fraction:
    """Sum the signed amounts of ``entries``."""

    return sum((entry.amount for entry in entries), ZERO)


class Ledger:
    """Post coin events and derive balances from the recorded history.

    Balances are never stored: every query folds the student's entries at
    call time, so repeated calls against an unchanged ledger agree.
    """

    def __init__(self, repository: FavocoinRepository) -> None:
        self._repository = repository

    def post(
        self,
        student_id: str,
        amount: AmountLike,
        description: str,
        entry_type: EntryType,
        *,
        on: Optional[date] = None,
    ) -> LedgerEntry:
        entry = LedgerEntry(
            student_id=student_id,
            amount=to_amount(amount),
            description=description,
            type=entry_type,
            date=on or date.today(),
        )
        return self._repository.append_ledger_entry(entry)

    def entries(self, student_id: Optional[str] = None) -> Tuple[LedgerEntry, ...]:
        return tuple(self._repository.list_ledger_entries(student_id))

    def balance(self, student_id: str) -> Fraction:
        """Return the current balance of ``student_id``."""

        return fold_balance(self._repository.list_ledger_entries(student_id))

    def history(self, student_id: str) -> Tuple[LedgerEntry, ...]:
        """Return the student's entries, newest first."""

        recorded = enumerate(self._repository.list_ledger_entries(student_id))
        ordered = sorted(recorded, key=lambda pair: (pair[1].date, pair[0]), reverse=True)
        return tuple(entry for _, entry in ordered)

    def total_by_type(self, entry_type: EntryType) -> Fraction:
        return fold_balance(entry for entry in self.entries() if entry.type is entry_type)

    def filter(
        self,
        *,
        student_id: Optional[str] = None,
        start: Optional[date] = None,
        end: Optional[date] = None,
        types: Optional[Sequence[EntryType]] = None,
        description: Optional[str] = None,
    ) -> Tuple[LedgerEntry, ...]:
        result: list[LedgerEntry] = []
        for entry in self.entries(student_id):
            if start and entry.date < start:
                continue
            if end and entry.date > end:
                continue
            if types and entry.type not in types:
                continue
            if description is not None and entry.description != description:
                continue
            result.append(entry)
        return tuple(result)

    def statement(self, student_id: str, *, student_name: str | None = None, max_entries: int = 10) -> str:
        """Create a human-readable summary of a student's favocoins."""

        lines = [
            f"Student: {student_name or student_id}",
            f"Current balance: {format_coins(self.balance(student_id))}",
            "",
            "Recent activity:",
        ]
        recent = self.history(student_id)[:max_entries]
        if not recent:
            lines.append("  (no activity yet)")
        for entry in recent:
            lines.append(
                "  "
                f"[{entry.date:%Y-%m-%d}] "
                f"{entry.type.value.title()}: "
                f"{entry.description} "
                f"({format_coins(entry.amount)})"
            )
        return "\n".join(lines)

    def export_csv(self, student_id: Optional[str] = None) -> str:
        """Return a CSV export of the ledger, optionally for one student."""

        buffer = StringIO()
        writer = csv.writer(buffer)
        writer.writerow(["id", "date", "student_id", "type", "description", "amount", "exact_amount"])
        for entry in self.entries(student_id):
            writer.writerow(
                [
                    entry.id,
                    entry.date.isoformat(),
                    entry.student_id,
                    entry.type.value,
                    entry.description,
                    f"{round_for_display(entry.amount):.2f}",
                    str(entry.amount),
                ]
            )
        return buffer.getvalue()


__all__ = ["Ledger", "fold_balance"]
