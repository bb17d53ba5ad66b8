"""Attendance-driven favocoin rewards.

Saving a class register posts a reward for every present student and a
penalty for every absent one. Saving the same day again never edits history:
when the outcome changed, the previous net is reversed with a new entry and
the corrected entry is appended after it.
"""

from __future__ import annotations

from datetime import date
from fractions import Fraction
from typing import Dict, Mapping, Tuple

from .ledger import Ledger, fold_balance
from .models import EntryType, LedgerEntry
from .money import ZERO, AmountLike, to_amount

PRESENT_DESCRIPTION = "Presença Confirmada"
ABSENT_DESCRIPTION = "Falta"
REVERSAL_DESCRIPTION = "Estorno de Presença"
ATTENDANCE_DESCRIPTIONS = frozenset({PRESENT_DESCRIPTION, ABSENT_DESCRIPTION, REVERSAL_DESCRIPTION})


class AttendanceRewards:
    def __init__(self, ledger: Ledger, *, reward: AmountLike = 10, penalty: AmountLike = 5) -> None:
        self._ledger = ledger
        self.reward = to_amount(reward)
        self.penalty = to_amount(penalty)

    def target_amount(self, present: bool) -> Fraction:
        return self.reward if present else -self.penalty

    def posted_for(self, student_id: str, on: date) -> Fraction:
        """Net attendance amount already posted for ``student_id`` on ``on``."""

        return fold_balance(
            entry
            for entry in self._ledger.entries(student_id)
            if entry.date == on and entry.description in ATTENDANCE_DESCRIPTIONS
        )

    def record(self, on: date, records: Mapping[str, bool]) -> Dict[str, Tuple[LedgerEntry, ...]]:
        posted: Dict[str, Tuple[LedgerEntry, ...]] = {}
        for student_id, present in records.items():
            target = self.target_amount(bool(present))
            current = self.posted_for(student_id, on)
            if current == target:
                continue
            entries: list[LedgerEntry] = []
            if current != ZERO:
                entries.append(
                    self._ledger.post(
                        student_id,
                        -current,
                        REVERSAL_DESCRIPTION,
                        EntryType.EARN if current < ZERO else EntryType.PENALTY,
                        on=on,
                    )
                )
            entries.append(
                self._ledger.post(
                    student_id,
                    target,
                    PRESENT_DESCRIPTION if present else ABSENT_DESCRIPTION,
                    EntryType.EARN if present else EntryType.PENALTY,
                    on=on,
                )
            )
            posted[student_id] = tuple(entries)
        return posted


__all__ = ["AttendanceRewards", "ABSENT_DESCRIPTION", "PRESENT_DESCRIPTION", "REVERSAL_DESCRIPTION"]
