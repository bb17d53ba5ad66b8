"""Domain models used by the Favocoin package."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from fractions import Fraction
from typing import Optional, Tuple
from uuid import uuid4

from .money import ZERO, to_amount


class EntryType(str, Enum):
    """Classification of a ledger entry."""

    EARN = "earn"
    SPEND = "spend"
    PENALTY = "penalty"


@dataclass(frozen=True, slots=True)
class Student:
    """Roster record for a student; owned by the roster collaborator."""

    id: str
    name: str
    class_id: Optional[str] = None


@dataclass(frozen=True, slots=True)
class SchoolClass:
    """Roster record for a class; the name drives economy eligibility."""

    id: str
    name: str
    student_ids: Tuple[str, ...] = ()


@dataclass(frozen=True, slots=True)
class LedgerEntry:
    """A single signed coin event. Entries are never edited once created."""

    student_id: str
    amount: Fraction
    description: str
    type: EntryType
    date: date = field(default_factory=date.today)
    id: str = field(default_factory=lambda: f"ft-{uuid4().hex}")

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_amount(self.amount))
        object.__setattr__(self, "type", EntryType(self.type))


@dataclass(slots=True)
class StoreItem:
    """A purchasable item in the school store."""

    name: str
    price: Fraction
    stock: int
    description: str = ""
    image_url: Optional[str] = None
    id: str = field(default_factory=lambda: f"item-{uuid4().hex[:12]}")

    def __post_init__(self) -> None:
        self.price = to_amount(self.price)


@dataclass(frozen=True, slots=True)
class CatalogAction:
    """A named reward or penalty with a fixed signed amount."""

    label: str
    amount: Fraction
    type: EntryType

    def __post_init__(self) -> None:
        object.__setattr__(self, "amount", to_amount(self.amount))
        if self.type is EntryType.SPEND:
            raise ValueError("Catalog actions are either earnings or penalties.")
        if self.type is EntryType.EARN and self.amount < ZERO:
            raise ValueError(f"Earning '{self.label}' must not be negative.")
        if self.type is EntryType.PENALTY and self.amount > ZERO:
            raise ValueError(f"Penalty '{self.label}' must not be positive.")


@dataclass(frozen=True, slots=True)
class PurchaseReceipt:
    """Outcome of a successful group purchase."""

    item_id: str
    item_name: str
    share: Fraction
    entries: Tuple[LedgerEntry, ...]
    remaining_stock: int

    @property
    def participant_ids(self) -> Tuple[str, ...]:
        return tuple(entry.student_id for entry in self.entries)

    @property
    def total_charged(self) -> Fraction:
        return -sum((entry.amount for entry in self.entries), ZERO)


@dataclass(frozen=True, slots=True)
class BalanceStanding:
    """Leaderboard row for the economy dashboard."""

    student_id: str
    name: str
    class_name: Optional[str]
    balance: Fraction


@dataclass(frozen=True, slots=True)
class EconomySummary:
    """Aggregate figures shown on the economy dashboard."""

    total_circulation: Fraction
    total_spent: Fraction
    eligible_students: int
    top_students: Tuple[BalanceStanding, ...]
