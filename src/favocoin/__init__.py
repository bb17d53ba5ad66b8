"""Favocoin: the school incentive ledger and store fulfilment engine."""

from .admin import AuditEvent, AuditLog
from .api import ApiExporter, WebhookDispatcher
from .attendance import AttendanceRewards
from .catalog import DEFAULT_ACTIONS, ActionCatalog
from .config import EconomySettings
from .eligibility import DEFAULT_ELIGIBLE_TOKENS, EligibilityResolver, is_eligible
from .exceptions import (
    ClassNotFoundError,
    FavocoinError,
    InsufficientFundsError,
    InvalidParticipantSetError,
    ItemNotFoundError,
    OutOfStockError,
    StudentNotFoundError,
    UnknownActionError,
    ValidationError,
)
from .ledger import Ledger, fold_balance
from .models import (
    BalanceStanding,
    CatalogAction,
    EconomySummary,
    EntryType,
    LedgerEntry,
    PurchaseReceipt,
    SchoolClass,
    StoreItem,
    Student,
)
from .money import format_coins, to_amount
from .ops import StructuredLogger
from .purchase import PurchaseProcessor, split_price
from .repository import FavocoinRepository, InMemoryRepository, InMemoryRoster, Roster
from .service import FavocoinBank
from .store import StoreInventory

__all__ = [
    "ActionCatalog",
    "ApiExporter",
    "AttendanceRewards",
    "AuditEvent",
    "AuditLog",
    "BalanceStanding",
    "CatalogAction",
    "ClassNotFoundError",
    "DEFAULT_ACTIONS",
    "DEFAULT_ELIGIBLE_TOKENS",
    "EconomySettings",
    "EconomySummary",
    "EligibilityResolver",
    "EntryType",
    "FavocoinBank",
    "FavocoinError",
    "FavocoinRepository",
    "InMemoryRepository",
    "InMemoryRoster",
    "InsufficientFundsError",
    "InvalidParticipantSetError",
    "ItemNotFoundError",
    "Ledger",
    "LedgerEntry",
    "OutOfStockError",
    "PurchaseProcessor",
    "PurchaseReceipt",
    "Roster",
    "SchoolClass",
    "StoreInventory",
    "StoreItem",
    "StructuredLogger",
    "Student",
    "StudentNotFoundError",
    "UnknownActionError",
    "ValidationError",
    "WebhookDispatcher",
    "fold_balance",
    "format_coins",
    "is_eligible",
    "split_price",
    "to_amount",
]
