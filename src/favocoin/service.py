"""High level service coordinating the favocoin ledger, catalog and store."""

from __future__ import annotations

from datetime import date
from fractions import Fraction
from threading import RLock
from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Tuple

from .admin import AuditLog
from .api import ApiExporter, WebhookDispatcher, coins
from .attendance import AttendanceRewards
from .catalog import DEFAULT_ACTIONS, ActionCatalog
from .config import INITIAL_BALANCE_DESCRIPTION, EconomySettings
from .eligibility import EligibilityResolver
from .exceptions import FavocoinError, InsufficientFundsError, StudentNotFoundError
from .ledger import Ledger
from .models import (
    BalanceStanding,
    CatalogAction,
    EconomySummary,
    EntryType,
    LedgerEntry,
    PurchaseReceipt,
    SchoolClass,
    StoreItem,
)
from .money import AmountLike
from .ops import StructuredLogger
from .purchase import PurchaseProcessor
from .repository import FavocoinRepository, InMemoryRepository, InMemoryRoster, Roster
from .store import StoreInventory


class FavocoinBank:
    """Entry point used by teacher, admin and parent screens.

    Every mutating call holds one re-entrant lock from the first balance or
    stock read until the last write, so concurrent callers cannot both pass a
    stale check.
    """

    __slots__ = (
        "_repository",
        "_roster",
        "_settings",
        "_ledger",
        "_resolver",
        "_catalog",
        "_inventory",
        "_processor",
        "_attendance",
        "_logger",
        "_audit_log",
        "_webhooks",
        "_api",
        "_lock",
    )

    def __init__(
        self,
        repository: FavocoinRepository | None = None,
        roster: Roster | None = None,
        *,
        settings: EconomySettings | None = None,
        actions: Iterable[CatalogAction] = DEFAULT_ACTIONS,
        logger: StructuredLogger | None = None,
    ) -> None:
        self._repository = repository if repository is not None else InMemoryRepository()
        self._roster = roster if roster is not None else InMemoryRoster()
        self._settings = settings or EconomySettings()
        self._ledger = Ledger(self._repository)
        self._resolver = EligibilityResolver(self._settings.eligible_tokens)
        self._catalog = ActionCatalog(self._ledger, actions)
        self._inventory = StoreInventory(self._repository)
        self._processor = PurchaseProcessor(self._repository, self._ledger, self._inventory)
        self._attendance = AttendanceRewards(
            self._ledger,
            reward=self._settings.attendance_reward,
            penalty=self._settings.absence_penalty,
        )
        self._logger = logger or StructuredLogger(path=self._settings.log_path)
        self._audit_log = AuditLog()
        self._webhooks = WebhookDispatcher(self._logger)
        self._api = ApiExporter()
        self._lock = RLock()

    # ------------------------------------------------------------------
    # Balances and history
    # ------------------------------------------------------------------
    def balance(self, student_id: str) -> Fraction:
        return self._ledger.balance(student_id)

    def history(self, student_id: str) -> Tuple[LedgerEntry, ...]:
        return self._ledger.history(student_id)

    def ledger_entries(self, student_id: Optional[str] = None) -> Tuple[LedgerEntry, ...]:
        return self._ledger.entries(student_id)

    def statement(self, student_id: str, *, max_entries: int = 10) -> str:
        try:
            name = self._roster.get_student(student_id).name
        except StudentNotFoundError:
            name = None
        return self._ledger.statement(student_id, student_name=name, max_entries=max_entries)

    def export_csv(self, student_id: Optional[str] = None) -> str:
        return self._ledger.export_csv(student_id)

    # ------------------------------------------------------------------
    # Eligibility
    # ------------------------------------------------------------------
    def is_eligible(self, class_name: str) -> bool:
        return self._resolver.is_eligible(class_name)

    def is_class_eligible(self, class_id: str) -> bool:
        return self._resolver.is_eligible(self._roster.get_class(class_id).name)

    def eligible_classes(self) -> Tuple[SchoolClass, ...]:
        return tuple(klass for klass in self._roster.list_classes() if self._resolver.is_eligible(klass.name))

    # ------------------------------------------------------------------
    # Rewards, penalties and enrollment
    # ------------------------------------------------------------------
    def catalog_actions(self, *, entry_type: EntryType | None = None) -> Tuple[CatalogAction, ...]:
        return self._catalog.actions(entry_type=entry_type)

    def apply_catalog_action(
        self,
        student_id: str,
        label: str,
        *,
        actor: str = "teacher",
        on: Optional[date] = None,
    ) -> LedgerEntry:
        with self._lock:
            entry = self._catalog.apply(student_id, label, on=on)
        self._audit_log.record(actor, "apply_action", student_id, details={"action": label})
        self._after_entry(entry)
        return entry

    def enroll_student(self, student_id: str, *, on: Optional[date] = None) -> Optional[LedgerEntry]:
        """Credit the welcome balance once; later calls return ``None``."""

        self._roster.get_student(student_id)
        with self._lock:
            already = self._ledger.filter(student_id=student_id, description=INITIAL_BALANCE_DESCRIPTION)
            if already:
                return None
            entry = self._ledger.post(
                student_id,
                self._settings.initial_balance,
                INITIAL_BALANCE_DESCRIPTION,
                EntryType.EARN,
                on=on,
            )
        self._after_entry(entry)
        return entry

    def record_attendance(
        self,
        class_id: str,
        on: date,
        records: Mapping[str, bool],
    ) -> Dict[str, Tuple[LedgerEntry, ...]]:
        klass = self._roster.get_class(class_id)
        if not self._resolver.is_eligible(klass.name):
            self._logger.log("attendance_skipped", class_id=class_id, date=on.isoformat())
            return {}
        outsiders = sorted(student_id for student_id in records if student_id not in klass.student_ids)
        if outsiders:
            raise StudentNotFoundError(f"Students not in class '{class_id}': {', '.join(outsiders)}.")
        with self._lock:
            posted = self._attendance.record(on, records)
        for entries in posted.values():
            for entry in entries:
                self._after_entry(entry)
        return posted

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------
    def list_store_items(self) -> Tuple[StoreItem, ...]:
        return self._inventory.list()

    def get_store_item(self, item_id: str) -> StoreItem:
        return self._inventory.get(item_id)

    def create_store_item(
        self,
        name: str,
        price: AmountLike,
        stock: int,
        *,
        description: str = "",
        image_url: Optional[str] = None,
        item_id: Optional[str] = None,
        actor: str = "admin",
    ) -> StoreItem:
        with self._lock:
            item = self._inventory.create(
                name,
                price,
                stock,
                description=description,
                image_url=image_url,
                item_id=item_id,
            )
        self._audit_log.record(actor, "create_item", item.id, details={"after": self._api.item(item)})
        self._logger.log("store_item_created", item=item.id, name=item.name, price=coins(item.price), stock=item.stock)
        return item

    def update_store_item(self, item_id: str, fields: Mapping[str, Any], *, actor: str = "admin") -> StoreItem:
        with self._lock:
            before = self._inventory.get(item_id)
            item = self._inventory.update(item_id, fields)
        self._audit_log.record(
            actor,
            "update_item",
            item_id,
            details={"before": self._api.item(before), "after": self._api.item(item)},
        )
        self._logger.log("store_item_updated", item=item_id, fields=sorted(fields))
        return item

    def delete_store_item(self, item_id: str, *, actor: str = "admin") -> None:
        with self._lock:
            before = self._inventory.get(item_id)
            self._inventory.delete(item_id)
        self._audit_log.record(actor, "delete_item", item_id, details={"before": self._api.item(before)})
        self._logger.log("store_item_deleted", item=item_id)

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------
    def quote(self, participant_ids: Iterable[str], item_id: str) -> Fraction:
        return self._processor.quote(participant_ids, item_id)

    def purchase(
        self,
        participant_ids: Iterable[str],
        item_id: str,
        *,
        actor: str = "admin",
        on: Optional[date] = None,
    ) -> PurchaseReceipt:
        participants = tuple(participant_ids)
        with self._lock:
            try:
                receipt = self._processor.purchase(participants, item_id, on=on)
            except FavocoinError as exc:
                fields: Dict[str, object] = {"item": item_id, "participants": list(participants), "reason": type(exc).__name__}
                if isinstance(exc, InsufficientFundsError):
                    fields["short"] = list(exc.participants)
                self._logger.log("purchase_rejected", **fields)
                raise
        self._audit_log.record(
            actor,
            "purchase",
            item_id,
            details={"participants": list(receipt.participant_ids), "share": str(receipt.share)},
        )
        self._logger.log(
            "purchase",
            item=receipt.item_id,
            participants=list(receipt.participant_ids),
            share=coins(receipt.share),
            remaining_stock=receipt.remaining_stock,
        )
        for entry in receipt.entries:
            self._after_entry(entry)
        self._webhooks.dispatch({"event": "purchase", **self._api.receipt(receipt)})
        return receipt

    # ------------------------------------------------------------------
    # Reporting
    # ------------------------------------------------------------------
    def dashboard(self, *, top: int = 5) -> EconomySummary:
        classes = self.eligible_classes()
        class_names = {student_id: klass.name for klass in classes for student_id in klass.student_ids}
        standings = []
        for student in self._roster.list_students():
            if student.id not in class_names:
                continue
            standings.append(
                BalanceStanding(
                    student_id=student.id,
                    name=student.name,
                    class_name=class_names[student.id],
                    balance=self._ledger.balance(student.id),
                )
            )
        standings.sort(key=lambda standing: (-standing.balance, standing.name))
        return EconomySummary(
            total_circulation=self._ledger.total_by_type(EntryType.EARN),
            total_spent=abs(self._ledger.total_by_type(EntryType.SPEND)),
            eligible_students=len(standings),
            top_students=tuple(standings[: max(top, 0)]),
        )

    def api_student(self, student_id: str) -> dict:
        return self._api.student_snapshot(student_id, self.balance(student_id), self.history(student_id))

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def roster(self) -> Roster:
        return self._roster

    @property
    def settings(self) -> EconomySettings:
        return self._settings

    @property
    def logger(self) -> StructuredLogger:
        return self._logger

    @property
    def audit_log(self) -> AuditLog:
        return self._audit_log

    @property
    def exporter(self) -> ApiExporter:
        return self._api

    def register_webhook(self, listener: Callable[[Dict[str, object]], None]) -> None:
        self._webhooks.register(listener)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _after_entry(self, entry: LedgerEntry) -> None:
        self._logger.log(
            "ledger_entry",
            student=entry.student_id,
            type=entry.type.value,
            description=entry.description,
            amount=coins(entry.amount),
        )
        self._webhooks.dispatch({"event": "ledger_entry", **self._api.entry(entry)})


__all__ = ["FavocoinBank"]
