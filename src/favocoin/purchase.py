"""Group purchases against the ledger and the store inventory."""

from __future__ import annotations

from datetime import date
from fractions import Fraction
from typing import Iterable, Optional, Tuple

from .exceptions import InsufficientFundsError, InvalidParticipantSetError, OutOfStockError
from .ledger import Ledger
from .models import EntryType, PurchaseReceipt
from .repository import FavocoinRepository
from .store import StoreInventory


def split_price(price: Fraction, participants: int) -> Fraction:
    """Return the exact share each of ``participants`` pays for ``price``."""

    if participants < 1:
        raise InvalidParticipantSetError("A purchase needs at least one participant.")
    return Fraction(price) / participants


def unique_participants(participant_ids: Iterable[str]) -> Tuple[str, ...]:
    """Drop duplicates while keeping the caller's order."""

    return tuple(dict.fromkeys(participant_ids))


class PurchaseProcessor:
    """Validate every participant before touching any state, then commit.

    One purchase buys a single unit shared by the group: each participant is
    debited ``price / N`` and the item's stock drops by exactly one.
    """

    def __init__(self, repository: FavocoinRepository, ledger: Ledger, inventory: StoreInventory) -> None:
        self._repository = repository
        self._ledger = ledger
        self._inventory = inventory

    def quote(self, participant_ids: Iterable[str], item_id: str) -> Fraction:
        participants = unique_participants(participant_ids)
        item = self._inventory.get(item_id)
        return split_price(item.price, len(participants))

    def shortfalls(self, participants: Tuple[str, ...], share: Fraction) -> Tuple[str, ...]:
        return tuple(student_id for student_id in participants if self._ledger.balance(student_id) < share)

    def purchase(
        self,
        participant_ids: Iterable[str],
        item_id: str,
        *,
        on: Optional[date] = None,
    ) -> PurchaseReceipt:
        participants = unique_participants(participant_ids)
        if not participants:
            raise InvalidParticipantSetError("A purchase needs at least one participant.")
        item = self._inventory.get(item_id)
        if item.stock <= 0:
            raise OutOfStockError(item_id)
        share = split_price(item.price, len(participants))
        short = self.shortfalls(participants, share)
        if short:
            raise InsufficientFundsError(short, share)

        with self._repository.atomic():
            entries = tuple(
                self._ledger.post(student_id, -share, item.name, EntryType.SPEND, on=on)
                for student_id in participants
            )
            updated = self._repository.update_store_item(item.id, {"stock": item.stock - 1})
        return PurchaseReceipt(
            item_id=item.id,
            item_name=item.name,
            share=share,
            entries=entries,
            remaining_stock=updated.stock,
        )


__all__ = ["PurchaseProcessor", "split_price", "unique_participants"]
