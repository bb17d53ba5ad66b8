from fractions import Fraction

import pytest

from favocoin.exceptions import (
    InsufficientFundsError,
    InvalidParticipantSetError,
    ItemNotFoundError,
    OutOfStockError,
)
from favocoin.ledger import Ledger
from favocoin.models import EntryType
from favocoin.purchase import PurchaseProcessor, split_price
from favocoin.repository import InMemoryRepository
from favocoin.store import StoreInventory


def make_processor(**balances):
    repository = InMemoryRepository()
    ledger = Ledger(repository)
    inventory = StoreInventory(repository)
    for student_id, amount in balances.items():
        ledger.post(student_id, amount, "Saldo Inicial", EntryType.EARN)
    return PurchaseProcessor(repository, ledger, inventory), ledger, inventory


def test_group_purchase_splits_price_and_decrements_once() -> None:
    processor, ledger, inventory = make_processor(A=20, B=20)
    item = inventory.create("Kit", 30, 2)

    receipt = processor.purchase(["A", "B"], item.id)

    assert receipt.share == 15
    assert receipt.remaining_stock == 1
    assert inventory.get(item.id).stock == 1
    assert ledger.balance("A") == 5
    assert ledger.balance("B") == 5
    assert all(entry.type is EntryType.SPEND for entry in receipt.entries)
    assert all(entry.description == "Kit" for entry in receipt.entries)


def test_single_buyer_short_of_funds_changes_nothing() -> None:
    processor, ledger, inventory = make_processor(A=10)
    item = inventory.create("Kit", 30, 1)
    entries_before = len(ledger.entries())

    with pytest.raises(InsufficientFundsError) as excinfo:
        processor.purchase(["A"], item.id)

    assert excinfo.value.participants == ("A",)
    assert inventory.get(item.id).stock == 1
    assert len(ledger.entries()) == entries_before


def test_every_short_participant_is_reported() -> None:
    processor, ledger, inventory = make_processor(A=5, B=100, C=1)
    item = inventory.create("Sessão de Cinema", 30, 1)

    with pytest.raises(InsufficientFundsError) as excinfo:
        processor.purchase(["A", "B", "C"], item.id)

    assert excinfo.value.participants == ("A", "C")
    assert excinfo.value.share == 10
    assert ledger.balance("B") == 100
    assert inventory.get(item.id).stock == 1


def test_fractional_shares_are_exact() -> None:
    processor, ledger, inventory = make_processor(A=50, B=50, C=50)
    item = inventory.create("Passaporte do Lanche", 100, 10)

    receipt = processor.purchase(["A", "B", "C"], item.id)

    assert receipt.share == Fraction(100, 3)
    assert [entry.amount for entry in receipt.entries] == [Fraction(-100, 3)] * 3
    assert sum(entry.amount for entry in receipt.entries) == -100
    assert receipt.total_charged == 100
    assert ledger.balance("A") == Fraction(50, 3)


def test_exact_balance_covers_share() -> None:
    processor, ledger, inventory = make_processor(A=50)
    item = inventory.create("Caneta", 50, 1)

    processor.purchase(["A"], item.id)

    assert ledger.balance("A") == 0


def test_out_of_stock_and_missing_item() -> None:
    processor, ledger, inventory = make_processor(A=1000)
    item = inventory.create("Raro", 1, 0)

    with pytest.raises(OutOfStockError):
        processor.purchase(["A"], item.id)
    with pytest.raises(ItemNotFoundError):
        processor.purchase(["A"], "nope")
    assert len(ledger.entries()) == 1


def test_empty_and_duplicate_participants() -> None:
    processor, ledger, inventory = make_processor(A=30)
    item = inventory.create("Kit", 30, 5)

    with pytest.raises(InvalidParticipantSetError):
        processor.purchase([], item.id)

    receipt = processor.purchase(["A", "A"], item.id)
    assert receipt.participant_ids == ("A",)
    assert receipt.share == 30
    assert ledger.balance("A") == 0


def test_failure_during_commit_rolls_back() -> None:
    processor, ledger, inventory = make_processor(A=20, B=20)
    item = inventory.create("Kit", 30, 2)
    repository = processor._repository
    original = repository.update_store_item

    def broken_update(item_id, fields):
        raise RuntimeError("disk full")

    repository.update_store_item = broken_update
    with pytest.raises(RuntimeError):
        processor.purchase(["A", "B"], item.id)
    repository.update_store_item = original

    assert ledger.balance("A") == 20
    assert ledger.entries("B")[-1].type is EntryType.EARN
    assert inventory.get(item.id).stock == 2


def test_quote_and_split_price() -> None:
    processor, _ledger, inventory = make_processor()
    item = inventory.create("Kit", 10, 1)

    assert processor.quote(["A", "B", "C"], item.id) == Fraction(10, 3)
    with pytest.raises(InvalidParticipantSetError):
        split_price(Fraction(10), 0)
