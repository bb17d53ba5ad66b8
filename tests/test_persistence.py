from datetime import date
from fractions import Fraction

import pytest

pytest.importorskip("sqlmodel")

from favocoin.exceptions import InsufficientFundsError, ItemNotFoundError  # noqa: E402
from favocoin.models import EntryType, LedgerEntry, StoreItem  # noqa: E402
from favocoin.service import FavocoinBank  # noqa: E402
from favocoin.webapp.persistence import SQLRepository, make_engine  # noqa: E402


@pytest.fixture()
def repository() -> SQLRepository:
    return SQLRepository(make_engine("sqlite://"))


def test_ledger_entries_round_trip_exact_amounts(repository: SQLRepository) -> None:
    entry = LedgerEntry("ava", Fraction(-100, 3), "Passaporte do Lanche", EntryType.SPEND, date(2025, 6, 1))

    repository.append_ledger_entry(entry)
    repository.append_ledger_entry(LedgerEntry("ben", 30, "Saldo Inicial", EntryType.EARN))

    stored = repository.list_ledger_entries("ava")
    assert stored == [entry]
    assert stored[0].amount == Fraction(-100, 3)
    assert len(repository.list_ledger_entries()) == 2


def test_store_items_crud(repository: SQLRepository) -> None:
    repository.create_store_item(StoreItem("Caneta", 50, 20, id="item-1"))

    updated = repository.update_store_item("item-1", {"price": Fraction(99, 2), "stock": 19})
    assert updated.price == Fraction(99, 2)
    assert repository.get_store_item("item-1").stock == 19
    assert [item.id for item in repository.list_store_items()] == ["item-1"]

    repository.delete_store_item("item-1")
    assert repository.get_store_item("item-1") is None
    with pytest.raises(ItemNotFoundError):
        repository.update_store_item("item-1", {"stock": 1})
    with pytest.raises(ItemNotFoundError):
        repository.delete_store_item("item-1")


def test_atomic_scope_rolls_back(repository: SQLRepository) -> None:
    repository.create_store_item(StoreItem("Kit", 30, 2, id="kit"))

    with pytest.raises(RuntimeError):
        with repository.atomic():
            repository.append_ledger_entry(LedgerEntry("ava", -15, "Kit", EntryType.SPEND))
            repository.update_store_item("kit", {"stock": 1})
            raise RuntimeError("boom")

    assert repository.list_ledger_entries() == []
    assert repository.get_store_item("kit").stock == 2


def test_bank_on_sql_backend(repository: SQLRepository) -> None:
    bank = FavocoinBank(repository)
    bank.apply_catalog_action("A", "Contribuição/Ideias")
    bank.apply_catalog_action("B", "Contribuição/Ideias")
    item = bank.create_store_item("Kit", 30, 2)

    bank.purchase(["A", "B"], item.id)
    with pytest.raises(InsufficientFundsError):
        bank.purchase(["A", "B"], item.id)

    assert bank.balance("A") == 5
    assert bank.get_store_item(item.id).stock == 1
    assert len(bank.ledger_entries()) == 4
