from decimal import Decimal
from fractions import Fraction

import pytest

from favocoin.exceptions import ItemNotFoundError, ValidationError
from favocoin.ledger import Ledger
from favocoin.models import EntryType
from favocoin.repository import InMemoryRepository
from favocoin.store import StoreInventory


def test_create_and_list_items() -> None:
    inventory = StoreInventory(InMemoryRepository())

    item = inventory.create("Caneta Colorida Neon", 50, 20, description="Caneta gel.", item_id="item-1")

    assert item.id == "item-1"
    assert item.price == 50
    assert [listed.name for listed in inventory.list()] == ["Caneta Colorida Neon"]
    assert inventory.get("item-1").stock == 20


@pytest.mark.parametrize(
    "price, stock",
    [(-1, 5), (10, -1), (10, 2.5), ("abc", 1), (10, True), (Decimal("Infinity"), 1), (Decimal("NaN"), 1)],
)
def test_create_rejects_malformed_fields(price, stock) -> None:
    inventory = StoreInventory(InMemoryRepository())

    with pytest.raises(ValidationError):
        inventory.create("Item", price, stock)
    assert inventory.list() == ()


def test_create_rejects_blank_name() -> None:
    with pytest.raises(ValidationError):
        StoreInventory(InMemoryRepository()).create("   ", 10, 1)


def test_zero_price_and_stock_are_allowed() -> None:
    item = StoreInventory(InMemoryRepository()).create("Brinde", 0, 0)

    assert item.price == 0
    assert item.stock == 0


def test_update_item_fields() -> None:
    inventory = StoreInventory(InMemoryRepository())
    inventory.create("Passaporte do Lanche", 100, 10, item_id="item-2")

    updated = inventory.update("item-2", {"price": "99.5", "stock": 3, "image_url": ""})

    assert updated.price == Fraction(199, 2)
    assert updated.stock == 3
    assert updated.image_url is None
    assert inventory.get("item-2").price == Fraction(199, 2)


def test_update_validation_leaves_item_untouched() -> None:
    inventory = StoreInventory(InMemoryRepository())
    inventory.create("Dia sem Uniforme", 150, 50, item_id="item-3")

    with pytest.raises(ValidationError):
        inventory.update("item-3", {"stock": -4})
    with pytest.raises(ValidationError):
        inventory.update("item-3", {"colour": "blue"})
    with pytest.raises(ItemNotFoundError):
        inventory.update("missing", {"stock": 1})

    assert inventory.get("item-3").stock == 50


def test_returned_items_are_copies() -> None:
    inventory = StoreInventory(InMemoryRepository())
    item = inventory.create("Caneta", 50, 20)

    item.stock = 0

    assert inventory.get(item.id).stock == 20


def test_delete_keeps_ledger_history() -> None:
    repository = InMemoryRepository()
    inventory = StoreInventory(repository)
    ledger = Ledger(repository)
    item = inventory.create("Sessão de Cinema", 500, 1)
    ledger.post("ava", -500, item.name, EntryType.SPEND)

    inventory.delete(item.id)

    assert inventory.list() == ()
    assert ledger.entries("ava")[0].description == "Sessão de Cinema"
    with pytest.raises(ItemNotFoundError):
        inventory.delete(item.id)
