"""Store catalog and inventory management."""

from __future__ import annotations

from fractions import Fraction
from numbers import Integral
from typing import Any, Mapping, Optional, Tuple

from .exceptions import ItemNotFoundError, ValidationError
from .models import StoreItem
from .money import AmountLike, to_amount
from .repository import FavocoinRepository

EDITABLE_FIELDS = frozenset({"name", "description", "price", "stock", "image_url"})


def _validated_price(value: AmountLike) -> Fraction:
    try:
        price = to_amount(value)
    except (TypeError, ValueError, ZeroDivisionError, OverflowError) as exc:
        raise ValidationError(f"Invalid price: {value!r}") from exc
    if price < 0:
        raise ValidationError("price must be zero or greater.")
    return price


def _validated_stock(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, Integral):
        raise ValidationError(f"stock must be a whole number, got {value!r}.")
    if value < 0:
        raise ValidationError("stock must be zero or greater.")
    return int(value)


def _validated_name(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("name must be a non-empty string.")
    return value.strip()


class StoreInventory:
    """Create, edit and remove items that students can buy."""

    def __init__(self, repository: FavocoinRepository) -> None:
        self._repository = repository

    def create(
        self,
        name: str,
        price: AmountLike,
        stock: int,
        *,
        description: str = "",
        image_url: Optional[str] = None,
        item_id: Optional[str] = None,
    ) -> StoreItem:
        fields: dict[str, Any] = dict(
            name=_validated_name(name),
            price=_validated_price(price),
            stock=_validated_stock(stock),
            description=description or "",
            image_url=image_url or None,
        )
        if item_id is not None:
            fields["id"] = item_id
        return self._repository.create_store_item(StoreItem(**fields))

    def get(self, item_id: str) -> StoreItem:
        item = self._repository.get_store_item(item_id)
        if item is None:
            raise ItemNotFoundError(item_id)
        return item

    def list(self) -> Tuple[StoreItem, ...]:
        return tuple(self._repository.list_store_items())

    def update(self, item_id: str, fields: Mapping[str, Any]) -> StoreItem:
        self.get(item_id)
        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(f"Unknown store item fields: {', '.join(sorted(unknown))}.")
        changes: dict[str, Any] = {}
        for key, value in fields.items():
            if key == "name":
                changes[key] = _validated_name(value)
            elif key == "price":
                changes[key] = _validated_price(value)
            elif key == "stock":
                changes[key] = _validated_stock(value)
            elif key == "image_url":
                changes[key] = value or None
            else:
                changes[key] = value or ""
        return self._repository.update_store_item(item_id, changes)

    def delete(self, item_id: str) -> None:
        """Remove an item; past ledger entries only keep its name."""

        self.get(item_id)
        self._repository.delete_store_item(item_id)


__all__ = ["EDITABLE_FIELDS", "StoreInventory"]
