"""Custom exception hierarchy for the Favocoin package."""

from __future__ import annotations

from fractions import Fraction
from typing import Iterable, Tuple


class FavocoinError(Exception):
    """Base class for all Favocoin specific errors."""


class ValidationError(FavocoinError, ValueError):
    """Raised when store item fields are malformed."""


class ItemNotFoundError(FavocoinError):
    """Raised when a store item lookup fails."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Store item '{item_id}' does not exist.")
        self.item_id = item_id


class OutOfStockError(FavocoinError):
    """Raised when purchasing an item with no units left."""

    def __init__(self, item_id: str) -> None:
        super().__init__(f"Store item '{item_id}' is out of stock.")
        self.item_id = item_id


class InvalidParticipantSetError(FavocoinError, ValueError):
    """Raised when a purchase is attempted without any participants."""


class InsufficientFundsError(FavocoinError):
    """Raised when one or more participants cannot cover their share."""

    def __init__(self, participants: Iterable[str], share: Fraction) -> None:
        self.participants: Tuple[str, ...] = tuple(participants)
        self.share = share
        names = ", ".join(self.participants)
        super().__init__(f"Insufficient favocoins for: {names} (share {float(share):.2f}).")


class StudentNotFoundError(FavocoinError):
    """Raised when the roster has no record of a student."""


class ClassNotFoundError(FavocoinError):
    """Raised when the roster has no record of a class."""


class UnknownActionError(FavocoinError):
    """Raised when a catalog action label is not part of the table."""
