"""Grade-band gate deciding which classes take part in the favocoin economy."""

from __future__ import annotations

from typing import Iterable, Sequence, Tuple

DEFAULT_ELIGIBLE_TOKENS: Tuple[str, ...] = ("1º", "2º", "3º", "4º", "5º")


class EligibilityResolver:
    """Match class names against ordinal grade tokens.

    The match is a case-insensitive substring test, so ``"3º Ano A"`` is
    eligible while early-childhood tracks such as ``"Creche III"`` are not.
    """

    def __init__(self, tokens: Iterable[str] = DEFAULT_ELIGIBLE_TOKENS) -> None:
        cleaned = tuple(token.strip().casefold() for token in tokens if token and token.strip())
        if not cleaned:
            raise ValueError("At least one eligibility token is required.")
        self._tokens = cleaned

    @property
    def tokens(self) -> Tuple[str, ...]:
        return self._tokens

    def is_eligible(self, class_name: str) -> bool:
        name = (class_name or "").casefold()
        return any(token in name for token in self._tokens)

    def filter_names(self, class_names: Sequence[str]) -> Tuple[str, ...]:
        return tuple(name for name in class_names if self.is_eligible(name))


def is_eligible(class_name: str, tokens: Iterable[str] = DEFAULT_ELIGIBLE_TOKENS) -> bool:
    """Return ``True`` when ``class_name`` carries one of the grade ``tokens``."""

    return EligibilityResolver(tokens).is_eligible(class_name)


__all__ = ["DEFAULT_ELIGIBLE_TOKENS", "EligibilityResolver", "is_eligible"]
