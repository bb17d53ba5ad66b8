"""Economy settings read from the environment (and an optional ``.env`` file)."""
from __future__ import annotations

import os
from dataclasses import dataclass, field
from fractions import Fraction
from pathlib import Path
from typing import Mapping, Optional, Tuple

from dotenv import load_dotenv

from .eligibility import DEFAULT_ELIGIBLE_TOKENS
from .money import to_amount

load_dotenv()

INITIAL_BALANCE_DESCRIPTION = "Saldo Inicial"


def _tokens(raw: Optional[str]) -> Tuple[str, ...]:
    if not raw:
        return DEFAULT_ELIGIBLE_TOKENS
    parsed = tuple(token.strip() for token in raw.split(",") if token.strip())
    return parsed or DEFAULT_ELIGIBLE_TOKENS


@dataclass(frozen=True, slots=True)
class EconomySettings:
    initial_balance: Fraction = Fraction(30)
    attendance_reward: Fraction = Fraction(10)
    absence_penalty: Fraction = Fraction(5)
    eligible_tokens: Tuple[str, ...] = field(default=DEFAULT_ELIGIBLE_TOKENS)
    log_path: Optional[Path] = None

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "EconomySettings":
        env = os.environ if environ is None else environ
        log_path = env.get("FAVOCOIN_LOG_PATH")
        return cls(
            initial_balance=to_amount(env.get("FAVOCOIN_INITIAL_BALANCE", "30")),
            attendance_reward=to_amount(env.get("FAVOCOIN_ATTENDANCE_REWARD", "10")),
            absence_penalty=to_amount(env.get("FAVOCOIN_ABSENCE_PENALTY", "5")),
            eligible_tokens=_tokens(env.get("FAVOCOIN_ELIGIBLE_TOKENS")),
            log_path=Path(log_path) if log_path else None,
        )


__all__ = ["EconomySettings", "INITIAL_BALANCE_DESCRIPTION"]
