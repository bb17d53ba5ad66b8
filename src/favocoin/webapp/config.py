"""Configuration constants for the Favocoin web service."""
from __future__ import annotations

import os

from dotenv import load_dotenv

from ..config import EconomySettings

load_dotenv()

# The ledger lives in process memory unless a database URL is configured.
DATABASE_URL = os.environ.get("FAVOCOIN_DATABASE_URL", "sqlite://")
SEED_DEMO = os.environ.get("FAVOCOIN_SEED_DEMO", "1").strip().lower() not in {"0", "false", "no", ""}
APP_TITLE = os.environ.get("FAVOCOIN_APP_TITLE", "Favocoin Bank & Store")
ECONOMY = EconomySettings.from_env()

__all__ = ["APP_TITLE", "DATABASE_URL", "ECONOMY", "SEED_DEMO"]
