"""HTTP frontend and SQL backend for Favocoin.

Both submodules need the ``web`` extra. They are imported on first attribute
access, so ``favocoin.webapp.SQLRepository`` only pulls in SQLModel while
``favocoin.webapp.app`` also builds the FastAPI application.
"""
from __future__ import annotations

from importlib import import_module
from types import ModuleType
from typing import Any, Dict, List

_WEB_DEPENDENCIES = frozenset({"fastapi", "starlette", "pydantic", "sqlmodel", "sqlalchemy"})
_SUBMODULES = ("persistence", "application")

_EXPORTS: Dict[str, str] = {
    "LedgerEntryRecord": "persistence",
    "SQLRepository": "persistence",
    "StoreItemRecord": "persistence",
    "create_db_and_tables": "persistence",
    "make_engine": "persistence",
    "app": "application",
    "build_default_bank": "application",
    "create_app": "application",
}

__all__: List[str] = sorted(_EXPORTS)


def _submodule(name: str) -> ModuleType:
    try:
        return import_module(f".{name}", __name__)
    except ModuleNotFoundError as exc:  # pragma: no cover - depends on installed extras
        if exc.name in _WEB_DEPENDENCIES:
            raise RuntimeError(
                f"favocoin.webapp.{name} needs {exc.name}; install it with `pip install favocoin[web]`."
            ) from exc
        raise


def __getattr__(name: str) -> Any:
    if name in _SUBMODULES:
        return _submodule(name)
    if name not in _EXPORTS:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
    return getattr(_submodule(_EXPORTS[name]), name)


def __dir__() -> List[str]:
    return sorted(set(globals()) | set(__all__) | set(_SUBMODULES))
