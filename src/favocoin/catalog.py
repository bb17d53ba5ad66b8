"""Fixed table of rewards and penalties teachers can apply to students."""

from __future__ import annotations

from datetime import date
from typing import Dict, Iterable, Optional, Tuple

from .exceptions import UnknownActionError
from .ledger import Ledger
from .models import CatalogAction, EntryType, LedgerEntry

DEFAULT_ACTIONS: Tuple[CatalogAction, ...] = (
    CatalogAction("Realizar Tarefa de Casa", 10, EntryType.EARN),
    CatalogAction("Bom Comportamento", 10, EntryType.EARN),
    CatalogAction("Realizar Tarefa em Aula", 10, EntryType.EARN),
    CatalogAction("Contribuição/Ideias", 20, EntryType.EARN),
    CatalogAction("Participar de Eventos", 30, EntryType.EARN),
    CatalogAction("Ajudar Colega", 10, EntryType.EARN),
    CatalogAction("Não Fez Tarefa de Casa", -10, EntryType.PENALTY),
    CatalogAction("Mau Comportamento", -20, EntryType.PENALTY),
    CatalogAction("Não Fez Tarefa em Aula", -10, EntryType.PENALTY),
    CatalogAction("Falta Injustificada", -10, EntryType.PENALTY),
    CatalogAction("Desrespeitar Colega", -20, EntryType.PENALTY),
    CatalogAction("Não Participar Eventos", -20, EntryType.PENALTY),
    CatalogAction("Desrespeitar Funcionário", -50, EntryType.PENALTY),
)


class ActionCatalog:
    """Look up named actions and post them to the ledger.

    Applying an action twice posts two entries; repeated behaviour is
    rewarded or penalised each time it happens.
    """

    def __init__(self, ledger: Ledger, actions: Iterable[CatalogAction] = DEFAULT_ACTIONS) -> None:
        self._ledger = ledger
        self._actions: Dict[str, CatalogAction] = {}
        for action in actions:
            if action.label in self._actions:
                raise ValueError(f"Duplicate catalog action '{action.label}'.")
            self._actions[action.label] = action

    def actions(self, *, entry_type: EntryType | None = None) -> Tuple[CatalogAction, ...]:
        values = self._actions.values()
        if entry_type is not None:
            return tuple(action for action in values if action.type is entry_type)
        return tuple(values)

    def get(self, label: str) -> CatalogAction:
        try:
            return self._actions[label]
        except KeyError as exc:
            raise UnknownActionError(f"Catalog action '{label}' does not exist.") from exc

    def apply(self, student_id: str, label: str, *, on: Optional[date] = None) -> LedgerEntry:
        action = self.get(label)
        return self._ledger.post(student_id, action.amount, action.label, action.type, on=on)


__all__ = ["ActionCatalog", "DEFAULT_ACTIONS"]
