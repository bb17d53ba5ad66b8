"""Data-access surfaces consumed by the Favocoin engine.

The engine never reaches for global state: a :class:`FavocoinRepository` (ledger
and store items) and a :class:`Roster` (students and classes) are passed in
explicitly so alternative backends can be substituted.
"""

from __future__ import annotations

from collections import defaultdict
from contextlib import contextmanager
from dataclasses import replace
from typing import Any, Dict, Iterable, Iterator, List, Mapping, Optional, Protocol, Sequence, Tuple

from .exceptions import ClassNotFoundError, ItemNotFoundError, StudentNotFoundError
from .models import LedgerEntry, SchoolClass, StoreItem, Student


class FavocoinRepository(Protocol):
    """Persistence surface for the ledger and the store catalog."""

    def append_ledger_entry(self, entry: LedgerEntry) -> LedgerEntry: ...

    def list_ledger_entries(self, student_id: Optional[str] = None) -> Sequence[LedgerEntry]: ...

    def list_store_items(self) -> Sequence[StoreItem]: ...

    def get_store_item(self, item_id: str) -> Optional[StoreItem]: ...

    def create_store_item(self, item: StoreItem) -> StoreItem: ...

    def update_store_item(self, item_id: str, fields: Mapping[str, Any]) -> StoreItem: ...

    def delete_store_item(self, item_id: str) -> None: ...

    def atomic(self) -> Any:
        """Context manager grouping writes that must land together."""


class Roster(Protocol):
    """Read-only view of students and classes owned by the school roster."""

    def get_student(self, student_id: str) -> Student: ...

    def get_class(self, class_id: str) -> SchoolClass: ...

    def list_students(self) -> Sequence[Student]: ...

    def list_classes(self) -> Sequence[SchoolClass]: ...


class InMemoryRepository:
    """Keep the ledger and store items in process memory.

    Ledger entries are indexed per student so balance queries do not replay
    unrelated history.
    """

    def __init__(
        self,
        *,
        entries: Iterable[LedgerEntry] = (),
        items: Iterable[StoreItem] = (),
    ) -> None:
        self._entries: List[LedgerEntry] = []
        self._by_student: Dict[str, List[LedgerEntry]] = defaultdict(list)
        self._items: Dict[str, StoreItem] = {}
        for entry in entries:
            self.append_ledger_entry(entry)
        for item in items:
            self.create_store_item(item)

    # Ledger ---------------------------------------------------------------
    def append_ledger_entry(self, entry: LedgerEntry) -> LedgerEntry:
        self._entries.append(entry)
        self._by_student[entry.student_id].append(entry)
        return entry

    def list_ledger_entries(self, student_id: Optional[str] = None) -> Tuple[LedgerEntry, ...]:
        if student_id is None:
            return tuple(self._entries)
        return tuple(self._by_student.get(student_id, ()))

    # Store ----------------------------------------------------------------
    def list_store_items(self) -> Tuple[StoreItem, ...]:
        return tuple(replace(item) for item in self._items.values())

    def get_store_item(self, item_id: str) -> Optional[StoreItem]:
        item = self._items.get(item_id)
        return replace(item) if item is not None else None

    def create_store_item(self, item: StoreItem) -> StoreItem:
        self._items[item.id] = replace(item)
        return replace(item)

    def update_store_item(self, item_id: str, fields: Mapping[str, Any]) -> StoreItem:
        current = self._items.get(item_id)
        if current is None:
            raise ItemNotFoundError(item_id)
        updated = replace(current, **dict(fields))
        self._items[item_id] = updated
        return replace(updated)

    def delete_store_item(self, item_id: str) -> None:
        if self._items.pop(item_id, None) is None:
            raise ItemNotFoundError(item_id)

    @contextmanager
    def atomic(self) -> Iterator[None]:
        entry_count = len(self._entries)
        items = {key: replace(value) for key, value in self._items.items()}
        try:
            yield
        except BaseException:
            for entry in reversed(self._entries[entry_count:]):
                self._by_student[entry.student_id].pop()
            del self._entries[entry_count:]
            self._items = items
            raise


class InMemoryRoster:
    """Simple roster used by demos, tests and the bundled web application."""

    def __init__(
        self,
        *,
        students: Iterable[Student] = (),
        classes: Iterable[SchoolClass] = (),
    ) -> None:
        self._students: Dict[str, Student] = {student.id: student for student in students}
        self._classes: Dict[str, SchoolClass] = {klass.id: klass for klass in classes}

    def add_class(self, school_class: SchoolClass) -> SchoolClass:
        self._classes[school_class.id] = school_class
        return school_class

    def add_student(self, student: Student) -> Student:
        self._students[student.id] = student
        if student.class_id is not None:
            klass = self._classes.get(student.class_id)
            if klass is None:
                raise ClassNotFoundError(f"Class '{student.class_id}' does not exist.")
            if student.id not in klass.student_ids:
                self._classes[klass.id] = replace(klass, student_ids=klass.student_ids + (student.id,))
        return student

    def get_student(self, student_id: str) -> Student:
        try:
            return self._students[student_id]
        except KeyError as exc:
            raise StudentNotFoundError(f"Student '{student_id}' does not exist.") from exc

    def get_class(self, class_id: str) -> SchoolClass:
        try:
            return self._classes[class_id]
        except KeyError as exc:
            raise ClassNotFoundError(f"Class '{class_id}' does not exist.") from exc

    def list_students(self) -> Tuple[Student, ...]:
        return tuple(self._students.values())

    def list_classes(self) -> Tuple[SchoolClass, ...]:
        return tuple(self._classes.values())


__all__ = ["FavocoinRepository", "InMemoryRepository", "InMemoryRoster", "Roster"]
