"""SQLModel persistence backend for the favocoin ledger and store."""
from __future__ import annotations

import threading
from contextlib import contextmanager
from datetime import date
from fractions import Fraction
from typing import Any, Iterator, List, Mapping, Optional

from sqlalchemy.engine import Engine
from sqlalchemy.pool import StaticPool
from sqlmodel import Field, Session, SQLModel, create_engine, select

from ..exceptions import ItemNotFoundError
from ..models import EntryType, LedgerEntry, StoreItem


# ---------------------------------------------------------------------------
# Database models
# ---------------------------------------------------------------------------
class LedgerEntryRecord(SQLModel, table=True):
    __tablename__ = "ledger_entry"

    id: Optional[int] = Field(default=None, primary_key=True)
    entry_id: str = Field(index=True, unique=True)
    student_id: str = Field(index=True)
    amount_numerator: int
    amount_denominator: int = 1
    description: str
    type: str  # earn|spend|penalty
    posted_on: date


class StoreItemRecord(SQLModel, table=True):
    __tablename__ = "store_item"

    id: str = Field(primary_key=True)
    name: str
    description: str = ""
    price_numerator: int
    price_denominator: int = 1
    stock: int = 0
    image_url: Optional[str] = None


def _entry_from_record(record: LedgerEntryRecord) -> LedgerEntry:
    return LedgerEntry(
        id=record.entry_id,
        student_id=record.student_id,
        amount=Fraction(record.amount_numerator, record.amount_denominator),
        description=record.description,
        type=EntryType(record.type),
        date=record.posted_on,
    )


def _item_from_record(record: StoreItemRecord) -> StoreItem:
    return StoreItem(
        id=record.id,
        name=record.name,
        description=record.description,
        price=Fraction(record.price_numerator, record.price_denominator),
        stock=record.stock,
        image_url=record.image_url,
    )


def _apply_item_fields(record: StoreItemRecord, fields: Mapping[str, Any]) -> None:
    for key, value in fields.items():
        if key == "price":
            price = Fraction(value)
            record.price_numerator = price.numerator
            record.price_denominator = price.denominator
        else:
            setattr(record, key, value)


# ---------------------------------------------------------------------------
# Engine helpers
# ---------------------------------------------------------------------------
def make_engine(url: str) -> Engine:
    if url.startswith("sqlite"):
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url in {"sqlite://", "sqlite:///:memory:"}:
            kwargs["poolclass"] = StaticPool
        return create_engine(url, echo=False, **kwargs)
    return create_engine(url, echo=False)


def create_db_and_tables(engine: Engine) -> None:
    SQLModel.metadata.create_all(engine)


# ---------------------------------------------------------------------------
# Repository
# ---------------------------------------------------------------------------
class SQLRepository:
    """Ledger and store catalog stored through SQLModel.

    Amounts are kept as numerator/denominator pairs so split prices survive a
    round trip through the database without rounding.
    """

    def __init__(self, engine: Engine) -> None:
        self.engine = engine
        self._local = threading.local()
        create_db_and_tables(engine)

    @contextmanager
    def _session(self) -> Iterator[Session]:
        active: Optional[Session] = getattr(self._local, "session", None)
        if active is not None:
            yield active
            return
        with Session(self.engine, expire_on_commit=False) as session:
            yield session
            session.commit()

    @contextmanager
    def atomic(self) -> Iterator[None]:
        if getattr(self._local, "session", None) is not None:
            yield
            return
        with Session(self.engine, expire_on_commit=False) as session:
            self._local.session = session
            try:
                yield
                session.commit()
            except BaseException:
                session.rollback()
                raise
            finally:
                self._local.session = None

    # Ledger ---------------------------------------------------------------
    def append_ledger_entry(self, entry: LedgerEntry) -> LedgerEntry:
        record = LedgerEntryRecord(
            entry_id=entry.id,
            student_id=entry.student_id,
            amount_numerator=entry.amount.numerator,
            amount_denominator=entry.amount.denominator,
            description=entry.description,
            type=entry.type.value,
            posted_on=entry.date,
        )
        with self._session() as session:
            session.add(record)
            session.flush()
        return entry

    def list_ledger_entries(self, student_id: Optional[str] = None) -> List[LedgerEntry]:
        query = select(LedgerEntryRecord)
        if student_id is not None:
            query = query.where(LedgerEntryRecord.student_id == student_id)
        query = query.order_by(LedgerEntryRecord.id)
        with self._session() as session:
            return [_entry_from_record(record) for record in session.exec(query).all()]

    # Store ----------------------------------------------------------------
    def list_store_items(self) -> List[StoreItem]:
        with self._session() as session:
            records = session.exec(select(StoreItemRecord).order_by(StoreItemRecord.name)).all()
            return [_item_from_record(record) for record in records]

    def get_store_item(self, item_id: str) -> Optional[StoreItem]:
        with self._session() as session:
            record = session.get(StoreItemRecord, item_id)
            return _item_from_record(record) if record is not None else None

    def create_store_item(self, item: StoreItem) -> StoreItem:
        record = StoreItemRecord(
            id=item.id,
            name=item.name,
            description=item.description,
            price_numerator=item.price.numerator,
            price_denominator=item.price.denominator,
            stock=item.stock,
            image_url=item.image_url,
        )
        with self._session() as session:
            session.add(record)
            session.flush()
            return _item_from_record(record)

    def update_store_item(self, item_id: str, fields: Mapping[str, Any]) -> StoreItem:
        with self._session() as session:
            record = session.get(StoreItemRecord, item_id)
            if record is None:
                raise ItemNotFoundError(item_id)
            _apply_item_fields(record, fields)
            session.add(record)
            session.flush()
            return _item_from_record(record)

    def delete_store_item(self, item_id: str) -> None:
        with self._session() as session:
            record = session.get(StoreItemRecord, item_id)
            if record is None:
                raise ItemNotFoundError(item_id)
            session.delete(record)
            session.flush()


__all__ = [
    "LedgerEntryRecord",
    "SQLRepository",
    "StoreItemRecord",
    "create_db_and_tables",
    "make_engine",
]
