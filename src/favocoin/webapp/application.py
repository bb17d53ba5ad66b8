"""FastAPI frontend for the Favocoin bank and store.

JSON endpoints cover balances, reward/penalty actions, attendance, the store
catalog and group purchases. ``create_app`` wires an application around any
:class:`~favocoin.service.FavocoinBank`; the module level ``app`` uses the
SQLModel backend and the demo roster for ``uvicorn favocoin.webapp:app``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Dict, List, Optional, Type

from fastapi import FastAPI, Query, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel, Field

from ..demo import demo_roster, seed_demo
from ..exceptions import (
    ClassNotFoundError,
    FavocoinError,
    InsufficientFundsError,
    InvalidParticipantSetError,
    ItemNotFoundError,
    OutOfStockError,
    StudentNotFoundError,
    UnknownActionError,
    ValidationError,
)
from ..service import FavocoinBank
from .config import APP_TITLE, DATABASE_URL, ECONOMY, SEED_DEMO
from .persistence import SQLRepository, make_engine

ERROR_STATUS: Dict[Type[FavocoinError], int] = {
    ItemNotFoundError: 404,
    StudentNotFoundError: 404,
    ClassNotFoundError: 404,
    UnknownActionError: 404,
    OutOfStockError: 409,
    InsufficientFundsError: 409,
    InvalidParticipantSetError: 422,
    ValidationError: 422,
}


# ---------------------------------------------------------------------------
# Request bodies
# ---------------------------------------------------------------------------
class ActionRequest(BaseModel):
    label: str
    actor: str = "teacher"


class AttendanceRequest(BaseModel):
    day: date
    records: Dict[str, bool]


class ItemCreate(BaseModel):
    name: str
    price: Decimal
    stock: int
    description: str = ""
    image_url: Optional[str] = None
    id: Optional[str] = None


class ItemUpdate(BaseModel):
    name: Optional[str] = None
    price: Optional[Decimal] = None
    stock: Optional[int] = None
    description: Optional[str] = None
    image_url: Optional[str] = None


class PurchaseRequest(BaseModel):
    participant_ids: List[str] = Field(default_factory=list)
    item_id: str
    actor: str = "admin"


def _status_for(exc: FavocoinError) -> int:
    for error_type, status in ERROR_STATUS.items():
        if isinstance(exc, error_type):
            return status
    return 400


def create_app(bank: FavocoinBank) -> FastAPI:
    app = FastAPI(title=APP_TITLE)
    app.state.bank = bank
    api = bank.exporter

    @app.exception_handler(FavocoinError)
    async def favocoin_error_handler(_request: Request, exc: FavocoinError) -> JSONResponse:
        payload: Dict[str, object] = {"error": type(exc).__name__, "detail": str(exc)}
        if isinstance(exc, InsufficientFundsError):
            payload["participants"] = list(exc.participants)
            payload["share"] = str(exc.share)
        return JSONResponse(payload, status_code=_status_for(exc))

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "items": len(bank.list_store_items())}

    # Students -------------------------------------------------------------
    @app.get("/api/students/{student_id}")
    def student_snapshot(student_id: str) -> dict:
        return bank.api_student(student_id)

    @app.get("/api/students/{student_id}/balance")
    def student_balance(student_id: str) -> dict:
        balance = bank.balance(student_id)
        return {"student_id": student_id, "balance": float(balance), "exact_balance": str(balance)}

    @app.get("/api/students/{student_id}/statement", response_class=PlainTextResponse)
    def student_statement(student_id: str) -> str:
        return bank.statement(student_id)

    @app.post("/api/students/{student_id}/enroll")
    def enroll(student_id: str) -> dict:
        entry = bank.enroll_student(student_id)
        return {"enrolled": entry is not None, "entry": api.entry(entry) if entry else None}

    @app.post("/api/students/{student_id}/actions", status_code=201)
    def apply_action(student_id: str, body: ActionRequest) -> dict:
        entry = bank.apply_catalog_action(student_id, body.label, actor=body.actor)
        return api.entry(entry)

    # Catalog and eligibility ----------------------------------------------
    @app.get("/api/actions")
    def list_actions() -> list:
        return [
            {"label": action.label, "amount": float(action.amount), "type": action.type.value}
            for action in bank.catalog_actions()
        ]

    @app.get("/api/eligibility")
    def eligibility(name: str = Query(...)) -> dict:
        return {"name": name, "eligible": bank.is_eligible(name)}

    @app.get("/api/classes/{class_id}/eligibility")
    def class_eligibility(class_id: str) -> dict:
        return {"class_id": class_id, "eligible": bank.is_class_eligible(class_id)}

    @app.post("/api/classes/{class_id}/attendance")
    def attendance(class_id: str, body: AttendanceRequest) -> dict:
        posted = bank.record_attendance(class_id, body.day, body.records)
        return {student_id: [api.entry(entry) for entry in entries] for student_id, entries in posted.items()}

    # Store ----------------------------------------------------------------
    @app.get("/api/store/items")
    def list_items() -> list:
        return [api.item(item) for item in bank.list_store_items()]

    @app.post("/api/store/items", status_code=201)
    def create_item(body: ItemCreate) -> dict:
        item = bank.create_store_item(
            body.name,
            body.price,
            body.stock,
            description=body.description,
            image_url=body.image_url,
            item_id=body.id,
        )
        return api.item(item)

    @app.get("/api/store/items/{item_id}")
    def get_item(item_id: str) -> dict:
        return api.item(bank.get_store_item(item_id))

    @app.patch("/api/store/items/{item_id}")
    def update_item(item_id: str, body: ItemUpdate) -> dict:
        return api.item(bank.update_store_item(item_id, body.model_dump(exclude_unset=True)))

    @app.delete("/api/store/items/{item_id}", status_code=204)
    def delete_item(item_id: str) -> Response:
        bank.delete_store_item(item_id)
        return Response(status_code=204)

    @app.post("/api/store/quote")
    def quote(body: PurchaseRequest) -> dict:
        share = bank.quote(body.participant_ids, body.item_id)
        return {"item_id": body.item_id, "share": float(share), "exact_share": str(share)}

    @app.post("/api/store/purchases", status_code=201)
    def purchase(body: PurchaseRequest) -> dict:
        receipt = bank.purchase(body.participant_ids, body.item_id, actor=body.actor)
        return api.receipt(receipt)

    # Reporting ------------------------------------------------------------
    @app.get("/api/dashboard")
    def dashboard(top: int = Query(5, ge=0)) -> dict:
        summary = bank.dashboard(top=top)
        return {
            "total_circulation": float(summary.total_circulation),
            "total_spent": float(summary.total_spent),
            "eligible_students": summary.eligible_students,
            "top_students": [
                {
                    "student_id": standing.student_id,
                    "name": standing.name,
                    "class": standing.class_name,
                    "balance": float(standing.balance),
                }
                for standing in summary.top_students
            ],
        }

    @app.get("/api/ledger.csv", response_class=PlainTextResponse)
    def ledger_csv(student_id: Optional[str] = None) -> str:
        return bank.export_csv(student_id)

    return app


def build_default_bank() -> FavocoinBank:
    bank = FavocoinBank(SQLRepository(make_engine(DATABASE_URL)), demo_roster(), settings=ECONOMY)
    if SEED_DEMO:
        seed_demo(bank)
    return bank


app = create_app(build_default_bank())

__all__ = ["app", "build_default_bank", "create_app"]
