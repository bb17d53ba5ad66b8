"""Sample roster and store used by the bundled web application."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Optional

from .models import SchoolClass, Student
from .repository import InMemoryRoster
from .service import FavocoinBank

DEMO_CLASSES = (
    SchoolClass("class-1", "1º Ano A"),
    SchoolClass("class-2", "5º Ano B"),
    SchoolClass("class-3", "Creche III"),
)

DEMO_STUDENTS = (
    Student("stu-1", "João Silva", "class-1"),
    Student("stu-2", "Maria Costa", "class-1"),
    Student("stu-3", "Pedro Souza", "class-2"),
    Student("stu-4", "Lia Rocha", "class-3"),
)

DEMO_ITEMS = (
    dict(item_id="item-1", name="Caneta Colorida Neon", description="Caneta gel com tinta neon.", price=50, stock=20),
    dict(item_id="item-2", name="Passaporte do Lanche", description="Pula a fila da cantina uma vez.", price=100, stock=10),
    dict(item_id="item-3", name="Dia sem Uniforme", description="Permissão para vir sem uniforme na sexta.", price=150, stock=50),
    dict(
        item_id="item-4",
        name="Sessão de Cinema",
        description="Ingresso para sessão de cinema na sala de vídeo (compra coletiva recomendada).",
        price=500,
        stock=1,
    ),
)


def demo_roster() -> InMemoryRoster:
    roster = InMemoryRoster(classes=DEMO_CLASSES)
    for student in DEMO_STUDENTS:
        roster.add_student(student)
    return roster


def seed_demo(bank: FavocoinBank, *, today: Optional[date] = None) -> FavocoinBank:
    """Enroll every demo student, stock the store and post a little activity."""

    today = today or date.today()
    for student in bank.roster.list_students():
        bank.enroll_student(student.id, on=today - timedelta(days=10))
    existing = {item.id for item in bank.list_store_items()}
    for fields in DEMO_ITEMS:
        if fields["item_id"] not in existing:
            bank.create_store_item(actor="system", **fields)
    bank.record_attendance("class-1", today - timedelta(days=2), {"stu-1": True, "stu-2": False})
    bank.record_attendance("class-1", today - timedelta(days=1), {"stu-1": True, "stu-2": True})
    bank.record_attendance("class-1", today, {"stu-1": False, "stu-2": True})
    return bank


__all__ = ["DEMO_CLASSES", "DEMO_ITEMS", "DEMO_STUDENTS", "demo_roster", "seed_demo"]
