"""
Pytest fixtures for the clinic dispensary test suite.

Every test gets its own file-backed SQLite database built with
database.build_engine, so the same BEGIN IMMEDIATE locking used for local
runs serializes concurrent sessions here.

Note on SQLite: a session that has read anything holds the database write
lock until it commits, rolls back or closes. Tests that run several sessions
at once close each one before the next needs the lock.
"""

import os
import tempfile

# The module-level engine in database.py is built at import time; point it at
# SQLite so importing the application never needs a PostgreSQL server.
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "clinic-dispensary-test-logs"))

from decimal import Decimal
from typing import Generator

import pytest
from sqlalchemy.orm import Session, sessionmaker

from database import Base, build_engine
import models  # noqa: F401  registers every table on Base.metadata
from crud.diagnosis import create_diagnosis
from crud.medication import create_medication
from models.medication import Medication
from models.medication_audit import MedicationAudit
from models.prescription_item import PrescriptionItem
from schemas.diagnosis import DiagnosisCreate
from schemas.medication import MedicationCreate
from schemas.prescription_item import PrescriptionItemCreate

DOCTOR_ID = "DOC-001"
PHARMACIST_ID = "PHARM-001"
DIAGNOSIS_ID = "DX-0001"


@pytest.fixture
def db_url(tmp_path) -> str:
    return f"sqlite:///{tmp_path / 'clinic.db'}"


@pytest.fixture
def engine(db_url):
    engine = build_engine(db_url)
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory) -> Generator[Session, None, None]:
    session = session_factory()
    yield session
    session.close()


def seed(session_factory, stock: int = 10, name: str = "Amoxicillin 500mg", diagnosis_id: str = DIAGNOSIS_ID) -> int:
    """Create one medication and one diagnosis in a short-lived session. Returns the medication id."""
    with session_factory() as session:
        medication = create_medication(
            session,
            MedicationCreate(name=name, description="Antibiotic capsule", stock_quantity=stock, unit_price=Decimal("2.50")),
            changed_by=PHARMACIST_ID,
        )
        medication_id = medication.id
        if session.get(models.Diagnosis, diagnosis_id) is None:
            create_diagnosis(
                session,
                DiagnosisCreate(id=diagnosis_id, doctor_id=DOCTOR_ID, patient_id="PAT-001", diagnosis="Acute sinusitis"),
            )
        return medication_id


@pytest.fixture
def medication_id(session_factory) -> int:
    return seed(session_factory, stock=10)


def prescription(item_id: str, medication_id: int, quantity, diagnosis_id: str = DIAGNOSIS_ID) -> PrescriptionItemCreate:
    # model_construct skips pydantic coercion so malformed quantities reach the transaction
    return PrescriptionItemCreate.model_construct(
        id=item_id,
        diagnosis_id=diagnosis_id,
        medication_id=medication_id,
        quantity=quantity,
        guide="1 capsule every 8 hours after food",
        duration="5 days",
    )


def stock_of(session: Session, medication_id: int) -> int:
    return session.query(Medication.stock_quantity).filter(Medication.id == medication_id).scalar()


def audits_of(session: Session, medication_id: int):
    return (
        session.query(MedicationAudit)
        .filter(MedicationAudit.medication_id == medication_id)
        .order_by(MedicationAudit.id)
        .all()
    )


def prescription_count(session: Session) -> int:
    return session.query(PrescriptionItem).count()
