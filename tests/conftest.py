"""
Pytest Configuration and Shared Fixtures
========================================

This module provides shared fixtures for all DoseTrack tests.
Fixtures include database sessions, test clients and sample data.
"""

import os
import sys
from datetime import datetime
from typing import Generator, List

# Point the app at an in-memory database before config is imported
os.environ.setdefault("DATABASE_URL", "sqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

import database
from database import Base, get_db
from models import Patient, Prescription, PrescriptionMedicine, DoseRecord
from app import app


# Fixed instant used wherever a test needs a deterministic "now"
FIXED_NOW = datetime(2026, 3, 10, 10, 0, 0)


# ==================== DATABASE FIXTURES ====================

@pytest.fixture(scope="function")
def test_engine():
    """Create a test database engine with in-memory SQLite"""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    # Enable foreign keys for SQLite
    @event.listens_for(engine, "connect")
    def set_sqlite_pragma(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    # Create all tables
    Base.metadata.create_all(bind=engine)

    yield engine

    # Cleanup
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture(scope="function")
def db_session(test_engine) -> Generator[Session, None, None]:
    """Create a test database session"""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_engine
    )

    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def client(db_session: Session) -> Generator[TestClient, None, None]:
    """Create a FastAPI test client with database override"""

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db

    with TestClient(app) as test_client:
        yield test_client

    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def standalone_sessions(test_engine):
    """Bind the app session factory to the test engine for service calls made without a session"""
    database.SessionLocal.configure(bind=test_engine)
    try:
        yield database.SessionLocal
    finally:
        database.SessionLocal.configure(bind=database.engine)


# ==================== SAMPLE DATA FIXTURES ====================

@pytest.fixture
def fixed_now() -> datetime:
    """Deterministic current instant (10:00 on a Tuesday)"""
    return FIXED_NOW


@pytest.fixture
def test_patient(db_session: Session) -> Patient:
    """Create and return a test patient"""
    patient = Patient(
        first_name="John",
        last_name="Doe",
        email="john.doe@example.com",
        phone="+1234567890",
        is_active=True
    )
    db_session.add(patient)
    db_session.commit()
    db_session.refresh(patient)
    return patient


def make_prescription(
    db_session: Session,
    patient: Patient,
    medicines: List[dict],
    sent: bool = True,
    doctor_name: str = "Dr. Smith"
) -> Prescription:
    """Persist a prescription with the given medicine entries"""
    prescription = Prescription(
        patient_id=patient.id,
        doctor_name=doctor_name,
        diagnosis="Seasonal infection",
        sent_to_patient=sent,
        sent_at=FIXED_NOW if sent else None
    )
    for position, medicine in enumerate(medicines):
        prescription.medicines.append(PrescriptionMedicine(position=position, **medicine))
    db_session.add(prescription)
    db_session.commit()
    db_session.refresh(prescription)
    return prescription


@pytest.fixture
def prescription_factory(db_session: Session, test_patient: Patient):
    """Build prescriptions for the test patient"""
    def _make(medicines: List[dict], sent: bool = True, doctor_name: str = "Dr. Smith") -> Prescription:
        return make_prescription(db_session, test_patient, medicines, sent=sent, doctor_name=doctor_name)
    return _make


@pytest.fixture
def delivered_prescription(db_session: Session, test_patient: Patient) -> Prescription:
    """Delivered prescription: 3 days of one medicine, 1 week of another"""
    return make_prescription(db_session, test_patient, [
        {"name": "Amoxicillin", "dosage": "500mg", "frequency": "3x daily", "duration": "3 days"},
        {"name": "Cetirizine", "dosage": "10mg", "frequency": "once daily", "duration": "1 week",
         "notes": "May cause drowsiness"},
    ])


@pytest.fixture
def undelivered_prescription(db_session: Session, test_patient: Patient) -> Prescription:
    """Prescription not yet sent to the patient"""
    return make_prescription(db_session, test_patient, [
        {"name": "Omeprazole", "dosage": "20mg", "frequency": "once daily", "duration": "2 weeks"},
    ], sent=False)


@pytest.fixture
def test_dose_record(db_session: Session, test_patient: Patient, delivered_prescription: Prescription) -> DoseRecord:
    """A single stored dose record for today"""
    medicine = delivered_prescription.medicines[0]
    record = DoseRecord(
        patient_id=test_patient.id,
        prescription_id=delivered_prescription.id,
        medicine_id=medicine.id,
        medicine_name=medicine.name,
        scheduled_date=FIXED_NOW.date(),
        scheduled_time="09:00:00",
        is_taken=False,
        is_skipped=False
    )
    db_session.add(record)
    db_session.commit()
    db_session.refresh(record)
    return record


# ==================== MARKERS ====================

def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "api: mark test as an API test")
    config.addinivalue_line("markers", "database: mark test as requiring database")
