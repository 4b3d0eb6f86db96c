#!/usr/bin/env python
"""
Seed Data
Script to seed the database with a demo patient and a delivered prescription
"""

import sys
import os
import argparse
import asyncio
import logging

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from database import SessionLocal, init_db, reset_db
from models import Patient, Prescription, DoseRecord
from services.prescription_service import prescription_service
from services.schedule_service import schedule_service


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


DEMO_EMAIL = "demo@dosetrack.example"

DEMO_MEDICINES = [
    {"name": "Amoxicillin", "dosage": "500mg", "frequency": "3x daily", "duration": "7 days"},
    {"name": "Ibuprofen", "dosage": "400mg", "frequency": "as needed", "duration": "5"},
    {"name": "Vitamin D3", "dosage": "1000 IU", "frequency": "once daily", "duration": "1 month",
     "time_of_day": "20:00:00"},
]


def seed_demo_patient(db) -> Patient:
    """Create the demo patient unless it already exists"""
    existing = db.query(Patient).filter(Patient.email == DEMO_EMAIL).first()
    if existing:
        logger.info("Demo patient already exists")
        return existing

    patient = Patient(
        first_name="Jane",
        last_name="Doe",
        email=DEMO_EMAIL,
        phone="+15551234567"
    )
    db.add(patient)
    db.commit()
    db.refresh(patient)
    logger.info(f"Created demo patient {patient.id}")
    return patient


async def seed_all(reset: bool = False):
    """Seed patient, prescription and dose schedule"""
    if reset:
        reset_db()
    else:
        init_db()

    db = SessionLocal()
    try:
        patient = seed_demo_patient(db)

        if not db.query(Prescription).filter(Prescription.patient_id == patient.id).count():
            prescription = await prescription_service.create_prescription(
                patient_id=patient.id,
                medicines=DEMO_MEDICINES,
                doctor_name="Dr. Rivera",
                diagnosis="Upper respiratory infection",
                instructions="Finish the full antibiotic course",
                db=db
            )
            await prescription_service.mark_sent(prescription.id, db=db)

        records = await schedule_service.reconcile_patient(patient.id, db=db)

        print("\n" + "=" * 60)
        print("Seeding Complete!")
        print("=" * 60)
        print(f"  Patients: {db.query(Patient).count()}")
        print(f"  Prescriptions: {db.query(Prescription).count()}")
        print(f"  Dose Records: {db.query(DoseRecord).count()}")
        print(f"\nDemo Patient ID: {patient.id} ({len(records)} dose records)")

    except Exception as e:
        db.rollback()
        logger.error(f"Error during seeding: {e}")
        raise
    finally:
        db.close()


def main():
    parser = argparse.ArgumentParser(
        description="Seed the database with demo data"
    )
    parser.add_argument(
        "--reset",
        action="store_true",
        help="Drop and recreate all tables before seeding"
    )

    args = parser.parse_args()

    asyncio.run(seed_all(reset=args.reset))


if __name__ == "__main__":
    main()
