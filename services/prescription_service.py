"""
Prescription Service
Intake of doctor-written prescriptions and delivery to patients
"""

import logging
from typing import Any, Dict, List, Optional
from datetime import datetime
from sqlalchemy.orm import Session

from database import get_db_context
import models
from tools.clock import current_instant


logger = logging.getLogger(__name__)


class PrescriptionService:
    """
    Service for prescription records
    """

    async def create_prescription(
        self,
        patient_id: int,
        medicines: List[Dict[str, Any]],
        doctor_name: Optional[str] = None,
        diagnosis: Optional[str] = None,
        instructions: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.Prescription:
        """
        Create a prescription with its ordered medicine list

        Each medicine dict carries name, dosage, frequency, duration and
        optionally time_of_day and notes. Entries get stable ids here and
        dose records refer to them by id.

        Raises:
            ValueError: patient does not exist
        """
        def _create(session: Session) -> models.Prescription:
            patient = session.query(models.Patient).filter(
                models.Patient.id == patient_id
            ).first()

            if not patient:
                raise ValueError(f"Patient {patient_id} not found")

            prescription = models.Prescription(
                patient_id=patient_id,
                doctor_name=doctor_name,
                diagnosis=diagnosis,
                instructions=instructions,
                sent_to_patient=False
            )
            for position, medicine in enumerate(medicines):
                prescription.medicines.append(models.PrescriptionMedicine(
                    position=position,
                    name=medicine["name"],
                    dosage=medicine.get("dosage"),
                    frequency=medicine.get("frequency"),
                    duration=medicine.get("duration"),
                    time_of_day=medicine.get("time_of_day"),
                    notes=medicine.get("notes")
                ))

            session.add(prescription)
            session.commit()
            session.refresh(prescription)

            logger.info(
                f"Created prescription {prescription.id} for patient {patient_id} "
                f"with {len(medicines)} medicines"
            )
            return prescription

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def get_prescription(
        self,
        prescription_id: int,
        db: Optional[Session] = None
    ) -> Optional[models.Prescription]:
        """Get prescription by ID"""
        def _get(session: Session) -> Optional[models.Prescription]:
            return session.query(models.Prescription).filter(
                models.Prescription.id == prescription_id
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def get_patient_prescriptions(
        self,
        patient_id: int,
        sent: Optional[bool] = None,
        db: Optional[Session] = None
    ) -> List[models.Prescription]:
        """Get a patient's prescriptions, optionally by delivery state"""
        def _get(session: Session) -> List[models.Prescription]:
            query = session.query(models.Prescription).filter(
                models.Prescription.patient_id == patient_id
            )

            if sent is not None:
                query = query.filter(models.Prescription.sent_to_patient == sent)

            return query.order_by(models.Prescription.id).all()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def mark_sent(
        self,
        prescription_id: int,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> Optional[models.Prescription]:
        """
        Mark a prescription as delivered to the patient

        Dose records are not created here; the next adherence read
        backfills them.
        """
        def _send(session: Session) -> Optional[models.Prescription]:
            prescription = session.query(models.Prescription).filter(
                models.Prescription.id == prescription_id
            ).first()

            if not prescription:
                return None

            if not prescription.sent_to_patient:
                prescription.sent_to_patient = True
                prescription.sent_at = now or current_instant()
                session.commit()
                session.refresh(prescription)
                logger.info(f"Prescription {prescription_id} sent to patient {prescription.patient_id}")

            return prescription

        if db:
            return _send(db)

        with get_db_context() as session:
            return _send(session)


# Singleton instance
prescription_service = PrescriptionService()
