"""
Patient Service
Business logic for patient management
"""

import logging
from typing import Optional
from sqlalchemy.orm import Session

from database import get_db_context
import models


logger = logging.getLogger(__name__)


class PatientService:
    """
    Service for patient-related operations
    """

    async def create_patient(
        self,
        email: str,
        first_name: str,
        last_name: str,
        phone: Optional[str] = None,
        db: Optional[Session] = None
    ) -> models.Patient:
        """
        Create a new patient record

        Args:
            email: Patient email (unique)
            first_name: First name
            last_name: Last name
            phone: Phone number
            db: Database session (optional)

        Returns:
            Created Patient object
        """
        def _create(session: Session) -> models.Patient:
            existing = session.query(models.Patient).filter(
                models.Patient.email == email
            ).first()

            if existing:
                raise ValueError(f"Patient with email {email} already exists")

            patient = models.Patient(
                email=email,
                first_name=first_name,
                last_name=last_name,
                phone=phone
            )

            session.add(patient)
            session.commit()
            session.refresh(patient)

            logger.info(f"Created patient: {patient.id} - {patient.full_name}")
            return patient

        if db:
            return _create(db)

        with get_db_context() as session:
            return _create(session)

    async def get_patient(
        self,
        patient_id: int,
        db: Optional[Session] = None
    ) -> Optional[models.Patient]:
        """Get patient by ID"""
        def _get(session: Session) -> Optional[models.Patient]:
            return session.query(models.Patient).filter(
                models.Patient.id == patient_id
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)


# Singleton instance
patient_service = PatientService()
