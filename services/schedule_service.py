"""
Schedule Service
Reads dose records and backfills missing schedules for delivered prescriptions
"""

import logging
from typing import List, Optional
from datetime import datetime
from sqlalchemy.orm import Session, joinedload
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from database import get_db_context
import models
from tools.clock import current_instant
from tools.schedule_expander import DoseOccurrence, expand_prescription


logger = logging.getLogger(__name__)


class ScheduleService:
    """
    Service for dose schedule reads and self-healing backfill
    """

    def _load_records(
        self,
        session: Session,
        patient_id: int,
        prescription_id: Optional[int] = None
    ) -> List[models.DoseRecord]:
        query = session.query(models.DoseRecord).options(
            joinedload(models.DoseRecord.medicine),
            joinedload(models.DoseRecord.prescription),
        ).filter(models.DoseRecord.patient_id == patient_id)

        if prescription_id is not None:
            query = query.filter(models.DoseRecord.prescription_id == prescription_id)

        return query.order_by(
            models.DoseRecord.scheduled_date,
            models.DoseRecord.scheduled_time,
            models.DoseRecord.id
        ).all()

    def _delivered_prescriptions(
        self,
        session: Session,
        patient_id: int
    ) -> List[models.Prescription]:
        return session.query(models.Prescription).filter(
            models.Prescription.patient_id == patient_id,
            models.Prescription.sent_to_patient == True  # noqa: E712
        ).order_by(models.Prescription.id).all()

    async def get_patient_records(
        self,
        patient_id: int,
        prescription_id: Optional[int] = None,
        db: Optional[Session] = None
    ) -> List[models.DoseRecord]:
        """Get a patient's dose records ordered by scheduled date and time"""
        def _get(session: Session) -> List[models.DoseRecord]:
            return self._load_records(session, patient_id, prescription_id)

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def build_backfill(
        self,
        patient_id: int,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> List[DoseOccurrence]:
        """
        Expand every delivered prescription of the patient, anchored at
        the date of ``now``. Nothing is written.
        """
        now = now or current_instant()

        def _build(session: Session) -> List[DoseOccurrence]:
            occurrences: List[DoseOccurrence] = []
            for prescription in self._delivered_prescriptions(session, patient_id):
                if not prescription.medicines:
                    continue
                occurrences.extend(expand_prescription(
                    patient_id=patient_id,
                    prescription_id=prescription.id,
                    medicines=prescription.medicines,
                    start_date=now.date()
                ))
            return occurrences

        if db:
            return _build(db)

        with get_db_context() as session:
            return _build(session)

    async def reconcile_patient(
        self,
        patient_id: int,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> List[models.DoseRecord]:
        """
        Return the patient's dose records, backfilling them first when the
        patient has none at all.

        Backfill only fires for a completely empty record set; a patient
        with some prescriptions expanded is not topped up for the others.
        The insert is guarded by the (prescription, medicine, date) unique
        constraint, so a concurrent backfill that lands first makes this
        one roll back and re-read. Any other storage failure during the
        insert is logged and the empty set is returned.

        Args:
            patient_id: Patient ID
            now: Current instant (default: configured clock)
            db: Database session

        Returns:
            Dose records after reconciliation
        """
        now = now or current_instant()

        async def _reconcile(session: Session) -> List[models.DoseRecord]:
            records = self._load_records(session, patient_id)
            if records:
                return records

            occurrences = await self.build_backfill(patient_id, now=now, db=session)
            if not occurrences:
                return records

            try:
                session.add_all([
                    models.DoseRecord(**occurrence.to_dict())
                    for occurrence in occurrences
                ])
                session.commit()
            except IntegrityError:
                session.rollback()
                logger.warning(
                    f"Dose records for patient {patient_id} were backfilled "
                    f"by a concurrent request"
                )
            except SQLAlchemyError:
                session.rollback()
                logger.exception(f"Backfill failed for patient {patient_id}")
                return records
            else:
                logger.info(
                    f"Backfilled {len(occurrences)} dose records for patient {patient_id}"
                )

            return self._load_records(session, patient_id)

        if db:
            return await _reconcile(db)

        with get_db_context() as session:
            return await _reconcile(session)


# Singleton instance
schedule_service = ScheduleService()
