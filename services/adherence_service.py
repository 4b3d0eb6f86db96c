"""
Adherence Service
Business logic for fetching classified adherence and marking doses
"""

import logging
from typing import Optional
from datetime import datetime
from sqlalchemy.orm import Session

from database import get_db_context
import models
from services.schedule_service import schedule_service
from tools.clock import current_instant
from tools.window_classifier import AdherenceSnapshot, classify_records


logger = logging.getLogger(__name__)


class AdherenceService:
    """
    Service for adherence tracking
    """

    async def get_adherence(
        self,
        patient_id: int,
        prescription_id: Optional[int] = None,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> AdherenceSnapshot:
        """
        Classify a patient's dose records against the current instant

        Runs the self-healing backfill first, then re-reads the records
        (narrowed to one prescription when given) and buckets them.

        Args:
            patient_id: Patient ID
            prescription_id: Optional prescription filter
            now: Current instant (default: configured clock)
            db: Database session

        Returns:
            Snapshot with buckets, stats and the clock time used
        """
        now = now or current_instant()

        async def _get(session: Session) -> AdherenceSnapshot:
            records = await schedule_service.reconcile_patient(patient_id, now=now, db=session)
            if prescription_id is not None:
                records = await schedule_service.get_patient_records(
                    patient_id,
                    prescription_id=prescription_id,
                    db=session
                )
            return classify_records(records, now)

        if db:
            return await _get(db)

        with get_db_context() as session:
            return await _get(session)

    async def get_record(
        self,
        record_id: int,
        db: Optional[Session] = None
    ) -> Optional[models.DoseRecord]:
        """Get dose record by ID"""
        def _get(session: Session) -> Optional[models.DoseRecord]:
            return session.query(models.DoseRecord).filter(
                models.DoseRecord.id == record_id
            ).first()

        if db:
            return _get(db)

        with get_db_context() as session:
            return _get(session)

    async def update_adherence(
        self,
        record_id: int,
        is_taken: Optional[bool] = None,
        is_skipped: Optional[bool] = None,
        notes: Optional[str] = None,
        now: Optional[datetime] = None,
        db: Optional[Session] = None
    ) -> Optional[models.DoseRecord]:
        """
        Mark a dose record taken or skipped

        Setting one flag true clears the other. taken_at / skipped_at are
        stamped only when their flag goes from false to true and are never
        cleared.

        Args:
            record_id: Dose record ID
            is_taken: New taken flag, unchanged when None
            is_skipped: New skipped flag, unchanged when None
            notes: Notes, unchanged when None
            now: Mutation instant (default: configured clock)
            db: Database session

        Returns:
            Updated record, or None when the record does not exist

        Raises:
            ValueError: both flags requested true
        """
        if is_taken and is_skipped:
            raise ValueError("A dose cannot be both taken and skipped")

        now = now or current_instant()

        def _update(session: Session) -> Optional[models.DoseRecord]:
            record = session.query(models.DoseRecord).filter(
                models.DoseRecord.id == record_id
            ).first()

            if not record:
                logger.warning(f"Dose record {record_id} not found")
                return None

            if is_taken is not None:
                if is_taken:
                    if not record.is_taken:
                        record.taken_at = now
                    record.is_skipped = False
                record.is_taken = is_taken

            if is_skipped is not None:
                if is_skipped:
                    if not record.is_skipped:
                        record.skipped_at = now
                    record.is_taken = False
                record.is_skipped = is_skipped

            if notes is not None:
                record.notes = notes

            session.commit()
            session.refresh(record)

            logger.info(
                f"Updated dose record {record_id}: "
                f"taken={record.is_taken}, skipped={record.is_skipped}"
            )
            return record

        if db:
            return _update(db)

        with get_db_context() as session:
            return _update(session)


# Singleton instance
adherence_service = AdherenceService()
