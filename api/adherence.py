"""
Adherence API Router
Endpoints for classified dose adherence and dose status updates
"""

from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session

from api.deps import get_db, services
from api.schemas.adherence import (
    AdherenceUpdate,
    DoseRecordResponse,
    DoseRecordDetail,
    AdherenceStatsResponse,
    AdherenceOverview,
)
from config import schedule_config


router = APIRouter(prefix="/adherence", tags=["adherence"])


@router.get("/", response_model=AdherenceOverview)
async def get_adherence(
    patient_id: int = Query(..., description="Patient whose doses to classify"),
    prescription_id: Optional[int] = Query(None, description="Limit buckets to one prescription"),
    db: Session = Depends(get_db)
):
    """
    Fetch a patient's dose records bucketed against the current time

    Missing schedules for delivered prescriptions are backfilled on the
    first read. Clients re-poll every `poll_interval_seconds`.
    """
    patient_service = services.get_patient_service()
    adherence_service = services.get_adherence_service()

    patient = await patient_service.get_patient(patient_id, db=db)
    if not patient:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Patient {patient_id} not found"
        )

    snapshot = await adherence_service.get_adherence(
        patient_id=patient_id,
        prescription_id=prescription_id,
        db=db
    )

    def _details(records):
        return [DoseRecordDetail.from_record(r) for r in records]

    return AdherenceOverview(
        patient_id=patient_id,
        prescription_id=prescription_id,
        all=_details(snapshot.all),
        pending=_details(snapshot.pending),
        due_now=_details(snapshot.due_now),
        overdue=_details(snapshot.overdue),
        taken=_details(snapshot.taken),
        skipped=_details(snapshot.skipped),
        upcoming=_details(snapshot.upcoming),
        stats=AdherenceStatsResponse(**snapshot.stats.to_dict()),
        current_time=snapshot.current_time_str,
        poll_interval_seconds=schedule_config.CLIENT_POLL_INTERVAL_SECONDS
    )


@router.patch("/", response_model=DoseRecordResponse)
async def update_adherence(
    update: AdherenceUpdate,
    db: Session = Depends(get_db)
):
    """
    Mark a dose as taken or skipped

    - **is_taken**: setting true clears is_skipped and stamps taken_at
    - **is_skipped**: setting true clears is_taken and stamps skipped_at
    """
    adherence_service = services.get_adherence_service()

    try:
        record = await adherence_service.update_adherence(
            record_id=update.adherence_id,
            is_taken=update.is_taken,
            is_skipped=update.is_skipped,
            notes=update.notes,
            db=db
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(e)
        )

    if not record:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Adherence record {update.adherence_id} not found"
        )

    return record
