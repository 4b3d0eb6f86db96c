"""
Adherence Schemas
Pydantic models for adherence tracking API requests and responses
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import BaseModel, Field, ConfigDict, model_validator

import models


# ==================== REQUEST SCHEMAS ====================

class AdherenceUpdate(BaseModel):
    """Schema for marking a dose taken or skipped"""
    adherence_id: int
    is_taken: Optional[bool] = None
    is_skipped: Optional[bool] = None
    notes: Optional[str] = Field(None, max_length=1000)

    @model_validator(mode="after")
    def check_exclusive(self) -> "AdherenceUpdate":
        if self.is_taken and self.is_skipped:
            raise ValueError("is_taken and is_skipped cannot both be true")
        return self


# ==================== RESPONSE SCHEMAS ====================

class DoseRecordResponse(BaseModel):
    """Schema for a stored dose record"""
    id: int
    patient_id: int
    prescription_id: int
    medicine_id: int
    medicine_name: str
    scheduled_date: date
    scheduled_time: str
    is_taken: bool
    is_skipped: bool
    taken_at: Optional[datetime] = None
    skipped_at: Optional[datetime] = None
    notes: Optional[str] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class DoseRecordDetail(DoseRecordResponse):
    """Dose record with medicine and prescription details resolved at read time"""
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    medicine_notes: Optional[str] = None
    doctor_name: Optional[str] = None

    @classmethod
    def from_record(cls, record: models.DoseRecord) -> "DoseRecordDetail":
        detail = cls.model_validate(record)
        if record.medicine is not None:
            detail.dosage = record.medicine.dosage
            detail.frequency = record.medicine.frequency
            detail.medicine_notes = record.medicine.notes
        if record.prescription is not None:
            detail.doctor_name = record.prescription.doctor_name
        return detail


class AdherenceStatsResponse(BaseModel):
    """Statistics over the full record set"""
    total: int
    taken: int
    skipped: int
    pending: int
    overdue: int
    adherence_rate: float = Field(..., ge=0, le=100)


class AdherenceOverview(BaseModel):
    """Classified dose records for a patient"""
    patient_id: int
    prescription_id: Optional[int] = None
    all: List[DoseRecordDetail]
    pending: List[DoseRecordDetail]
    due_now: List[DoseRecordDetail]
    overdue: List[DoseRecordDetail]
    taken: List[DoseRecordDetail]
    skipped: List[DoseRecordDetail]
    upcoming: List[DoseRecordDetail]
    stats: AdherenceStatsResponse
    current_time: str
    poll_interval_seconds: int
