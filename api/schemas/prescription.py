"""
Prescription Schemas
Pydantic models for prescription intake and delivery
"""

from typing import Optional, List
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict, field_validator

from tools.clock import format_clock_time


class MedicineEntryCreate(BaseModel):
    """One medicine within a new prescription"""
    name: str = Field(..., min_length=1, max_length=255)
    dosage: Optional[str] = Field(None, max_length=100)
    frequency: Optional[str] = Field(None, max_length=100)
    duration: Optional[str] = Field(None, max_length=100, description="e.g. '5 days', '2 weeks', '1 month', '10'")
    time_of_day: Optional[str] = Field(None, description="HH:MM or HH:MM:SS")
    notes: Optional[str] = None

    @field_validator("time_of_day")
    @classmethod
    def normalize_time_of_day(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        try:
            return format_clock_time(v)
        except TypeError as e:
            raise ValueError(str(e))


class PrescriptionCreate(BaseModel):
    """Schema for creating a prescription"""
    patient_id: int
    doctor_name: Optional[str] = Field(None, max_length=255)
    diagnosis: Optional[str] = Field(None, max_length=255)
    instructions: Optional[str] = None
    medicines: List[MedicineEntryCreate] = Field(..., min_length=1)


class MedicineEntryResponse(BaseModel):
    """Medicine entry with its stable id"""
    id: int
    position: int
    name: str
    dosage: Optional[str] = None
    frequency: Optional[str] = None
    duration: Optional[str] = None
    time_of_day: Optional[str] = None
    notes: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PrescriptionResponse(BaseModel):
    """Schema for prescription response"""
    id: int
    patient_id: int
    doctor_name: Optional[str] = None
    diagnosis: Optional[str] = None
    instructions: Optional[str] = None
    sent_to_patient: bool
    sent_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    medicines: List[MedicineEntryResponse] = []

    model_config = ConfigDict(from_attributes=True)


class PatientPrescriptions(BaseModel):
    """A patient's prescriptions split by delivery state"""
    patient_id: int
    sent: List[PrescriptionResponse]
    unsent: List[PrescriptionResponse]
