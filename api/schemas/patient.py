"""
Patient Schemas
Pydantic models for patient-related API requests and responses
"""

from typing import Optional
from datetime import datetime
from pydantic import BaseModel, Field, ConfigDict


class PatientCreate(BaseModel):
    """Schema for creating a new patient"""
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    # Use plain string for email to allow special-use/test domains in fixtures
    email: str
    phone: Optional[str] = Field(None, max_length=20)


class PatientResponse(BaseModel):
    """Schema for patient response"""
    id: int
    first_name: str
    last_name: str
    full_name: str
    email: str
    phone: Optional[str] = None
    is_active: bool
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
