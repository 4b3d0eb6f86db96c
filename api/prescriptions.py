"""
Prescriptions API Router
Endpoints for prescription intake and delivery to patients
"""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from api.deps import get_db, services
from api.schemas.prescription import (
    PrescriptionCreate,
    PrescriptionResponse,
    PatientPrescriptions,
)


router = APIRouter(prefix="/prescriptions", tags=["prescriptions"])


@router.post("/", response_model=PrescriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_prescription(
    prescription_data: PrescriptionCreate,
    db: Session = Depends(get_db)
):
    """
    Create a prescription with an ordered medicine list

    The prescription starts undelivered; dose schedules appear once it is
    sent to the patient.
    """
    prescription_service = services.get_prescription_service()

    try:
        return await prescription_service.create_prescription(
            patient_id=prescription_data.patient_id,
            medicines=[m.model_dump() for m in prescription_data.medicines],
            doctor_name=prescription_data.doctor_name,
            diagnosis=prescription_data.diagnosis,
            instructions=prescription_data.instructions,
            db=db
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=str(e)
        )


@router.get("/patient/{patient_id}", response_model=PatientPrescriptions)
async def get_patient_prescriptions(
    patient_id: int,
    db: Session = Depends(get_db)
):
    """
    List a patient's prescriptions split into sent and unsent
    """
    prescription_service = services.get_prescription_service()

    prescriptions = await prescription_service.get_patient_prescriptions(patient_id, db=db)

    return PatientPrescriptions(
        patient_id=patient_id,
        sent=[PrescriptionResponse.model_validate(p) for p in prescriptions if p.sent_to_patient],
        unsent=[PrescriptionResponse.model_validate(p) for p in prescriptions if not p.sent_to_patient]
    )


@router.get("/{prescription_id}", response_model=PrescriptionResponse)
async def get_prescription(
    prescription_id: int,
    db: Session = Depends(get_db)
):
    """
    Get a prescription with its medicine entries
    """
    prescription_service = services.get_prescription_service()

    prescription = await prescription_service.get_prescription(prescription_id, db=db)
    if not prescription:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Prescription {prescription_id} not found"
        )

    return prescription


@router.post("/{prescription_id}/send", response_model=PrescriptionResponse)
async def send_prescription(
    prescription_id: int,
    db: Session = Depends(get_db)
):
    """
    Mark a prescription as delivered to the patient
    """
    prescription_service = services.get_prescription_service()

    prescription = await prescription_service.mark_sent(prescription_id, db=db)
    if not prescription:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Prescription {prescription_id} not found"
        )

    return prescription
