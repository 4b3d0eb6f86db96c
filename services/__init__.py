"""
Services Module
Business logic layer for the DoseTrack application
"""

from services.patient_service import PatientService, patient_service
from services.prescription_service import PrescriptionService, prescription_service
from services.schedule_service import ScheduleService, schedule_service
from services.adherence_service import AdherenceService, adherence_service


__all__ = [
    # Service classes
    "PatientService",
    "PrescriptionService",
    "ScheduleService",
    "AdherenceService",
    # Singleton instances
    "patient_service",
    "prescription_service",
    "schedule_service",
    "adherence_service",
]
