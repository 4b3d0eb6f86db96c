"""
API Dependencies
Common dependencies for FastAPI endpoints
"""

from database import get_db


class ServiceDependency:
    """
    Dependency injection for services
    """

    @staticmethod
    def get_patient_service():
        from services.patient_service import patient_service
        return patient_service

    @staticmethod
    def get_prescription_service():
        from services.prescription_service import prescription_service
        return prescription_service

    @staticmethod
    def get_adherence_service():
        from services.adherence_service import adherence_service
        return adherence_service


# Service dependency instances
services = ServiceDependency()


__all__ = ["get_db", "services", "ServiceDependency"]
