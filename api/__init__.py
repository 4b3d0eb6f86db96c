"""
API Module
FastAPI routers for the DoseTrack application
"""

from api.patients import router as patients_router
from api.prescriptions import router as prescriptions_router
from api.adherence import router as adherence_router

from api.deps import get_db, services


__all__ = [
    # Routers
    "patients_router",
    "prescriptions_router",
    "adherence_router",
    # Dependencies
    "get_db",
    "services",
]


def include_routers(app, prefix: str = "/api/v1"):
    """
    Include all API routers in the FastAPI app

    Usage:
        from api import include_routers
        include_routers(app)
    """
    app.include_router(patients_router, prefix=prefix)
    app.include_router(prescriptions_router, prefix=prefix)
    app.include_router(adherence_router, prefix=prefix)
