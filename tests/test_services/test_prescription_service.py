"""
Tests for Prescription Service
"""

import pytest
from datetime import timedelta

from services.prescription_service import PrescriptionService


@pytest.fixture
def prescription_service():
    return PrescriptionService()


class TestPrescriptionService:
    """Tests for prescription intake and delivery"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_create_keeps_medicine_order(self, prescription_service, db_session, test_patient):
        prescription = await prescription_service.create_prescription(
            patient_id=test_patient.id,
            medicines=[
                {"name": "B", "duration": "2"},
                {"name": "A", "duration": "3 days"},
            ],
            db=db_session
        )

        assert [m.name for m in prescription.medicines] == ["B", "A"]
        assert prescription.sent_to_patient is False

    @pytest.mark.asyncio
    async def test_create_for_unknown_patient(self, prescription_service, db_session):
        with pytest.raises(ValueError):
            await prescription_service.create_prescription(
                patient_id=99999, medicines=[{"name": "A"}], db=db_session
            )

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_mark_sent_stamps_once(
        self, prescription_service, db_session, undelivered_prescription, fixed_now
    ):
        sent = await prescription_service.mark_sent(undelivered_prescription.id, now=fixed_now, db=db_session)
        again = await prescription_service.mark_sent(
            undelivered_prescription.id, now=fixed_now + timedelta(days=1), db=db_session
        )

        assert sent.sent_to_patient is True
        assert again.sent_at == fixed_now

    @pytest.mark.asyncio
    async def test_filter_by_delivery(
        self, prescription_service, db_session, test_patient, delivered_prescription, undelivered_prescription
    ):
        sent = await prescription_service.get_patient_prescriptions(test_patient.id, sent=True, db=db_session)
        unsent = await prescription_service.get_patient_prescriptions(test_patient.id, sent=False, db=db_session)

        assert [p.id for p in sent] == [delivered_prescription.id]
        assert [p.id for p in unsent] == [undelivered_prescription.id]
