"""
Tests for Adherence Service
Tests classified adherence reads and taken/skipped transitions
"""

import pytest
from unittest.mock import patch
from datetime import datetime, timedelta

from services.adherence_service import AdherenceService
from models import DoseRecord


# =============================================================================
# Test Fixtures
# =============================================================================

@pytest.fixture
def adherence_service():
    """Create adherence service instance"""
    return AdherenceService()


@pytest.fixture
def skipped_record(db_session, test_dose_record, fixed_now):
    """Dose record that was skipped an hour ago"""
    test_dose_record.is_skipped = True
    test_dose_record.skipped_at = fixed_now - timedelta(hours=1)
    db_session.commit()
    db_session.refresh(test_dose_record)
    return test_dose_record


# =============================================================================
# Test Service Initialization
# =============================================================================

class TestAdherenceServiceInit:
    """Tests for AdherenceService initialization"""

    def test_service_has_required_methods(self, adherence_service):
        """Test service has required methods"""
        assert hasattr(adherence_service, "get_adherence")
        assert hasattr(adherence_service, "get_record")
        assert hasattr(adherence_service, "update_adherence")


# =============================================================================
# Test Status Transitions
# =============================================================================

class TestUpdateAdherence:
    """Tests for update_adherence"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_mark_taken(self, adherence_service, db_session, test_dose_record, fixed_now):
        record = await adherence_service.update_adherence(
            test_dose_record.id, is_taken=True, now=fixed_now, db=db_session
        )

        assert record.is_taken is True
        assert record.is_skipped is False
        assert record.taken_at == fixed_now
        assert record.skipped_at is None

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_taken_clears_skipped_but_keeps_skipped_at(
        self, adherence_service, db_session, skipped_record, fixed_now
    ):
        previous_skipped_at = skipped_record.skipped_at

        record = await adherence_service.update_adherence(
            skipped_record.id, is_taken=True, now=fixed_now, db=db_session
        )

        assert record.is_taken is True
        assert record.is_skipped is False
        assert record.taken_at == fixed_now
        assert record.skipped_at == previous_skipped_at

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_skipped_clears_taken(self, adherence_service, db_session, test_dose_record, fixed_now):
        await adherence_service.update_adherence(
            test_dose_record.id, is_taken=True, now=fixed_now, db=db_session
        )
        later = fixed_now + timedelta(minutes=5)

        record = await adherence_service.update_adherence(
            test_dose_record.id, is_skipped=True, now=later, db=db_session
        )

        assert record.is_skipped is True
        assert record.is_taken is False
        assert record.skipped_at == later
        assert record.taken_at == fixed_now

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_unsetting_keeps_timestamp(self, adherence_service, db_session, test_dose_record, fixed_now):
        await adherence_service.update_adherence(
            test_dose_record.id, is_taken=True, now=fixed_now, db=db_session
        )

        record = await adherence_service.update_adherence(
            test_dose_record.id, is_taken=False, now=fixed_now + timedelta(hours=1), db=db_session
        )

        assert record.is_taken is False
        assert record.is_skipped is False
        assert record.taken_at == fixed_now

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_unsetting_taken_leaves_skipped_alone(
        self, adherence_service, db_session, skipped_record, fixed_now
    ):
        record = await adherence_service.update_adherence(
            skipped_record.id, is_taken=False, now=fixed_now, db=db_session
        )

        assert record.is_skipped is True
        assert record.taken_at is None

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_marking_taken_again_keeps_first_taken_at(
        self, adherence_service, db_session, test_dose_record, fixed_now
    ):
        await adherence_service.update_adherence(
            test_dose_record.id, is_taken=True, now=fixed_now, db=db_session
        )

        record = await adherence_service.update_adherence(
            test_dose_record.id, is_taken=True, now=fixed_now + timedelta(hours=2), db=db_session
        )

        assert record.is_taken is True
        assert record.taken_at == fixed_now

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_marking_skipped_again_keeps_first_skipped_at(
        self, adherence_service, db_session, skipped_record, fixed_now
    ):
        first_skipped_at = skipped_record.skipped_at

        record = await adherence_service.update_adherence(
            skipped_record.id, is_skipped=True, now=fixed_now, db=db_session
        )

        assert record.is_skipped is True
        assert record.skipped_at == first_skipped_at

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_retaking_after_unset_restamps(
        self, adherence_service, db_session, test_dose_record, fixed_now
    ):
        later = fixed_now + timedelta(hours=1)
        await adherence_service.update_adherence(
            test_dose_record.id, is_taken=True, now=fixed_now, db=db_session
        )
        await adherence_service.update_adherence(
            test_dose_record.id, is_taken=False, now=later, db=db_session
        )

        record = await adherence_service.update_adherence(
            test_dose_record.id, is_taken=True, now=later, db=db_session
        )

        assert record.taken_at == later

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_notes_only(self, adherence_service, db_session, test_dose_record, fixed_now):
        record = await adherence_service.update_adherence(
            test_dose_record.id, notes="Took with breakfast", now=fixed_now, db=db_session
        )

        assert record.notes == "Took with breakfast"
        assert record.is_taken is False
        assert record.taken_at is None

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_missing_record_returns_none_without_write(self, adherence_service, db_session):
        with patch.object(db_session, "commit") as mock_commit:
            record = await adherence_service.update_adherence(99999, is_taken=True, db=db_session)

        assert record is None
        mock_commit.assert_not_called()

    @pytest.mark.asyncio
    async def test_both_flags_true_rejected(self, adherence_service, db_session, test_dose_record):
        with pytest.raises(ValueError):
            await adherence_service.update_adherence(
                test_dose_record.id, is_taken=True, is_skipped=True, db=db_session
            )

        db_session.refresh(test_dose_record)
        assert test_dose_record.is_taken is False
        assert test_dose_record.is_skipped is False

    @pytest.mark.asyncio
    async def test_get_record(self, adherence_service, db_session, test_dose_record):
        assert (await adherence_service.get_record(test_dose_record.id, db=db_session)).id == test_dose_record.id
        assert await adherence_service.get_record(99999, db=db_session) is None


# =============================================================================
# Test Classified Reads
# =============================================================================

class TestGetAdherence:
    """Tests for get_adherence"""

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_first_read_backfills_and_classifies(
        self, adherence_service, db_session, test_patient, delivered_prescription, fixed_now
    ):
        snapshot = await adherence_service.get_adherence(test_patient.id, now=fixed_now, db=db_session)

        # Two medicines due at 09:00 today, now is 10:00
        assert snapshot.stats.total == 10
        assert len(snapshot.overdue) == 2
        assert len(snapshot.pending) == 2
        assert snapshot.due_now == []
        assert len(snapshot.upcoming) == 8
        assert snapshot.current_time_str == "10:00:00"

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_repeated_reads_keep_count(
        self, adherence_service, db_session, test_patient, delivered_prescription, fixed_now
    ):
        await adherence_service.get_adherence(test_patient.id, now=fixed_now, db=db_session)
        snapshot = await adherence_service.get_adherence(test_patient.id, now=fixed_now, db=db_session)

        assert snapshot.stats.total == 10
        assert db_session.query(DoseRecord).count() == 10

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_prescription_filter(
        self, adherence_service, db_session, test_patient, delivered_prescription,
        prescription_factory, fixed_now
    ):
        other = prescription_factory([{"name": "Zinc", "duration": "2", "time_of_day": "10:30:00"}])

        snapshot = await adherence_service.get_adherence(
            test_patient.id, prescription_id=other.id, now=fixed_now, db=db_session
        )

        assert snapshot.stats.total == 2
        assert [r.medicine_name for r in snapshot.due_now] == ["Zinc"]
        assert db_session.query(DoseRecord).count() == 12

    @pytest.mark.asyncio
    @pytest.mark.database
    async def test_taken_dose_reflected_in_stats(
        self, adherence_service, db_session, test_patient, delivered_prescription, fixed_now
    ):
        snapshot = await adherence_service.get_adherence(test_patient.id, now=fixed_now, db=db_session)
        for record in snapshot.overdue:
            await adherence_service.update_adherence(record.id, is_taken=True, now=fixed_now, db=db_session)

        snapshot = await adherence_service.get_adherence(test_patient.id, now=fixed_now, db=db_session)

        assert snapshot.stats.taken == 2
        assert snapshot.stats.overdue == 0
        assert snapshot.stats.adherence_rate == 20.0

    @pytest.mark.asyncio
    async def test_uses_configured_clock(
        self, adherence_service, db_session, test_patient, delivered_prescription
    ):
        frozen = datetime(2026, 3, 10, 8, 30, 15)
        with patch("services.adherence_service.current_instant", return_value=frozen):
            snapshot = await adherence_service.get_adherence(test_patient.id, db=db_session)

        assert snapshot.current_time_str == "08:30:00"
        assert len(snapshot.due_now) == 2
        assert min(r.scheduled_date for r in snapshot.all) == frozen.date()
