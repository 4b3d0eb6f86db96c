"""
Schedule Expander
Expands a prescription's medicine list into daily dose occurrences
"""

import logging
from typing import Any, Iterable, List, Optional
from dataclasses import dataclass
from datetime import date, timedelta

from config import schedule_config
from tools.clock import current_instant, format_clock_time
from tools.duration_parser import parse_duration_days


logger = logging.getLogger(__name__)


@dataclass
class DoseOccurrence:
    """A dose record that has not been stored yet"""
    patient_id: int
    prescription_id: int
    medicine_id: int
    medicine_name: str
    scheduled_date: date
    scheduled_time: str = schedule_config.DEFAULT_SCHEDULED_TIME
    is_taken: bool = False
    is_skipped: bool = False

    def to_dict(self) -> dict:
        return {
            "patient_id": self.patient_id,
            "prescription_id": self.prescription_id,
            "medicine_id": self.medicine_id,
            "medicine_name": self.medicine_name,
            "scheduled_date": self.scheduled_date,
            "scheduled_time": self.scheduled_time,
            "is_taken": self.is_taken,
            "is_skipped": self.is_skipped,
        }


def _dose_time(medicine: Any) -> str:
    """Explicit time of day for the medicine, or the default dose time"""
    explicit = getattr(medicine, "time_of_day", None)
    if not explicit:
        return schedule_config.DEFAULT_SCHEDULED_TIME
    try:
        return format_clock_time(explicit)
    except TypeError:
        logger.warning(
            f"Ignoring unreadable time {explicit!r} for medicine "
            f"{getattr(medicine, 'name', '?')}"
        )
        return schedule_config.DEFAULT_SCHEDULED_TIME


def expand_prescription(
    patient_id: int,
    prescription_id: int,
    medicines: Iterable[Any],
    start_date: Optional[date] = None
) -> List[DoseOccurrence]:
    """
    Produce one occurrence per medicine per day, starting at start_date.

    Each medicine needs ``id``, ``name`` and ``duration`` attributes and may
    carry ``time_of_day``. No existence check is made here; callers must
    expand a prescription at most once.

    Args:
        patient_id: Patient the doses belong to
        prescription_id: Prescription being expanded
        medicines: Ordered medicine entries of the prescription
        start_date: Anchor date (default: today on the configured clock)

    Returns:
        Occurrences ordered by medicine, then by date
    """
    start_date = start_date or current_instant().date()
    occurrences: List[DoseOccurrence] = []

    for medicine in medicines:
        days = parse_duration_days(medicine.duration)
        dose_time = _dose_time(medicine)

        for offset in range(days):
            occurrences.append(DoseOccurrence(
                patient_id=patient_id,
                prescription_id=prescription_id,
                medicine_id=medicine.id,
                medicine_name=medicine.name,
                scheduled_date=start_date + timedelta(days=offset),
                scheduled_time=dose_time,
            ))

    logger.debug(
        f"Expanded prescription {prescription_id} into "
        f"{len(occurrences)} occurrences from {start_date}"
    )
    return occurrences
