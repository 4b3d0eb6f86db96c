"""
Tools Package
Pure schedule-engine helpers for the DoseTrack system
"""

from .clock import (
    current_instant,
    ensure_time,
    format_clock_time
)

from .duration_parser import (
    DEFAULT_DURATION_DAYS,
    parse_duration_days
)

from .schedule_expander import (
    DoseOccurrence,
    expand_prescription
)

from .window_classifier import (
    AdherenceSnapshot,
    AdherenceStats,
    adherence_rate,
    classify_records
)


__all__ = [
    # Clock
    "current_instant",
    "ensure_time",
    "format_clock_time",
    # Duration parser
    "DEFAULT_DURATION_DAYS",
    "parse_duration_days",
    # Schedule expander
    "DoseOccurrence",
    "expand_prescription",
    # Window classifier
    "AdherenceSnapshot",
    "AdherenceStats",
    "adherence_rate",
    "classify_records",
]
