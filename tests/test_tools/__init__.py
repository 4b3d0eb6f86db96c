"""
Test Tools Package
Tests for the tools module (duration parser, schedule expander, window classifier)
"""

__all__ = [
    "test_duration_parser",
    "test_schedule_expander",
    "test_window_classifier",
]
