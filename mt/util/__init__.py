"""Small shared helpers: time formatting and duration input parsing."""
from .misc import now_iso, format_stopwatch, format_countdown, format_unit_time, parse_duration_input, duration_from_inputs

__all__ = ["now_iso", "format_stopwatch", "format_countdown", "format_unit_time", "parse_duration_input",
           "duration_from_inputs"]
