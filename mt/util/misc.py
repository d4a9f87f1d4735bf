from datetime import datetime
from mt.common.logger import log


# Simply returns the current local time as an ISO8601 string with timezone offset.
def now_iso():
    return datetime.now().astimezone().isoformat()


# Formats elapsed stopwatch seconds as HH:MM:SS. Hours are unbounded, negative values clamp to zero.
def format_stopwatch(seconds):
    seconds = max(0, int(seconds))
    h, rem = divmod(seconds, 3600)
    m, s = divmod(rem, 60)
    return f"{h:02d}:{m:02d}:{s:02d}"

# Formats remaining countdown seconds as MM:SS. Minutes keep counting past 59 (75 minutes -> 75:00).
def format_countdown(seconds):
    seconds = max(0, int(seconds))
    m, s = divmod(seconds, 60)
    return f"{m:02d}:{s:02d}"

# Picks the right format for the given unit kind. Kind is compared by value so this works with either the
# UnitKind enum or its plain string value.
def format_unit_time(kind, seconds):
    if getattr(kind, "value", kind) == "countdown":
        return format_countdown(seconds)
    return format_stopwatch(seconds)


# Parses a single minutes/seconds text field. Anything that isn't a non-negative whole number (blank, letters,
# negatives) falls back to 0 rather than erroring.
def parse_duration_input(text):
    if text is None:
        return 0
    raw = str(text).strip()
    try:
        value = int(raw)
    except ValueError:
        if raw:
            log.debug(f"Could not parse duration input '{raw}', defaulting to 0")
        return 0
    if value < 0:
        log.debug(f"Negative duration input '{raw}', defaulting to 0")
        return 0
    return value

# Combines minutes and seconds text fields into a total number of seconds.
def duration_from_inputs(minutes_text, seconds_text):
    return parse_duration_input(minutes_text) * 60 + parse_duration_input(seconds_text)
