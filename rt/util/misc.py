import math
import re
from datetime import datetime


# Simply returns the current local time as an ISO8601 string with timezone offset.
def now_iso():
    return datetime.now().astimezone().isoformat()


# Formats whole seconds as HH:MM:SS. Fixed-time countdowns can run past zero, so negatives keep a leading '-'.
def format_clock(seconds):
    seconds = int(seconds)
    sign = "-" if seconds < 0 else ""
    h, rem = divmod(abs(seconds), 3600)
    m, s = divmod(rem, 60)
    return f"{sign}{h:02d}:{m:02d}:{s:02d}"

# Short ledger-style duration, e.g. 5400 -> "1h 30m"
def format_duration(seconds):
    seconds = max(0, int(seconds))
    h, rem = divmod(seconds, 3600)
    return f"{h}h {rem // 60}m"

def format_money(amount):
    return f"{amount:.2f}"


# Parses a user-typed hourly rate. Returns None for anything that isn't a finite, non-negative number.
def parse_rate(text):
    if text is None:
        return None
    text = str(text).strip()
    if not text:
        return None
    try:
        value = float(text)
    except ValueError:
        return None
    if not math.isfinite(value) or value < 0:
        return None
    return value

_LEADING_INT = re.compile(r"[+-]?\d+")

# Parses a user-typed minute count from its leading whole number, so "90", "90.5" and "90min" all read as 90.
# Text without a leading number ("abc", ".5") gives None.
def parse_minutes(text):
    if text is None:
        return None
    match = _LEADING_INT.match(str(text).strip())
    if match is None:
        return None
    return int(match.group())
