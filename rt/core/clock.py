import math
from datetime import datetime

# Wall-clock time source. Everything that needs "now" takes a clock callable so tests can swap in a fake one.
# Elapsed time is always derived from wall-clock start times (not monotonic) because it has to survive a restart.
def system_clock():
    return datetime.now().astimezone()

# Whole seconds between two aware datetimes, floored like the billing needs.
def seconds_between(start, end):
    return math.floor((end - start).total_seconds())
