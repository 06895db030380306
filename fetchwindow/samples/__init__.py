# ==============================================
# SAMPLES: Raw measurement data model
# ==============================================
#
# Modules:
# --------
# - raw_sample.py  → RawSample, WifiReading, MobileReading
#
# A day of history for one weekday is a list of time-of-day buckets,
# each bucket a list of RawSample (one per historical week):
#
#     WeekdayBuckets = List[List[RawSample]]
#
# ==============================================

from typing import List

from .raw_sample import MobileReading, RawSample, WifiReading

WeekdayBuckets = List[List[RawSample]]

__all__ = [
    "MobileReading",
    "RawSample",
    "WifiReading",
    "WeekdayBuckets",
]
