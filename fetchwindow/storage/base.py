# ==============================================
# SampleStore (interface)
# ==============================================
#
# PURPOSE:
#   The contract every historical sample store fulfils. The analysis
#   session only needs to open a store, seed it when it is empty, and
#   read one weekday's time-of-day buckets.
#
# ENUM:
# -----
# - StoreStatus: READY, EMPTY, ERROR
#
# CLASS: SampleStore (ABC)
# ------------------------
#   Constructor:
#   ------------
#   - __init__(bucket_minutes: int = 15, max_weeks: int = 4)
#
#   Abstract methods:
#   -----------------
#   - open() -> StoreStatus
#   - get_records_for_weekday(weekday: int) -> WeekdayBuckets
#       weekday follows date.weekday() (Monday = 0). Always returns
#       `bucket_count` buckets; a bucket with no samples comes back
#       as an empty list so the aggregator can report it.
#   - add_samples(samples: Iterable[RawSample]) -> int
#   - save() -> None
#
#   Helpers:
#   --------
#   - bucket_count -> int                → 1440 // bucket_minutes
#   - bucket_key(sample) -> (weekday, bucket_index)
#   - close() -> None                    → release resources (no-op default)
#
# ==============================================

from abc import ABC, abstractmethod
from enum import Enum
from typing import Iterable, Tuple

from fetchwindow.samples import RawSample, WeekdayBuckets

MINUTES_PER_DAY = 24 * 60


class StoreStatus(Enum):
    """Result of opening a sample store."""
    READY = "ready"
    EMPTY = "empty"
    ERROR = "error"


class SampleStore(ABC):
    """
    Keyed (weekday, time-of-day bucket) repository of RawSample.
    """

    def __init__(self, bucket_minutes: int = 15, max_weeks: int = 4):
        if bucket_minutes <= 0 or MINUTES_PER_DAY % bucket_minutes:
            raise ValueError(
                f"bucket_minutes must evenly divide a day, got {bucket_minutes}"
            )
        self.bucket_minutes = bucket_minutes
        self.max_weeks = max_weeks

    @property
    def bucket_count(self) -> int:
        return MINUTES_PER_DAY // self.bucket_minutes

    def bucket_key(self, sample: RawSample) -> Tuple[int, int]:
        """
        Locate the bucket a sample belongs to.

        Returns:
            Tuple of (weekday, bucket_index) taken from the sample's start
        """
        minutes = sample.start.hour * 60 + sample.start.minute
        return sample.start.weekday(), minutes // self.bucket_minutes

    @abstractmethod
    def open(self) -> StoreStatus:
        raise NotImplementedError

    @abstractmethod
    def get_records_for_weekday(self, weekday: int) -> WeekdayBuckets:
        raise NotImplementedError

    @abstractmethod
    def add_samples(self, samples: Iterable[RawSample]) -> int:
        raise NotImplementedError

    @abstractmethod
    def save(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        """Release any resources held by the store."""
        return None

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
