# ==============================================
# MemorySampleStore
# ==============================================
#
# PURPOSE:
#   In-process sample store. Holds the newest `max_weeks` samples of
#   every (weekday, bucket) pair in a dict. Used directly in tests and
#   demos, and as the in-memory layer of JsonSampleStore.
#
# ==============================================

import logging
from typing import Dict, Iterable, List, Tuple

from fetchwindow.samples import RawSample, WeekdayBuckets
from .base import SampleStore, StoreStatus

logger = logging.getLogger(__name__)


class MemorySampleStore(SampleStore):
    """Dict-backed store keyed by (weekday, bucket_index)."""

    def __init__(self, bucket_minutes: int = 15, max_weeks: int = 4):
        super().__init__(bucket_minutes, max_weeks)
        self._buckets: Dict[Tuple[int, int], List[RawSample]] = {}

    def open(self) -> StoreStatus:
        return StoreStatus.READY if self._buckets else StoreStatus.EMPTY

    def add_samples(self, samples: Iterable[RawSample]) -> int:
        """
        Add samples, keeping only the newest `max_weeks` per bucket.

        Returns:
            Number of samples added
        """
        added = 0
        for sample in samples:
            bucket = self._buckets.setdefault(self.bucket_key(sample), [])
            bucket.append(sample)
            bucket.sort(key=lambda s: s.start)
            if self.max_weeks and len(bucket) > self.max_weeks:
                del bucket[: len(bucket) - self.max_weeks]
            added += 1
        return added

    def get_records_for_weekday(self, weekday: int) -> WeekdayBuckets:
        if not 0 <= weekday <= 6:
            raise ValueError(f"weekday must be in 0..6, got {weekday}")
        return [
            list(self._buckets.get((weekday, index), []))
            for index in range(self.bucket_count)
        ]

    def save(self) -> None:
        # Nothing to flush for an in-memory store
        logger.debug("Memory store holds %d buckets", len(self._buckets))

    def sample_count(self) -> int:
        return sum(len(bucket) for bucket in self._buckets.values())

    def clear(self) -> None:
        self._buckets = {}
