# ==============================================
# SampleAggregator
# ==============================================
#
# PURPOSE:
#   Reduce the raw per-week samples of one weekday into one
#   SlotSummary per time-of-day bucket. This is the "observation
#   engine": it turns weeks of history into evidence the classifier
#   can apply thresholds to.
#
# CLASS: SampleAggregator
# -----------------------
#   Stateless — buckets in, summaries out. Independent weekdays can be
#   aggregated concurrently.
#
#   Methods:
#   --------
#   - aggregate(buckets, day=None, weekday=None) -> AggregationResult
#       Summarize every bucket. Empty buckets are logged, recorded as
#       CorruptBucket in the result and skipped; siblings are unaffected.
#
#   - summarize_bucket(index, bucket, day, weekday=None) -> SlotSummary
#       Summarize a single bucket. Raises CorruptBucket if it is empty.
#
#   Averaging rules:
#   ----------------
#     Wi-Fi  (only samples with wifi.connected):
#       bytes/s     = Σ(sent + received) / Σ elapsed seconds
#       link speed  = Σ bandwidth / sample count
#       signal      = Σ signal_strength / sample count
#     Mobile (only connected, non-metered, non-roaming samples):
#       bytes/s     = Σ(sent + received) / Σ elapsed seconds
#       signal      = Σ signal_strength / sample count
#
# ==============================================

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import List, Optional, Sequence

from fetchwindow.errors import CorruptBucket
from fetchwindow.samples import RawSample
from .slot_summary import SlotSummary

logger = logging.getLogger(__name__)


@dataclass
class AggregationResult:
    """Summaries for the healthy buckets plus any corruption found."""
    summaries: List[SlotSummary] = field(default_factory=list)
    corrupt_buckets: List[CorruptBucket] = field(default_factory=list)
    bucket_count: int = 0  # Buckets in the input, corrupt ones included


class SampleAggregator:
    """
    Turns WeekdayBuckets into SlotSummary objects.
    """

    def aggregate(
        self,
        buckets: Sequence[Sequence[RawSample]],
        day: Optional[date] = None,
        weekday: Optional[int] = None,
    ) -> AggregationResult:
        """
        Summarize every bucket of one weekday.

        Args:
            buckets: Time-of-day buckets in chronological order
            day: Day the summaries' time_of_day is anchored to (default today)
            weekday: Weekday the buckets came from, used in error reports

        Returns:
            AggregationResult with one summary per non-empty bucket
        """
        day = day or date.today()
        result = AggregationResult(bucket_count=len(buckets))

        for index, bucket in enumerate(buckets):
            try:
                result.summaries.append(
                    self.summarize_bucket(index, bucket, day, weekday)
                )
            except CorruptBucket as e:
                # One corrupt bucket must not block every other recommendation
                logger.warning("Corrupted sample store, skipping bucket: %s", e)
                result.corrupt_buckets.append(e)

        return result

    def summarize_bucket(
        self,
        index: int,
        bucket: Sequence[RawSample],
        day: date,
        weekday: Optional[int] = None,
    ) -> SlotSummary:
        """
        Average one bucket's samples.

        Args:
            index: Position of the bucket within the day
            bucket: One RawSample per historical week
            day: Day to anchor the resulting time_of_day to
            weekday: Weekday the bucket came from, used in error reports

        Returns:
            The bucket's SlotSummary

        Raises:
            CorruptBucket: if the bucket holds no samples
        """
        if not bucket:
            raise CorruptBucket(index, weekday)

        weeks = len(bucket)
        total_seconds = 0.0

        wifi_bytes = 0.0
        wifi_link_speed = 0.0
        wifi_signal = 0.0
        mobile_bytes = 0.0
        mobile_signal = 0.0

        for sample in bucket:
            total_seconds += sample.elapsed_seconds

            if sample.wifi.connected:
                wifi_bytes += sample.wifi.data_sent + sample.wifi.data_received
                wifi_link_speed += sample.wifi.bandwidth
                wifi_signal += sample.wifi.signal_strength

            if sample.is_mobile_candidate:
                mobile_bytes += sample.mobile.data_sent + sample.mobile.data_received
                mobile_signal += sample.mobile.signal_strength

        # Every sample in a bucket shares the same time-of-day
        end = bucket[0].end
        time_of_day = datetime.combine(day, time(end.hour, end.minute))

        return SlotSummary(
            bucket_index=index,
            time_of_day=time_of_day,
            avg_wifi_bytes_per_second=_rate(wifi_bytes, total_seconds),
            avg_wifi_link_speed=wifi_link_speed / weeks,
            avg_wifi_signal_strength=wifi_signal / weeks,
            avg_mobile_bytes_per_second=_rate(mobile_bytes, total_seconds),
            avg_mobile_signal_strength=mobile_signal / weeks,
            sample_count=weeks,
        )


def _rate(total_bytes: float, seconds: float) -> float:
    if seconds <= 0:
        return 0.0
    return total_bytes / seconds
