# ==============================================
# SlotClassifier
# ==============================================
#
# PURPOSE:
#   Takes the SlotSummary list from the SampleAggregator and applies
#   fixed quality thresholds to label each bucket usable for Wi-Fi
#   and/or mobile. Buckets that have already passed are dropped.
#
# CLASS: SlotClassifier
# ---------------------
#   Stateless — summaries in, slot lists out.
#
#   Constructor:
#   ------------
#   - __init__(thresholds: SlotThresholds | None = None)
#
#   Methods:
#   --------
#   - classify(summaries, now) -> (wifi_slots, mobile_slots)
#       Rules, applied per summary in input order:
#
#       RULE 1: PAST → EXCLUDED
#         time_of_day < now → dropped from both lists
#
#       RULE 2: WI-FI USABLE → wifi_slots
#         link speed, throughput window and signal all pass
#
#       RULE 3: MOBILE USABLE AND NOT WI-FI → mobile_slots
#         Mobile is a fallback; a time already covered by Wi-Fi is
#         never duplicated in the mobile list.
#
#       Output order matches input order (ascending time-of-day).
#
#   - usability_mask(summaries, bucket_count) -> list[bool]
#       Full-day usability (Wi-Fi or mobile) indexed by bucket, with
#       no past-time filtering. Missing buckets are False.
#
#   - is_wifi_usable(summary) -> bool
#   - is_mobile_usable(summary) -> bool
#
# ==============================================

from datetime import datetime
from typing import List, Optional, Sequence, Tuple

from .decision import SlotThresholds
from .slot_summary import ClassifiedSlot, SlotSummary


class SlotClassifier:
    """
    Applies SlotThresholds to SlotSummary objects.
    """

    def __init__(self, thresholds: Optional[SlotThresholds] = None):
        """
        Args:
            thresholds: Optional SlotThresholds. Defaults are used when
                        not provided.
        """
        self.thresholds = thresholds or SlotThresholds()

    def is_wifi_usable(self, summary: SlotSummary) -> bool:
        t = self.thresholds
        return (
            summary.avg_wifi_link_speed >= t.wifi_min_link_speed
            and t.wifi_min_bytes_per_second
            <= summary.avg_wifi_bytes_per_second
            <= t.wifi_max_bytes_per_second
            and summary.avg_wifi_signal_strength >= t.wifi_min_signal_strength
        )

    def is_mobile_usable(self, summary: SlotSummary) -> bool:
        t = self.thresholds
        return (
            t.mobile_min_bytes_per_second
            <= summary.avg_mobile_bytes_per_second
            <= t.mobile_max_bytes_per_second
            and summary.avg_mobile_signal_strength >= t.mobile_min_signal_strength
        )

    def label(self, summary: SlotSummary) -> ClassifiedSlot:
        """Attach both usability flags to a summary."""
        return ClassifiedSlot(
            summary=summary,
            wifi_usable=self.is_wifi_usable(summary),
            mobile_usable=self.is_mobile_usable(summary),
        )

    def classify(
        self,
        summaries: Sequence[SlotSummary],
        now: datetime,
    ) -> Tuple[List[ClassifiedSlot], List[ClassifiedSlot]]:
        """
        Split summaries into Wi-Fi and mobile candidate slots.

        Args:
            summaries: Summaries in ascending time-of-day order
            now: Current instant; earlier slots are excluded

        Returns:
            Tuple of (wifi_slots, mobile_slots)
        """
        upcoming = [
            self.label(summary)
            for summary in summaries
            if summary.time_of_day >= now
        ]

        wifi_slots = [slot for slot in upcoming if slot.wifi_usable]
        wifi_times = {slot.time_of_day for slot in wifi_slots}

        mobile_slots = [
            slot for slot in upcoming
            if slot.mobile_usable and slot.time_of_day not in wifi_times
        ]

        return wifi_slots, mobile_slots

    def usability_mask(
        self,
        summaries: Sequence[SlotSummary],
        bucket_count: int,
    ) -> List[bool]:
        """
        Build the full-day usability sequence used by coarse selection.

        Args:
            summaries: Summaries of the healthy buckets
            bucket_count: Number of buckets in the day, corrupt ones included

        Returns:
            List of length bucket_count; True where the bucket is usable
            over Wi-Fi or mobile
        """
        mask = [False] * bucket_count
        for summary in summaries:
            if 0 <= summary.bucket_index < bucket_count:
                mask[summary.bucket_index] = (
                    self.is_wifi_usable(summary) or self.is_mobile_usable(summary)
                )
        return mask
