# ==============================================
# Analyzer
# ==============================================
#
# PURPOSE:
#   The pluggable analysis strategy used by AnalysisSession. Callers
#   that want different scoring inject their own Analyzer instead of
#   patching the default one.
#
# CLASSES:
# --------
# - Analyzer (ABC)
#     aggregate(buckets, day, weekday) -> AggregationResult
#     classify(summaries, now)         -> (wifi_slots, mobile_slots)
#     usability_mask(summaries, n)     -> list[bool]
#     select_next(wifi, mobile, now)   -> Recommendation
#
# - DefaultAnalyzer(Analyzer)
#     Composes SampleAggregator, SlotClassifier and SlotSelector.
#
# ==============================================

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta
from typing import List, Optional, Sequence, Tuple

from fetchwindow.samples import RawSample
from .aggregator import AggregationResult, SampleAggregator
from .classifier import SlotClassifier
from .decision import Recommendation, SlotThresholds
from .selector import DEFAULT_LOOKAHEAD, SlotSelector
from .slot_summary import ClassifiedSlot, SlotSummary


class Analyzer(ABC):
    """Interface every analysis strategy implements."""

    @abstractmethod
    def aggregate(
        self,
        buckets: Sequence[Sequence[RawSample]],
        day: Optional[date] = None,
        weekday: Optional[int] = None,
    ) -> AggregationResult:
        raise NotImplementedError

    @abstractmethod
    def classify(
        self,
        summaries: Sequence[SlotSummary],
        now: datetime,
    ) -> Tuple[List[ClassifiedSlot], List[ClassifiedSlot]]:
        raise NotImplementedError

    @abstractmethod
    def usability_mask(
        self,
        summaries: Sequence[SlotSummary],
        bucket_count: int,
    ) -> List[bool]:
        raise NotImplementedError

    @abstractmethod
    def select_next(
        self,
        wifi_slots: Sequence[ClassifiedSlot],
        mobile_slots: Sequence[ClassifiedSlot],
        now: datetime,
    ) -> Recommendation:
        raise NotImplementedError


class DefaultAnalyzer(Analyzer):
    """
    Threshold-based analysis with the Wi-Fi-first selection policy.
    """

    def __init__(
        self,
        thresholds: Optional[SlotThresholds] = None,
        lookahead: timedelta = DEFAULT_LOOKAHEAD,
    ):
        self.aggregator = SampleAggregator()
        self.classifier = SlotClassifier(thresholds)
        self.selector = SlotSelector(lookahead)

    def aggregate(self, buckets, day=None, weekday=None) -> AggregationResult:
        return self.aggregator.aggregate(buckets, day=day, weekday=weekday)

    def classify(self, summaries, now):
        return self.classifier.classify(summaries, now)

    def usability_mask(self, summaries, bucket_count):
        return self.classifier.usability_mask(summaries, bucket_count)

    def select_next(self, wifi_slots, mobile_slots, now) -> Recommendation:
        return self.selector.select_next(wifi_slots, mobile_slots, now)
