# ==============================================
# SampleGenerator
# ==============================================
#
# PURPOSE:
#   Produce a synthetic but plausible measurement history used to seed
#   an empty sample store, so a fresh install has something to analyse.
#
# CLASS: SampleGenerator
# ----------------------
#   Constructor:
#   ------------
#   - __init__(weeks=4, bucket_minutes=15, seed=None)
#       Same seed → same history.
#
#   Methods:
#   --------
#   - generate(end_day: date | None = None) -> Iterator[RawSample]
#       One sample per bucket for every day in the `weeks * 7` days
#       before `end_day` (default today).
#
#   Daily profile (weekdays):
#   -------------------------
#     00:00-07:00  home Wi-Fi, mostly idle
#     07:00-09:00  commute on mobile (sometimes metered or roaming)
#     09:00-17:00  office Wi-Fi
#     17:00-18:30  commute on mobile
#     18:30-24:00  home Wi-Fi, busy evening
#   Weekends stay on home Wi-Fi with a mobile outing in the afternoon.
#
# ==============================================

import random
from datetime import date, datetime, timedelta
from typing import Iterator, Optional

from fetchwindow.samples import MobileReading, RawSample, WifiReading


class SampleGenerator:
    """
    Deterministic synthetic sample history.
    """

    def __init__(
        self,
        weeks: int = 4,
        bucket_minutes: int = 15,
        seed: Optional[int] = None,
    ):
        self.weeks = weeks
        self.bucket_minutes = bucket_minutes
        self._random = random.Random(seed)

    def generate(self, end_day: Optional[date] = None) -> Iterator[RawSample]:
        end_day = end_day or date.today()
        first_day = end_day - timedelta(days=self.weeks * 7)
        step = timedelta(minutes=self.bucket_minutes)
        per_day = 24 * 60 // self.bucket_minutes

        for offset in range(self.weeks * 7):
            day = first_day + timedelta(days=offset)
            midnight = datetime.combine(day, datetime.min.time())
            for index in range(per_day):
                start = midnight + index * step
                yield self._sample(start, start + step)

    def _sample(self, start: datetime, end: datetime) -> RawSample:
        seconds = (end - start).total_seconds()
        hour = start.hour + start.minute / 60
        weekend = start.weekday() >= 5

        if weekend:
            on_mobile = 13 <= hour < 16
            busy = 10 <= hour < 23
        else:
            on_mobile = 7 <= hour < 9 or 17 <= hour < 18.5
            busy = 9 <= hour < 17 or 18.5 <= hour < 23

        if on_mobile:
            return RawSample(
                start=start,
                end=end,
                wifi=WifiReading(connected=False),
                mobile=self._mobile(seconds),
            )

        return RawSample(
            start=start,
            end=end,
            wifi=self._wifi(seconds, busy),
            mobile=MobileReading(
                connected=True,
                metered=True,
                signal_strength=self._random.uniform(20, 60),
            ),
        )

    def _wifi(self, seconds: float, busy: bool) -> WifiReading:
        r = self._random
        # A small share of intervals drop off Wi-Fi entirely
        if r.random() < 0.05:
            return WifiReading(connected=False)

        rate = r.uniform(500, 20000) if busy else r.uniform(20, 400)
        total = int(rate * seconds)
        sent = int(total * r.uniform(0.05, 0.3))
        return WifiReading(
            connected=True,
            data_sent=sent,
            data_received=total - sent,
            bandwidth=r.choice([1, 2, 5.5, 6, 11, 24, 36, 54]),
            signal_strength=r.uniform(15, 95),
        )

    def _mobile(self, seconds: float) -> MobileReading:
        r = self._random
        rate = r.uniform(50, 8000)
        total = int(rate * seconds)
        sent = int(total * r.uniform(0.05, 0.3))
        return MobileReading(
            connected=r.random() > 0.05,
            metered=r.random() < 0.2,
            roaming=r.random() < 0.05,
            data_sent=sent,
            data_received=total - sent,
            signal_strength=r.uniform(10, 90),
        )
