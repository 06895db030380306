# ==============================================
# Pytest Configuration and Fixtures
# ==============================================
#
# Shared fixtures for all tests.
#
# FIXTURES:
# ---------
# - day              → fixed analysis day (a Monday)
# - make_sample      → factory: RawSample ending at a given time
# - make_summary     → factory: SlotSummary at hh:mm on `day`
# - build_history    → factory: weeks of same-weekday samples for a store
# - known_samples    → four weeks of the known history below
# - memory_store     → MemorySampleStore holding known_samples
# - fixed_clock      → mutable clock for AnalysisSession
#
# Known history (memory_store):
#   - 07:45-08:00 bucket: good Wi-Fi (link 5, 1000 B/s, signal 30)
#   - 11:45-12:00 bucket: good mobile only
#   - 14:45-15:00 bucket: good Wi-Fi (link 11)
#   - everything else: idle, unusable
# ==============================================

from datetime import date, datetime, timedelta

import pytest

from fetchwindow.analysis import SlotSummary
from fetchwindow.samples import MobileReading, RawSample, WifiReading
from fetchwindow.storage import MemorySampleStore

BUCKET_MINUTES = 15
BUCKET_SECONDS = BUCKET_MINUTES * 60

GOOD_WIFI = WifiReading(
    connected=True,
    data_sent=100 * BUCKET_SECONDS,
    data_received=900 * BUCKET_SECONDS,
    bandwidth=5,
    signal_strength=30,
)
FAST_WIFI = WifiReading(
    connected=True,
    data_sent=500 * BUCKET_SECONDS,
    data_received=4500 * BUCKET_SECONDS,
    bandwidth=11,
    signal_strength=70,
)
IDLE_WIFI = WifiReading(
    connected=True,
    data_sent=0,
    data_received=10 * BUCKET_SECONDS,
    bandwidth=1,
    signal_strength=20,
)
GOOD_MOBILE = MobileReading(
    connected=True,
    data_sent=50 * BUCKET_SECONDS,
    data_received=450 * BUCKET_SECONDS,
    signal_strength=60,
)
NO_MOBILE = MobileReading()


@pytest.fixture
def day() -> date:
    return date(2026, 10, 19)


@pytest.fixture
def make_sample():
    """Factory for a RawSample that ends at `end`."""

    def _make(end: datetime, wifi=IDLE_WIFI, mobile=NO_MOBILE, minutes=BUCKET_MINUTES):
        return RawSample(
            start=end - timedelta(minutes=minutes),
            end=end,
            wifi=wifi,
            mobile=mobile,
        )

    return _make


@pytest.fixture
def make_summary(day):
    """Factory for a SlotSummary at hh:mm on the fixture day."""

    def _make(hour: int, minute: int = 0, **averages):
        time_of_day = datetime.combine(day, datetime.min.time()).replace(
            hour=hour, minute=minute
        )
        index = (hour * 60 + minute) // BUCKET_MINUTES
        return SlotSummary(bucket_index=index, time_of_day=time_of_day, **averages)

    return _make


@pytest.fixture
def build_history(day):
    """
    Factory for `weeks` of samples on the fixture day's weekday.

    `overrides` maps bucket_index → (wifi, mobile), or → None to leave
    that bucket without samples.
    """

    def _build(overrides=None, weeks=4):
        overrides = overrides or {}
        samples = []
        for week in range(1, weeks + 1):
            midnight = datetime.combine(day - timedelta(weeks=week), datetime.min.time())
            for index in range(24 * 60 // BUCKET_MINUTES):
                reading = overrides.get(index, (IDLE_WIFI, NO_MOBILE))
                if reading is None:
                    continue
                wifi, mobile = reading
                start = midnight + timedelta(minutes=index * BUCKET_MINUTES)
                samples.append(
                    RawSample(
                        start=start,
                        end=start + timedelta(minutes=BUCKET_MINUTES),
                        wifi=wifi,
                        mobile=mobile,
                    )
                )
        return samples

    return _build


KNOWN_OVERRIDES = {
    31: (GOOD_WIFI, NO_MOBILE),  # 07:45-08:00 → labelled 08:00
    47: (IDLE_WIFI, GOOD_MOBILE),  # 11:45-12:00 → labelled 12:00
    59: (FAST_WIFI, NO_MOBILE),  # 14:45-15:00 → labelled 15:00
}


@pytest.fixture
def known_samples(build_history):
    return build_history(KNOWN_OVERRIDES)


@pytest.fixture
def memory_store(known_samples):
    store = MemorySampleStore(bucket_minutes=BUCKET_MINUTES, max_weeks=4)
    store.add_samples(known_samples)
    return store


class FixedClock:
    """Callable clock whose current time tests can move."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now


@pytest.fixture
def fixed_clock(day):
    return FixedClock(datetime.combine(day, datetime.min.time()).replace(hour=7, minute=50))
