# ==============================================
# Tests for SampleAggregator
# ==============================================
#
# Covers:
# - Throughput divided by elapsed seconds, other averages by sample count
# - Disconnected Wi-Fi and metered / roaming mobile contribute nothing
# - Empty buckets reported as CorruptBucket without affecting siblings
# - time_of_day anchored to the requested day
# ==============================================

from datetime import datetime, time, timedelta

import pytest

from fetchwindow.analysis import SampleAggregator, SlotClassifier
from fetchwindow.errors import CorruptBucket
from fetchwindow.samples import MobileReading, WifiReading


@pytest.fixture
def aggregator():
    return SampleAggregator()


@pytest.fixture
def history_end(day):
    # 08:00 on the Monday before the fixture day
    return datetime.combine(day - timedelta(weeks=1), time(8, 0))


class TestWifiAverages:

    def test_throughput_uses_elapsed_seconds(self, aggregator, make_sample, history_end, day):
        bucket = [
            make_sample(history_end, wifi=WifiReading(True, 900 * 100, 900 * 900, 5, 30)),
            make_sample(history_end - timedelta(weeks=1),
                        wifi=WifiReading(True, 900 * 1000, 900 * 2000, 7, 50)),
        ]

        summary = aggregator.summarize_bucket(31, bucket, day)

        # (900_000 + 2_700_000) bytes over 1800 seconds
        assert summary.avg_wifi_bytes_per_second == pytest.approx(2000)
        assert summary.avg_wifi_link_speed == pytest.approx(6)
        assert summary.avg_wifi_signal_strength == pytest.approx(40)
        assert summary.sample_count == 2

    def test_disconnected_wifi_contributes_nothing(self, aggregator, make_sample, history_end, day):
        bucket = [
            make_sample(history_end, wifi=WifiReading(True, 0, 900 * 1000, 10, 80)),
            make_sample(history_end - timedelta(weeks=1),
                        wifi=WifiReading(False, 900 * 5000, 900 * 5000, 54, 99)),
        ]

        summary = aggregator.summarize_bucket(31, bucket, day)

        # Disconnected sample still counts towards the denominators
        assert summary.avg_wifi_bytes_per_second == pytest.approx(500)
        assert summary.avg_wifi_link_speed == pytest.approx(5)
        assert summary.avg_wifi_signal_strength == pytest.approx(40)

    def test_averages_stay_within_sample_bounds(self, aggregator, make_sample, history_end, day):
        readings = [
            WifiReading(True, 0, 900 * rate, speed, signal)
            for rate, speed, signal in [(300, 2, 20), (4000, 54, 90), (1200, 11, 45), (800, 6, 33)]
        ]
        bucket = [
            make_sample(history_end - timedelta(weeks=week), wifi=reading)
            for week, reading in enumerate(readings)
        ]

        summary = aggregator.summarize_bucket(31, bucket, day)

        assert 300 <= summary.avg_wifi_bytes_per_second <= 4000
        assert 2 <= summary.avg_wifi_link_speed <= 54
        assert 20 <= summary.avg_wifi_signal_strength <= 90

    def test_zero_elapsed_time_gives_zero_throughput(self, aggregator, make_sample, history_end, day):
        bucket = [make_sample(history_end, wifi=WifiReading(True, 100, 100, 5, 30), minutes=0)]

        summary = aggregator.summarize_bucket(31, bucket, day)

        assert summary.avg_wifi_bytes_per_second == 0
        assert summary.avg_wifi_link_speed == 5


class TestMobileAverages:

    def test_metered_sample_contributes_zero(self, aggregator, make_sample, history_end, day):
        metered = MobileReading(
            connected=True, metered=True, data_sent=900 * 500, data_received=900 * 500,
            signal_strength=90,
        )
        bucket = [make_sample(history_end, mobile=metered)]

        summary = aggregator.summarize_bucket(31, bucket, day)

        assert summary.avg_mobile_bytes_per_second == 0
        assert summary.avg_mobile_signal_strength == 0

    def test_roaming_sample_contributes_zero(self, aggregator, make_sample, history_end, day):
        roaming = MobileReading(
            connected=True, roaming=True, data_received=900 * 500, signal_strength=90,
        )
        summary = aggregator.summarize_bucket(31, [make_sample(history_end, mobile=roaming)], day)

        assert summary.avg_mobile_bytes_per_second == 0
        assert summary.avg_mobile_signal_strength == 0

    def test_only_candidates_add_to_mobile_sums(self, aggregator, make_sample, history_end, day):
        good = MobileReading(connected=True, data_received=900 * 600, signal_strength=80)
        metered = MobileReading(
            connected=True, metered=True, data_received=900 * 9000, signal_strength=99,
        )
        bucket = [
            make_sample(history_end, mobile=good),
            make_sample(history_end - timedelta(weeks=1), mobile=metered),
        ]

        summary = aggregator.summarize_bucket(31, bucket, day)

        assert summary.avg_mobile_bytes_per_second == pytest.approx(300)
        assert summary.avg_mobile_signal_strength == pytest.approx(40)


class TestCorruptBuckets:

    def test_empty_bucket_raises(self, aggregator, day):
        with pytest.raises(CorruptBucket) as exc_info:
            aggregator.summarize_bucket(5, [], day, weekday=0)

        assert exc_info.value.bucket_index == 5
        assert exc_info.value.weekday == 0
        assert exc_info.value.code == 4

    def test_empty_bucket_skipped_siblings_intact(self, aggregator, make_sample, history_end, day):
        good = WifiReading(True, 900 * 100, 900 * 900, 5, 30)
        buckets = [
            [make_sample(history_end, wifi=good)],
            [],
            [make_sample(history_end + timedelta(minutes=30), wifi=good)],
        ]

        result = aggregator.aggregate(buckets, day=day, weekday=0)

        assert result.bucket_count == 3
        assert [s.bucket_index for s in result.summaries] == [0, 2]
        assert [e.bucket_index for e in result.corrupt_buckets] == [1]

        now = datetime.combine(day, time(0, 0))
        wifi_slots, mobile_slots = SlotClassifier().classify(result.summaries, now)
        assert 1 not in {slot.bucket_index for slot in wifi_slots + mobile_slots}
        assert len(wifi_slots) == 2


class TestTimeOfDay:

    def test_anchored_to_requested_day(self, aggregator, make_sample, history_end, day):
        bucket = [make_sample(history_end), make_sample(history_end - timedelta(weeks=1))]

        summary = aggregator.summarize_bucket(31, bucket, day)

        assert summary.time_of_day == datetime.combine(day, time(8, 0))

    def test_aggregate_preserves_bucket_order(self, aggregator, memory_store, day):
        buckets = memory_store.get_records_for_weekday(day.weekday())

        result = aggregator.aggregate(buckets, day=day)

        assert len(result.summaries) == memory_store.bucket_count
        assert not result.corrupt_buckets
        assert [s.bucket_index for s in result.summaries] == list(range(memory_store.bucket_count))
        assert all(s.sample_count == 4 for s in result.summaries)
