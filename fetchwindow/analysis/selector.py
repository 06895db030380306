# ==============================================
# SlotSelector
# ==============================================
#
# PURPOSE:
#   Given the classified slot lists and the current instant, pick the
#   best next slot to transfer data. This is the "brain" of the
#   scheduler: a greedy, single-day, urgency-then-preference policy.
#
# CLASS: SlotSelector
# -------------------
#   Stateless apart from the look-ahead window.
#
#   Constructor:
#   ------------
#   - __init__(lookahead: timedelta = 1 hour)
#
#   Methods:
#   --------
#   - select_next(wifi_slots, mobile_slots, now) -> Recommendation
#       Steps, first match wins:
#
#       STEP 1: BEST WI-FI WITHIN THE LOOK-AHEAD
#         Highest avg_wifi_link_speed, ties → earliest
#
#       STEP 2: BEST MOBILE WITHIN THE LOOK-AHEAD
#         Highest avg_mobile_signal_strength, ties → earliest
#
#       STEP 3: EARLIEST REMAINING WI-FI SLOT TODAY
#
#       STEP 4: EARLIEST REMAINING MOBILE SLOT TODAY
#
#       STEP 5: NONE_TODAY
#
#       Slots earlier than `now` are never candidates.
#
#   - within_window(slots, now) -> list[ClassifiedSlot]
#       Slots with now <= time_of_day < now + lookahead. Always a list.
#
# FUNCTION:
# ---------
# - select_by_coarse_window(good_times, delta_time_minutes, now) -> datetime
#     Walk the full-day usability sequence from the bucket at or after
#     `now`; return the first usable bucket as an absolute instant.
#     Raises NoGoodTimeToday if none is left.
#
# ==============================================

import logging
import math
from datetime import datetime, timedelta
from typing import Callable, List, Optional, Sequence

from fetchwindow.errors import NoGoodTimeToday
from .decision import Channel, Recommendation, RecommendationStatus
from .slot_summary import ClassifiedSlot

logger = logging.getLogger(__name__)

DEFAULT_LOOKAHEAD = timedelta(hours=1)
MINUTES_PER_DAY = 24 * 60


class SlotSelector:
    """
    Picks the next actionable slot using the Wi-Fi-first fallback policy.
    """

    def __init__(self, lookahead: timedelta = DEFAULT_LOOKAHEAD):
        self.lookahead = lookahead

    def within_window(
        self,
        slots: Sequence[ClassifiedSlot],
        now: datetime,
    ) -> List[ClassifiedSlot]:
        """
        Return the slots that start inside the look-ahead window.

        Args:
            slots: Candidate slots in ascending time-of-day order
            now: Current instant

        Returns:
            Matching slots (an empty list when there are none)
        """
        horizon = now + self.lookahead
        return [slot for slot in slots if now <= slot.time_of_day < horizon]

    def select_next(
        self,
        wifi_slots: Sequence[ClassifiedSlot],
        mobile_slots: Sequence[ClassifiedSlot],
        now: datetime,
    ) -> Recommendation:
        """
        Choose the best next slot.

        Args:
            wifi_slots: Wi-Fi usable slots, ascending time-of-day
            mobile_slots: Mobile fallback slots, ascending time-of-day
            now: Current instant

        Returns:
            A Recommendation with status FOUND or NONE_TODAY
        """
        todays_wifi = [slot for slot in wifi_slots if slot.time_of_day >= now]
        todays_mobile = [slot for slot in mobile_slots if slot.time_of_day >= now]

        # STEP 1: best Wi-Fi within the look-ahead window
        best = _best_by(
            self.within_window(todays_wifi, now),
            key=lambda slot: slot.avg_wifi_link_speed,
        )
        if best is not None:
            logger.debug("Wi-Fi time within window: %s", best.time_of_day)
            return _found(best, Channel.WIFI, "Best Wi-Fi slot within the look-ahead window")

        # STEP 2: best mobile within the look-ahead window
        best = _best_by(
            self.within_window(todays_mobile, now),
            key=lambda slot: slot.avg_mobile_signal_strength,
        )
        if best is not None:
            logger.debug("Mobile time within window: %s", best.time_of_day)
            return _found(best, Channel.MOBILE, "Best mobile slot within the look-ahead window")

        # STEP 3: earliest Wi-Fi later today
        if todays_wifi:
            logger.debug("No connection times within window, next Wi-Fi time is %s",
                         todays_wifi[0].time_of_day)
            return _found(todays_wifi[0], Channel.WIFI, "Earliest remaining Wi-Fi slot today")

        # STEP 4: earliest mobile later today
        if todays_mobile:
            logger.debug("No Wi-Fi times today, next mobile time is %s",
                         todays_mobile[0].time_of_day)
            return _found(todays_mobile[0], Channel.MOBILE, "Earliest remaining mobile slot today")

        # STEP 5: nothing left; cross-day lookahead is the caller's job
        logger.info("No usable connection times remain today")
        return Recommendation.none_today()


def _best_by(
    slots: Sequence[ClassifiedSlot],
    key: Callable[[ClassifiedSlot], float],
) -> Optional[ClassifiedSlot]:
    # Strict > keeps the earliest slot on ties
    best = None
    for slot in slots:
        if best is None or key(slot) > key(best):
            best = slot
    return best


def _found(slot: ClassifiedSlot, channel: Channel, reason: str) -> Recommendation:
    return Recommendation(
        status=RecommendationStatus.FOUND,
        slot=slot,
        channel=channel,
        reason=reason,
    )


def select_by_coarse_window(
    good_times: Sequence[bool],
    delta_time_minutes: int,
    now: datetime,
) -> datetime:
    """
    Find the next usable bucket in a full-day usability sequence.

    The search starts at the first bucket boundary at or after `now`,
    so the result is never earlier than `now`.

    Args:
        good_times: Per-bucket usability for the whole day
        delta_time_minutes: Width of one bucket in minutes
        now: Current instant

    Returns:
        Start of the first usable bucket, on the same day as `now`

    Raises:
        NoGoodTimeToday: if no bucket from the start index onward is usable
    """
    if delta_time_minutes <= 0:
        raise ValueError("delta_time_minutes must be positive")

    # Any seconds past a boundary push the start to the next bucket
    micros_now = (
        (now.hour * 3600 + now.minute * 60 + now.second) * 1_000_000 + now.microsecond
    )
    start_index = math.ceil(micros_now / (delta_time_minutes * 60 * 1_000_000))

    for index in range(start_index, len(good_times)):
        if good_times[index]:
            # now rounded up to the start bucket boundary, then advanced
            minutes = start_index * delta_time_minutes
            minutes += (index - start_index) * delta_time_minutes
            if minutes >= MINUTES_PER_DAY:
                break
            return now.replace(
                hour=minutes // 60,
                minute=minutes % 60,
                second=0,
                microsecond=0,
            )

    raise NoGoodTimeToday()
