# ==============================================
# AnalysisSession — Orchestrator
# ==============================================
#
# PURPOSE:
#   The main class callers interact with. Owns the day under analysis
#   and the derived slot lists, drives the store open/seed flow, and
#   answers "when should I fetch next?" and "can I fetch right now?".
#
# HOW IT CONNECTS THE PIECES:
#
#   ┌──────────────────────────────────────────────────────┐
#   │                   AnalysisSession                    │
#   │                                                      │
#   │  init():  OPENING ─┬─ READY ─────────────┐           │
#   │                    ├─ EMPTY → SEEDING ───┤           │
#   │                    └─ ERROR              ▼           │
#   │                                   run_analysis()     │
#   │                                          │           │
#   │  SampleStore.get_records_for_weekday()   │ (await)   │
#   │                 │                                    │
#   │                 ▼                                    │
#   │  Analyzer.aggregate → classify → usability_mask      │
#   │                 │                                    │
#   │                 ▼                                    │
#   │  wifi_slots / mobile_slots / good_times (replaced)   │
#   │                 │                                    │
#   │                 ▼                                    │
#   │  next_best_slot() → Analyzer.select_next()           │
#   │  next_best_time() → select_by_coarse_window()        │
#   │                                                      │
#   │  is_fetchable_now() → LinkProbe → FetchGate          │
#   └──────────────────────────────────────────────────────┘
#
# CONCURRENCY:
#   Single event loop. The blocking store calls run in a worker thread
#   (asyncio.to_thread) and are the only suspension points.
#   - init() calls are serialized, so an EMPTY store is seeded once.
#   - Seeding and analysis runs share one asyncio.Lock, so a query never
#     reads a store that is still being seeded.
#   - The slot lists are swapped in one synchronous step, so selection
#     never sees a partial result.
#   - A cancellation Event and the store timeout bound every store wait.
#     A worker abandoned that way is remembered; the next store call
#     waits for it (within the timeout) instead of racing it.
#
# ==============================================

import asyncio
import inspect
import logging
from dataclasses import dataclass
from datetime import date as date_type
from datetime import datetime, timedelta
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from fetchwindow import gate
from fetchwindow.analysis import (
    Analyzer,
    ClassifiedSlot,
    DefaultAnalyzer,
    Recommendation,
    select_by_coarse_window,
)
from fetchwindow.config import AppConfig, build_probe, build_store
from fetchwindow.errors import (
    SUCCESS,
    AnalysisCancelled,
    CorruptBucket,
    FetchWindowError,
    SessionNotReady,
    StoreOpenFailed,
    StoreTimeout,
    StoreUnavailable,
)
from fetchwindow.probe import LinkProbe
from fetchwindow.storage import SampleGenerator, SampleStore, StoreStatus

logger = logging.getLogger(__name__)

MINUTES_PER_DAY = 24 * 60
DEFAULT_DELTA_MINUTES = 15


class SessionState(Enum):
    """Lifecycle of an AnalysisSession."""
    IDLE = "idle"
    OPENING = "opening"
    SEEDING = "seeding"
    READY = "ready"
    ERROR = "error"


@dataclass(frozen=True)
class SessionInitResult:
    """Outcome reported by `AnalysisSession.init()`."""
    state: SessionState
    error: Optional[FetchWindowError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def code(self) -> int:
        return self.error.code if self.error else SUCCESS


class AnalysisSession:
    """
    Owns one analysis of the sample history and answers scheduling queries.
    """

    def __init__(
        self,
        store: Optional[SampleStore] = None,
        analyzer: Optional[Analyzer] = None,
        probe: Optional[LinkProbe] = None,
        generator: Optional[SampleGenerator] = None,
        store_timeout: Optional[float] = 30.0,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            store: Historical sample store. Required for init/run_analysis.
            analyzer: Analysis strategy (DefaultAnalyzer if omitted)
            probe: Live link probe used by is_fetchable_now()
            generator: Seeds the store when it opens EMPTY
            store_timeout: Seconds to wait on any store call (None = forever)
            clock: Source of "now"; injectable for tests
        """
        self.store = store
        self.analyzer = analyzer or DefaultAnalyzer()
        self.probe = probe
        self.generator = generator or SampleGenerator()
        self.store_timeout = store_timeout
        self._clock = clock
        self._lock = asyncio.Lock()
        self._init_lock = asyncio.Lock()
        self._abandoned: Optional[asyncio.Future] = None
        self._init_error: Optional[FetchWindowError] = None
        self.reset()

    @classmethod
    def from_config(cls, config: AppConfig, **overrides) -> "AnalysisSession":
        """
        Build a session wired to the configured store, probe and thresholds.

        Keyword overrides are passed straight to the constructor.
        """
        analysis = config.analysis
        kwargs: Dict[str, Any] = {
            "store": build_store(config),
            "analyzer": DefaultAnalyzer(
                thresholds=config.thresholds,
                lookahead=timedelta(minutes=analysis.lookahead_minutes),
            ),
            "probe": build_probe(config),
            "generator": SampleGenerator(
                weeks=analysis.seed_weeks,
                bucket_minutes=analysis.bucket_minutes,
                seed=analysis.seed,
            ),
            "store_timeout": analysis.store_timeout_seconds,
        }
        kwargs.update(overrides)
        return cls(**kwargs)

    # ======================================
    # Lifecycle
    # ======================================
    def reset(self) -> None:
        """Drop every derived result and return to IDLE."""
        self.state = SessionState.IDLE
        self.date: Optional[date_type] = None
        self.delta_time_minutes: int = DEFAULT_DELTA_MINUTES
        self.wifi_slots: List[ClassifiedSlot] = []
        self.mobile_slots: List[ClassifiedSlot] = []
        self.good_times: List[bool] = []
        self.corrupt_buckets: List[CorruptBucket] = []
        self.last_run_at: Optional[datetime] = None
        self._init_error = None

    @property
    def ready(self) -> bool:
        return self.state is SessionState.READY

    async def init(
        self,
        on_ready: Optional[Callable[[SessionInitResult], Any]] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> SessionInitResult:
        """
        Open the store, seed it if empty, and run the first analysis.

        Concurrent calls run one after another; a later call finds the
        store already seeded.

        Args:
            on_ready: Optional callback (sync or async) receiving the result
            cancel: Set to abandon the open, seed or first query

        Returns:
            SessionInitResult; failures are reported, never raised
        """
        async with self._init_lock:
            result = await self._open_and_analyse(cancel)
            self._init_error = result.error

        if callable(on_ready):
            outcome = on_ready(result)
            if inspect.isawaitable(outcome):
                await outcome
        return result

    async def _open_and_analyse(self, cancel: Optional[asyncio.Event]) -> SessionInitResult:
        if self.store is None:
            return self._fail(StoreUnavailable())

        self.state = SessionState.OPENING
        try:
            status = await self._call_store(self.store.open, cancel=cancel)
        except (StoreTimeout, AnalysisCancelled) as e:
            return self._fail(e)
        except Exception as e:
            logger.exception("Error opening network statistics store")
            return self._fail(StoreOpenFailed(str(e)))

        if status is StoreStatus.ERROR:
            logger.error("Error opening network statistics store")
            return self._fail(StoreOpenFailed())

        if status is StoreStatus.EMPTY:
            self.state = SessionState.SEEDING
            try:
                async with self._lock:
                    await self._call_store(self._seed_store, cancel=cancel)
            except (StoreTimeout, AnalysisCancelled) as e:
                return self._fail(e)
            except Exception as e:
                logger.exception("Error seeding empty network statistics store")
                return self._fail(StoreOpenFailed(f"seeding failed: {e}"))

        try:
            await self.run_analysis(cancel=cancel)
        except FetchWindowError as e:
            return self._fail(e)
        except Exception as e:
            logger.exception("Error querying network statistics store")
            return self._fail(StoreOpenFailed(f"query failed: {e}"))

        return SessionInitResult(state=self.state)

    def _seed_store(self) -> None:
        # Runs in a worker thread
        added = self.store.add_samples(self.generator.generate(self._clock().date()))
        logger.info("Finished generating %d seed samples", added)
        self.store.save()
        logger.info("Saved seeded store")

    def _fail(self, error: FetchWindowError) -> SessionInitResult:
        self.state = SessionState.ERROR
        logger.error("Session init failed: %s", error)
        return SessionInitResult(state=self.state, error=error)

    # ======================================
    # Analysis
    # ======================================
    async def run_analysis(
        self,
        date: Optional[date_type] = None,
        cancel: Optional[asyncio.Event] = None,
    ) -> None:
        """
        Load one weekday of history and rebuild the slot lists.

        Runs are serialized; prior state is replaced wholesale, and left
        untouched if the store query fails or is cancelled.

        Args:
            date: Day to analyse (default today)
            cancel: Set to abandon the in-flight store query

        Raises:
            StoreUnavailable: no store configured
            StoreTimeout: the store query exceeded the timeout
            AnalysisCancelled: `cancel` was set before the query finished
        """
        if self.store is None:
            raise StoreUnavailable()

        async with self._lock:
            day = date or self._clock().date()
            weekday = day.weekday()
            buckets = await self._call_store(
                self.store.get_records_for_weekday, weekday, cancel=cancel
            )

            # Everything below is synchronous: no partial state is observable
            now = self._clock()
            aggregation = self.analyzer.aggregate(buckets, day=day, weekday=weekday)
            wifi_slots, mobile_slots = self.analyzer.classify(aggregation.summaries, now)
            good_times = self.analyzer.usability_mask(
                aggregation.summaries, aggregation.bucket_count
            )

            self.date = day
            if aggregation.bucket_count:
                self.delta_time_minutes = MINUTES_PER_DAY // aggregation.bucket_count
            self.wifi_slots = wifi_slots
            self.mobile_slots = mobile_slots
            self.good_times = good_times
            self.corrupt_buckets = aggregation.corrupt_buckets
            self.last_run_at = now
            self.state = SessionState.READY

        logger.info(
            "Analysed %s: %d Wi-Fi slots, %d mobile slots, %d corrupt buckets",
            day, len(wifi_slots), len(mobile_slots), len(aggregation.corrupt_buckets),
        )

    async def _call_store(self, func: Callable, *args, cancel: Optional[asyncio.Event] = None):
        """
        Run a blocking store call off the event loop, bounded by the
        store timeout and an optional cancellation event.
        """
        if cancel is not None and cancel.is_set():
            raise AnalysisCancelled()

        await self._wait_for_abandoned(cancel)

        call = asyncio.ensure_future(asyncio.to_thread(func, *args))
        if call not in await self._wait(call, cancel):
            # The worker thread cannot be interrupted; remember it so the
            # next store call does not run alongside it
            self._abandon(call)
            self._raise_interrupted(cancel)
        return call.result()

    async def _wait_for_abandoned(self, cancel: Optional[asyncio.Event]) -> None:
        previous = self._abandoned
        if previous is None:
            return
        if not previous.done():
            logger.info("Waiting for an abandoned store call to finish")
            if previous not in await self._wait(previous, cancel):
                self._raise_interrupted(cancel, "previous store call still running")
        self._abandoned = None

    async def _wait(self, future: asyncio.Future, cancel: Optional[asyncio.Event]):
        waiters = {future}
        cancel_wait = None
        if cancel is not None:
            cancel_wait = asyncio.ensure_future(cancel.wait())
            waiters.add(cancel_wait)
        try:
            done, _ = await asyncio.wait(
                waiters,
                timeout=self.store_timeout,
                return_when=asyncio.FIRST_COMPLETED,
            )
        finally:
            if cancel_wait is not None and not cancel_wait.done():
                cancel_wait.cancel()
        return done

    def _abandon(self, call: asyncio.Future) -> None:
        def _report(future: asyncio.Future) -> None:
            if not future.cancelled() and future.exception() is not None:
                logger.warning("Abandoned store call failed: %s", future.exception())

        call.add_done_callback(_report)
        self._abandoned = call

    def _raise_interrupted(self, cancel: Optional[asyncio.Event], detail: Optional[str] = None):
        if cancel is not None and cancel.is_set():
            logger.warning("Store query cancelled by caller")
            raise AnalysisCancelled(detail)
        logger.warning("Store query timed out after %ss", self.store_timeout)
        raise StoreTimeout(detail or f"no response after {self.store_timeout}s")

    # ======================================
    # Queries
    # ======================================
    def _not_ready_error(self) -> FetchWindowError:
        return self._init_error or SessionNotReady()

    def next_best_slot(self, now: Optional[datetime] = None) -> Recommendation:
        """
        Best upcoming slot from the current analysis.

        Returns:
            Recommendation with status FOUND, NONE_TODAY or NOT_READY
        """
        if not self.ready:
            return Recommendation.not_ready(self._not_ready_error())
        return self.analyzer.select_next(
            self.wifi_slots, self.mobile_slots, now or self._clock()
        )

    def next_best_time(self, now: Optional[datetime] = None) -> datetime:
        """
        Coarse-grained next usable bucket start.

        Raises:
            SessionNotReady: no analysis has completed
            NoGoodTimeToday: nothing usable remains today
        """
        if not self.ready:
            raise self._not_ready_error()
        return select_by_coarse_window(
            self.good_times, self.delta_time_minutes, now or self._clock()
        )

    def is_fetchable_now(self) -> bool:
        """Check the live link; False when no probe is configured."""
        if self.probe is None:
            logger.debug("No live link probe configured")
            return False
        return gate.is_fetchable_now(self.probe.get_current_link_info())

    def get_status(self) -> Dict[str, Any]:
        """
        Current session state.

        Returns:
            Dictionary with state, analysed day and slot counts
        """
        return {
            "state": self.state.value,
            "date": self.date.isoformat() if self.date else None,
            "delta_time_minutes": self.delta_time_minutes,
            "wifi_slots": len(self.wifi_slots),
            "mobile_slots": len(self.mobile_slots),
            "corrupt_buckets": [e.bucket_index for e in self.corrupt_buckets],
            "last_run_at": self.last_run_at.isoformat() if self.last_run_at else None,
            "error_code": self._init_error.code if self._init_error else SUCCESS,
        }
