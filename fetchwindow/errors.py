# ==============================================
# Errors
# ==============================================
#
# PURPOSE:
#   Every failure the scheduler can report. Each error carries a
#   numeric code so callers that only care about the kind of failure
#   (e.g. a UI showing a status message) can switch on it.
#
# CODES:
# ------
#   0  SUCCESS
#   1  StoreUnavailable    → no store collaborator configured
#   2  StoreOpenFailed     → store.open() reported ERROR or raised
#   3  NoGoodTimeToday     → selection found nothing (valid outcome)
#   4  CorruptBucket       → an input bucket held zero samples
#   5  StoreTimeout        → store query exceeded the configured timeout
#   6  AnalysisCancelled   → caller cancelled an in-flight analysis
#   7  SessionNotReady     → no analysis has completed yet
#
# ==============================================

from typing import Optional

SUCCESS = 0


class FetchWindowError(Exception):
    """Base class for all scheduler errors."""

    code: int = -1
    message: str = "Unknown error."

    def __init__(self, detail: Optional[str] = None):
        self.detail = detail
        super().__init__(detail or self.message)


class StoreUnavailable(FetchWindowError):
    code = 1
    message = "No network statistics store is configured."


class StoreOpenFailed(FetchWindowError):
    code = 2
    message = "Unknown error occurred opening the network statistics store."


class NoGoodTimeToday(FetchWindowError):
    code = 3
    message = "No good connection time was found for today."


class CorruptBucket(FetchWindowError):
    """Raised when a time-of-day bucket holds no samples."""

    code = 4
    message = "Store returned an empty time-of-day bucket."

    def __init__(self, bucket_index: int, weekday: Optional[int] = None):
        self.bucket_index = bucket_index
        self.weekday = weekday
        where = f"bucket {bucket_index}"
        if weekday is not None:
            where = f"weekday {weekday}, {where}"
        super().__init__(f"{self.message} ({where})")


class StoreTimeout(FetchWindowError):
    code = 5
    message = "Timed out waiting for the network statistics store."


class AnalysisCancelled(FetchWindowError):
    code = 6
    message = "Analysis was cancelled before the store query finished."


class SessionNotReady(FetchWindowError):
    code = 7
    message = "Network statistics have not been analysed yet."
