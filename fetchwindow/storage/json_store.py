# ==============================================
# JsonSampleStore
# ==============================================
#
# PURPOSE:
#   Persist the sample history to a single JSON file so the scheduler
#   can recover its history across restarts without a database.
#
# CLASS: JsonSampleStore(MemorySampleStore)
# -----------------------------------------
#   Constructor:
#   ------------
#   - __init__(path: str = "data/samples.json", bucket_minutes=15, max_weeks=4)
#       Creates the parent directory if it doesn't exist.
#
#   Methods:
#   --------
#   - open() -> StoreStatus
#       No file / no samples → EMPTY
#       Unreadable or malformed file → ERROR
#       Otherwise loads everything into memory → READY
#
#   - save() -> None
#       Write every held sample back to disk.
#
#   - exists() -> bool
#   - clear() -> None   → drop memory and delete the file
#
# FILE STRUCTURE:
# ---------------
#   {
#     "version": "1.0",
#     "bucket_minutes": 15,
#     "saved_at": "...",
#     "samples": [ {start, end, wifi{...}, mobile{...}}, ... ]
#   }
#
# ==============================================

import json
import logging
from datetime import datetime
from pathlib import Path

from fetchwindow.samples import RawSample
from .base import StoreStatus
from .memory_store import MemorySampleStore

logger = logging.getLogger(__name__)

FILE_VERSION = "1.0"


class JsonSampleStore(MemorySampleStore):
    """
    Sample store backed by one JSON file on disk.
    """

    def __init__(
        self,
        path: str = "data/samples.json",
        bucket_minutes: int = 15,
        max_weeks: int = 4,
    ):
        super().__init__(bucket_minutes, max_weeks)
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def open(self) -> StoreStatus:
        """
        Load the sample file into memory.

        Returns:
            READY, EMPTY, or ERROR if the file cannot be parsed
        """
        if not self.path.exists():
            logger.info("No sample file found at %s", self.path)
            return StoreStatus.EMPTY

        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            samples = [RawSample.from_dict(item) for item in data.get("samples", [])]
        except (OSError, ValueError, KeyError, TypeError, AttributeError) as e:
            logger.error("Could not read sample file %s: %s", self.path, e)
            return StoreStatus.ERROR

        stored_minutes = data.get("bucket_minutes", self.bucket_minutes)
        if stored_minutes != self.bucket_minutes:
            logger.warning(
                "Sample file %s was written with %s-minute buckets, re-bucketing to %s",
                self.path, stored_minutes, self.bucket_minutes,
            )

        self._buckets = {}
        self.add_samples(samples)
        logger.info("Loaded %d samples from %s", self.sample_count(), self.path)
        return super().open()

    def save(self) -> None:
        """Write every held sample to disk."""
        samples = [
            sample.to_dict()
            for key in sorted(self._buckets)
            for sample in self._buckets[key]
        ]
        data = {
            "version": FILE_VERSION,
            "bucket_minutes": self.bucket_minutes,
            "saved_at": datetime.now().isoformat(),
            "samples": samples,
        }
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)

        logger.info("Saved %d samples to %s", len(samples), self.path)

    def exists(self) -> bool:
        return self.path.exists()

    def clear(self) -> None:
        super().clear()
        if self.path.exists():
            self.path.unlink()
            logger.info("Deleted %s", self.path)
