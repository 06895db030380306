# ==============================================
# MongoSampleStore
# ==============================================
#
# PURPOSE:
#   Sample store backed by a MongoDB collection. One document per
#   RawSample, tagged with the weekday and bucket index it belongs to
#   so a weekday query is a single indexed find().
#
# CLASS: MongoSampleStore(SampleStore)
# ------------------------------------
#   Stateful — holds the connection and a buffer of unsaved samples.
#
#   Constructor:
#   ------------
#   - __init__(host, port, database, collection="samples",
#              user=None, password=None, bucket_minutes=15, max_weeks=4,
#              client=None)
#       `client` lets callers pass an already-built pymongo client.
#
#   Methods:
#   --------
#   - open() -> StoreStatus
#       Connect + ping. Connection/auth failure → ERROR.
#       Empty collection → EMPTY, otherwise READY.
#
#   - get_records_for_weekday(weekday) -> WeekdayBuckets
#       find({"weekday": w}) sorted by start; newest `max_weeks` kept
#       per bucket.
#
#   - add_samples(samples) -> int   → buffer documents until save()
#   - save() -> None                → insert_many the buffer
#   - close() -> None
#
# DOCUMENT SHAPE:
# ---------------
#   {weekday, bucket, start, end, wifi{...}, mobile{...}}
#   Indexed on (weekday, bucket).
#
# ==============================================

import logging
from typing import Dict, Iterable, List, Optional

from pymongo import ASCENDING
from pymongo import MongoClient as PyMongoClient
from pymongo.errors import ConnectionFailure, OperationFailure, PyMongoError

from fetchwindow.samples import RawSample, WeekdayBuckets
from .base import SampleStore, StoreStatus

logger = logging.getLogger(__name__)


class MongoSampleStore(SampleStore):
    """
    Historical samples kept in MongoDB.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 27017,
        database: str = "fetchwindow",
        collection: str = "samples",
        user: Optional[str] = None,
        password: Optional[str] = None,
        bucket_minutes: int = 15,
        max_weeks: int = 4,
        client=None,
    ):
        super().__init__(bucket_minutes, max_weeks)
        # Store connection params. Don't connect yet.
        self.host = host
        self.port = port
        self.database = database
        self.collection_name = collection
        self.user = user
        self.password = password
        self.client = client
        self._pending: List[dict] = []

    def _uri(self) -> str:
        if self.user and self.password:
            return f"mongodb://{self.user}:{self.password}@{self.host}:{self.port}/{self.database}"
        return f"mongodb://{self.host}:{self.port}/{self.database}"

    @property
    def collection(self):
        if self.client is None:
            raise ConnectionFailure("Not connected to MongoDB.")
        return self.client[self.database][self.collection_name]

    def open(self) -> StoreStatus:
        """
        Connect, ping and report whether the collection has any samples.
        """
        try:
            if self.client is None:
                self.client = PyMongoClient(self._uri())
            self.client.admin.command("ping")
            self.collection.create_index([("weekday", ASCENDING), ("bucket", ASCENDING)])
            count = self.collection.count_documents({})
        except ConnectionFailure as e:
            logger.error("Could not connect to MongoDB: %s", e)
            return StoreStatus.ERROR
        except (OperationFailure, PyMongoError) as e:
            logger.error("MongoDB operation failed while opening store: %s", e)
            return StoreStatus.ERROR

        logger.info("Connected to MongoDB (%d samples in '%s')", count, self.collection_name)
        return StoreStatus.READY if count else StoreStatus.EMPTY

    def add_samples(self, samples: Iterable[RawSample]) -> int:
        added = 0
        for sample in samples:
            weekday, bucket = self.bucket_key(sample)
            doc = sample.to_dict()
            doc["weekday"] = weekday
            doc["bucket"] = bucket
            self._pending.append(doc)
            added += 1
        return added

    def save(self) -> None:
        """
        Insert every buffered sample.

        Raises:
            PyMongoError: if the insert fails; the buffer is kept so the
                          caller can retry
        """
        if not self._pending:
            return
        try:
            self.collection.insert_many(self._pending)
        except PyMongoError as e:
            logger.error("MongoDB insert failed: %s", e)
            raise
        logger.info("Inserted %d samples into '%s'", len(self._pending), self.collection_name)
        self._pending = []

    def get_records_for_weekday(self, weekday: int) -> WeekdayBuckets:
        if not 0 <= weekday <= 6:
            raise ValueError(f"weekday must be in 0..6, got {weekday}")

        grouped: Dict[int, List[RawSample]] = {}
        cursor = self.collection.find({"weekday": weekday}).sort("start", ASCENDING)
        for doc in cursor:
            grouped.setdefault(doc["bucket"], []).append(RawSample.from_dict(doc))

        buckets = []
        for index in range(self.bucket_count):
            samples = grouped.get(index, [])
            if self.max_weeks:
                samples = samples[-self.max_weeks:]
            buckets.append(samples)
        return buckets

    def close(self) -> None:
        if self.client is not None:
            self.client.close()
            logger.info("Disconnected from MongoDB.")
            self.client = None
