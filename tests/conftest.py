"""
Shared fixtures: an in-memory Mongo database, a clock the tests move by hand,
and a broadcast bus that records what was published.
"""

import datetime

import mongomock
import pytest
import pytz

from dal.aggregator import Aggregator
from dal.cache_store import CacheStore
from dal.disasters import DisasterStore

T0 = datetime.datetime(2026, 10, 19, 12, 0, 0, tzinfo=pytz.UTC)


class FixedClock:
    def __init__(self, now=T0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now + datetime.timedelta(**kwargs)


class RecordingBus:
    def __init__(self):
        self.events = []

    def publish(self, topic, payload):
        self.events.append((topic, payload))

    def topics(self):
        return [topic for topic, _ in self.events]


class CountingFetch:
    """
    A fetch function that counts its calls and returns (or raises) what it was given.
    """
    def __init__(self, value=None, error=None):
        self.value = value
        self.error = error
        self.calls = 0

    def __call__(self):
        self.calls += 1
        if self.error:
            raise self.error
        return self.value


@pytest.fixture
def db():
    return mongomock.MongoClient(tz_aware=True)["disaster_response_test"]


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def bus():
    return RecordingBus()


@pytest.fixture
def cache_store(db):
    store = CacheStore(db)
    store.ensure_indices()
    return store


@pytest.fixture
def aggregator(cache_store, bus, clock):
    return Aggregator(cache_store, bus, clock=clock)


@pytest.fixture
def disasters(db, bus, clock):
    return DisasterStore(db, bus, clock=clock)
