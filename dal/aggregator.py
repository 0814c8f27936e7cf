'''
Cache-aside aggregation of external data.
Check the cache for a fresh value; otherwise fetch, write through and tell the subscribers.
'''

import logging
import datetime

import pydantic
from pydantic import TypeAdapter

from dal.exceptions import AdapterError
from dal.models import Resolved
from dal.utils import utcnow

logger = logging.getLogger(__name__)

DEFAULT_TTL = datetime.timedelta(hours=1)


class Aggregator(object):
    """
    Resolve a cache key to a value using the cache store and a fetch function.

    Concurrent misses on the same key each fetch and write; the last write wins.
    """
    def __init__(self, cache_store, bus, clock=utcnow, serve_stale_on_error=False):
        self.cache_store = cache_store
        self.bus = bus
        self.clock = clock
        self.serve_stale_on_error = serve_stale_on_error

    def resolve(self, cache_key, ttl, fetch_fn, value_type, topic=None, event=None):
        """
        :param cache_key - for example - official-updates-42
        :param ttl - timedelta or seconds; zero or negative means always fetch.
        :param fetch_fn - no argument callable that calls the external source.
        :param value_type - the payload type, e.g. list[SocialMediaPost]
        :param topic - broadcast topic for fresh values; None to stay silent.
        :param event - callable turning the fresh value into the broadcast payload.
        :return: Resolved(source, value)
        """
        if not isinstance(ttl, datetime.timedelta):
            ttl = datetime.timedelta(seconds=ttl)
        adapter = TypeAdapter(value_type)
        now = self.clock()

        entry = self.cache_store.get(cache_key)
        cached = None
        if entry:
            try:
                cached = adapter.validate_python(entry.value)
            except pydantic.ValidationError:
                # Written by an older payload model; refetch and overwrite it.
                logger.exception("Cached value for %s no longer matches %s; treating it as a miss", cache_key, value_type)
                entry = None
        if entry and now < entry.expires_at:
            logger.debug("Cache hit for %s; expires at %s", cache_key, entry.expires_at)
            return Resolved(source="cache", value=cached)

        logger.debug("Cache miss for %s", cache_key)
        try:
            value = fetch_fn()
        except AdapterError:
            if self.serve_stale_on_error and entry:
                logger.exception("Fetch failed for %s; serving the stale entry that expired at %s", cache_key, entry.expires_at)
                return Resolved(source="stale", value=cached)
            raise

        value = adapter.validate_python(value)
        self.cache_store.upsert(cache_key, adapter.dump_python(value, mode="json"), now + ttl)
        logger.info("Fetched fresh value for %s; cached until %s", cache_key, now + ttl)

        if topic:
            payload = event(value) if event else {"key": cache_key, "value": value}
            self.bus.publish(topic, payload)

        return Resolved(source="fresh", value=value)
