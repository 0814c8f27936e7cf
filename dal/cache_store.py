'''
The cache collection.
Maps a key to a JSON value and an absolute expiry.
The store does not judge staleness; that is the Aggregator's job.
Stale rows are never deleted; the next fresh fetch for the key overwrites them.
'''

import logging

from pymongo import ASCENDING
from pymongo.errors import PyMongoError

from dal.exceptions import StoreError
from dal.models import CacheEntry
from dal.utils import as_utc

logger = logging.getLogger(__name__)


class CacheStore(object):
    def __init__(self, db, collection_name="cache"):
        self.collection = db[collection_name]

    def ensure_indices(self):
        try:
            self.collection.create_index([("key", ASCENDING)], unique=True)
        except PyMongoError as e:
            logger.exception("Exception creating the index on the cache collection")
            raise StoreError("Cannot create cache indices: %s" % e)

    def get(self, key):
        """
        Get the cache entry for key.
        :param key - for example - social-media-42
        :return: The CacheEntry or None if there is no entry for this key.
        """
        try:
            doc = self.collection.find_one({"key": key}, {"_id": 0})
        except PyMongoError as e:
            logger.exception("Exception looking up cache key %s", key)
            raise StoreError("Cache lookup failed for %s: %s" % (key, e))
        if not doc:
            return None
        doc["expires_at"] = as_utc(doc["expires_at"])
        return CacheEntry(**doc)

    def upsert(self, key, value, expires_at):
        """
        Replace the entry for key or insert it if there is none.
        This is a replace, not an append; a key has at most one document.
        """
        try:
            self.collection.replace_one(
                {"key": key},
                {"key": key, "value": value, "expires_at": as_utc(expires_at)},
                upsert=True)
        except PyMongoError as e:
            logger.exception("Exception writing cache key %s", key)
            raise StoreError("Cache write failed for %s: %s" % (key, e))
