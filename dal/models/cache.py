"""
Models for the `cache` collection and the payloads stored in it.

Each cached resource type has its own payload model so callers get typed
values back whether the Aggregator answered from the cache or fresh.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel

from dal.models.common import MongoBaseModel


class CacheEntry(MongoBaseModel):
    """
    One row of the `cache` collection. At most one per key; writes replace.

    NOTE: `value` is the JSON form of the payload; the Aggregator converts it
    to and from the typed payload for the resource.
    """

    key: str
    value: Any = None
    expires_at: datetime


class SocialMediaPost(BaseModel):
    post: str
    user: str


class OfficialUpdate(BaseModel):
    title: str
    url: str


class ImageVerification(BaseModel):
    result: str


class GeocodeResult(BaseModel):
    location_name: str
    lat: float
    lng: float


class Resolved(BaseModel):
    """
    What the Aggregator returns: where the value came from and the value.
    """

    source: Literal["cache", "fresh", "stale"]
    value: Any
