"""
Pydantic models for the disaster response data access layer.

These models represent the MongoDB document schemas, the request bodies and
the typed payloads kept in the cache collection.
"""

from dal.models.disasters import (
    AuditEvent,
    Disaster,
    DisasterCreate,
    DisasterUpdate,
    UNKNOWN_USER,
)
from dal.models.cache import (
    CacheEntry,
    GeocodeResult,
    ImageVerification,
    OfficialUpdate,
    Resolved,
    SocialMediaPost,
)
from dal.models.events import BroadcastEvent, DisasterChange
from dal.models.resources import GeoPoint, Resource
from dal.models.common import PyObjectId

__all__ = [
    # Common
    "PyObjectId",
    # Disasters
    "AuditEvent",
    "Disaster",
    "DisasterCreate",
    "DisasterUpdate",
    "UNKNOWN_USER",
    # Cache
    "CacheEntry",
    "GeocodeResult",
    "ImageVerification",
    "OfficialUpdate",
    "Resolved",
    "SocialMediaPost",
    # Events
    "BroadcastEvent",
    "DisasterChange",
    # Resources
    "GeoPoint",
    "Resource",
]
