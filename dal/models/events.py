"""
Models for real-time broadcast events.

Every mutation of a disaster and every fresh enrichment fetch publishes one
of these to the connected clients. They are never persisted.
"""

from typing import Any, Literal

from pydantic import BaseModel, Field

DISASTER_UPDATED = "disaster_updated"
SOCIAL_MEDIA_UPDATED = "social_media_updated"
OFFICIAL_UPDATES_UPDATED = "official_updates_updated"
IMAGE_VERIFIED = "image_verified"
RESOURCES_UPDATED = "resources_updated"


class BroadcastEvent(BaseModel):
    """
    The envelope handed to the Socket.IO layer (and Kafka, when configured).

    NOTE: The payload shape depends on the topic, e.g. `{type, disaster}` for
    disaster_updated and `{disaster_id, posts}` for social_media_updated.
    """

    topic: str
    payload: dict[str, Any] = Field(default_factory=dict)


class DisasterChange(BaseModel):
    """
    Payload of a disaster_updated event. Deletes carry only the id.
    """

    type: Literal["created", "updated", "deleted"]
    disaster: dict[str, Any] | None = None
    id: str | None = None
