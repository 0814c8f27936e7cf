"""
Models for the `resources` collection (shelters, hospitals, supply points).

Locations are GeoJSON points so the collection can carry a 2dsphere index
for the nearby lookup.
"""

from typing import Literal

from pydantic import BaseModel, Field

from dal.models.common import MongoBaseModel, PyObjectId


class GeoPoint(BaseModel):
    type: Literal["Point"] = "Point"
    coordinates: list[float]  # [lon, lat]


class Resource(MongoBaseModel):
    id: PyObjectId | None = Field(None, alias="_id")
    disaster_id: str
    name: str
    location_name: str | None = None
    type: str | None = None
    location: GeoPoint
