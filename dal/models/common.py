"""
Common types and base model configuration shared across all models.
"""

from typing import Annotated, Any

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, BeforeValidator, PlainSerializer

from dal.utils import parse_object_id


def _validate_object_id(v: Any) -> ObjectId:
    oid = parse_object_id(v)
    if oid is None:
        raise ValueError(f"Invalid ObjectId: {v}")
    return oid


PyObjectId = Annotated[
    ObjectId,
    BeforeValidator(_validate_object_id),
    PlainSerializer(str, return_type=str, when_used="json"),
]
"""A BSON ObjectId; accepts hex strings and serializes to one in JSON mode."""


class MongoBaseModel(BaseModel):
    """Base model for all MongoDB document models."""

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        populate_by_name=True,
    )
