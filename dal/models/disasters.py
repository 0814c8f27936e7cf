"""
Models for disaster documents.

Disasters live in the `disasters` collection. Each document carries an
append-only `audit_trail`; the first entry is always the `create` event.
"""

from typing import Literal

from pydantic import ConfigDict, Field, field_validator

from dal.models.common import MongoBaseModel, PyObjectId

UNKNOWN_USER = "unknown"


class AuditEvent(MongoBaseModel):
    """
    One mutation of a disaster. Immutable once appended.

    The timestamp is an ISO-8601 UTC string assigned by the server at the
    moment of the mutation; clients never supply it.
    """

    model_config = ConfigDict(frozen=True)

    action: Literal["create", "update", "delete"]
    user_id: str = UNKNOWN_USER
    timestamp: str


class TaggedModel(MongoBaseModel):
    """
    Tags are a set; duplicates are dropped keeping the first occurrence.
    """

    @field_validator("tags", check_fields=False)
    @classmethod
    def dedupe_tags(cls, tags):
        if tags is None:
            return tags
        return list(dict.fromkeys(tags))


class Disaster(TaggedModel):
    """
    A document from the `disasters` collection.
    """

    id: PyObjectId | None = Field(None, alias="_id")
    title: str
    location_name: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    owner_id: str | None = None
    audit_trail: list[AuditEvent] = Field(default_factory=list)


class DisasterCreate(TaggedModel):
    """
    Request model for creating a disaster.
    """

    title: str = Field(min_length=1)
    location_name: str | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    owner_id: str | None = None


class DisasterUpdate(TaggedModel):
    """
    Request model for updating a disaster.

    Only the fields present in the request are written. owner_id is not
    changed by an update; it names who made the change in the audit trail.
    """

    title: str | None = Field(None, min_length=1)
    location_name: str | None = None
    description: str | None = None
    tags: list[str] | None = None
    owner_id: str | None = None

    @field_validator("title", "tags")
    @classmethod
    def not_null(cls, value, info):
        # Absent means unchanged; an explicit null would store a document that no longer loads.
        if value is None:
            raise ValueError("%s cannot be null" % info.field_name)
        return value

    def changes(self):
        return self.model_dump(exclude_unset=True, exclude={"owner_id"})
