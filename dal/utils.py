'''
Various small utilties.
'''
import json
import math
import datetime

import pytz
from bson import ObjectId
from pydantic import BaseModel


class JSONEncoder(json.JSONEncoder):
    def default(self, o):
        if isinstance(o, ObjectId):
            return str(o)
        elif isinstance(o, float) and not math.isfinite(o):
            return str(o)
        elif isinstance(o, datetime.datetime):
            # Use var d = new Date(str) in JS to deserialize
            return o.isoformat()
        elif isinstance(o, BaseModel):
            return o.model_dump(mode="json", by_alias=True)
        return json.JSONEncoder.default(self, o)


def utcnow():
    return datetime.datetime.now(pytz.UTC)


def as_utc(dt):
    """
    Mongo hands back naive datetimes unless the client is tz_aware.
    Everything we store is UTC, so naive values are tagged as such.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=pytz.UTC)
    return dt.astimezone(pytz.UTC)


def parse_object_id(oid):
    """
    Convert the id in the URL into an ObjectId; None if it cannot be one.
    """
    if isinstance(oid, ObjectId):
        return oid
    if isinstance(oid, str) and ObjectId.is_valid(oid):
        return ObjectId(oid)
    return None
