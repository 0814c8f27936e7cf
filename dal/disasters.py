'''
The disasters collection.
Every create and update appends to the disaster's audit trail before the record is written.
Every successful write publishes a disaster_updated event; failed writes publish nothing and are not retried.
'''

import logging

from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from dal.audit import append_audit_event
from dal.exceptions import StoreError, NotFound, ConflictError
from dal.models import Disaster, DisasterChange
from dal.models.events import DISASTER_UPDATED
from dal.utils import utcnow, parse_object_id

logger = logging.getLogger(__name__)


class DisasterStore(object):
    def __init__(self, db, bus, clock=utcnow, collection_name="disasters"):
        self.collection = db[collection_name]
        self.bus = bus
        self.clock = clock

    def _object_id(self, disaster_id):
        oid = parse_object_id(disaster_id)
        if not oid:
            raise NotFound("Disaster %s does not exist" % disaster_id)
        return oid

    def _publish(self, change):
        self.bus.publish(DISASTER_UPDATED, change.model_dump(mode="json", exclude_none=True))

    def list_disasters(self):
        try:
            return [Disaster(**x) for x in self.collection.find({})]
        except PyMongoError as e:
            logger.exception("Exception listing disasters")
            raise StoreError(str(e))

    def get_disaster(self, disaster_id):
        oid = self._object_id(disaster_id)
        try:
            doc = self.collection.find_one({"_id": oid})
        except PyMongoError as e:
            logger.exception("Exception getting disaster %s", disaster_id)
            raise StoreError(str(e))
        if not doc:
            raise NotFound("Disaster %s does not exist" % disaster_id)
        return Disaster(**doc)

    def create_disaster(self, request):
        """
        Create a new disaster; the audit trail starts with the create event.
        :param request - a DisasterCreate
        :return: The stored Disaster
        """
        doc = request.model_dump()
        trail = append_audit_event([], "create", request.owner_id, now=self.clock())
        doc["audit_trail"] = [x.model_dump() for x in trail]
        try:
            doc["_id"] = self.collection.insert_one(doc).inserted_id
        except PyMongoError as e:
            logger.exception("Exception creating disaster %s", request.title)
            raise StoreError(str(e))
        disaster = Disaster(**doc)
        logger.info("Created disaster %s", disaster.id)
        self._publish(DisasterChange(type="created", disaster=disaster.model_dump(mode="json", by_alias=True)))
        return disaster

    def update_disaster(self, disaster_id, request):
        """
        Update the fields present in the request and append an update event to the audit trail.
        The write only goes through if the trail is still the one we read; otherwise a concurrent update
        got there first and we raise a ConflictError rather than lose its event.
        :param request - a DisasterUpdate
        :return: The updated Disaster
        """
        oid = self._object_id(disaster_id)
        try:
            existing = self.collection.find_one({"_id": oid}, {"audit_trail": 1})
        except PyMongoError as e:
            logger.exception("Exception getting the audit trail for disaster %s", disaster_id)
            raise StoreError(str(e))
        if not existing:
            raise NotFound("Disaster %s does not exist" % disaster_id)

        current_trail = existing.get("audit_trail") or []
        trail = append_audit_event(current_trail, "update", request.owner_id, now=self.clock())
        changes = request.changes()
        changes["audit_trail"] = [x.model_dump() for x in trail]
        try:
            updated = self.collection.find_one_and_update(
                {"_id": oid, "audit_trail": {"$size": len(current_trail)}},
                {"$set": changes},
                return_document=ReturnDocument.AFTER)
        except PyMongoError as e:
            logger.exception("Exception updating disaster %s", disaster_id)
            raise StoreError(str(e))
        if not updated:
            try:
                still_exists = self.collection.count_documents({"_id": oid}, limit=1)
            except PyMongoError as e:
                logger.exception("Exception checking for disaster %s", disaster_id)
                raise StoreError(str(e))
            if still_exists:
                logger.error("Audit trail for disaster %s changed while updating it", disaster_id)
                raise ConflictError("Disaster %s was modified concurrently; please retry" % disaster_id)
            raise NotFound("Disaster %s does not exist" % disaster_id)

        disaster = Disaster(**updated)
        logger.info("Updated disaster %s", disaster.id)
        self._publish(DisasterChange(type="updated", disaster=disaster.model_dump(mode="json", by_alias=True)))
        return disaster

    def delete_disaster(self, disaster_id):
        """
        Delete the disaster. The record and its audit trail go away together.
        :return: The deleted Disaster
        """
        oid = self._object_id(disaster_id)
        try:
            deleted = self.collection.find_one_and_delete({"_id": oid})
        except PyMongoError as e:
            logger.exception("Exception deleting disaster %s", disaster_id)
            raise StoreError(str(e))
        if not deleted:
            raise NotFound("Disaster %s does not exist" % disaster_id)
        logger.info("Deleted disaster %s", disaster_id)
        self._publish(DisasterChange(type="deleted", id=str(oid)))
        return Disaster(**deleted)
