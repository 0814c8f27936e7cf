'''
Resources (shelters, hospitals, supply points) near a location.
'''

import logging

from pymongo import GEOSPHERE
from pymongo.errors import PyMongoError

from dal.exceptions import StoreError
from dal.models import Resource

logger = logging.getLogger(__name__)

DEFAULT_RADIUS_METERS = 10000


class ResourceStore(object):
    def __init__(self, db, collection_name="resources"):
        self.collection = db[collection_name]

    def ensure_indices(self):
        try:
            self.collection.create_index([("location", GEOSPHERE)])
        except PyMongoError as e:
            logger.exception("Exception creating the geo index on the resources collection")
            raise StoreError("Cannot create resource indices: %s" % e)

    def nearby_resources(self, disaster_id, lat, lon, radius_meters=DEFAULT_RADIUS_METERS):
        """
        Get the resources for this disaster within radius_meters of lat/lon, nearest first.
        """
        query = {
            "disaster_id": str(disaster_id),
            "location": {"$nearSphere": {
                "$geometry": {"type": "Point", "coordinates": [lon, lat]},
                "$maxDistance": radius_meters
            }}
        }
        try:
            resources = [Resource(**x) for x in self.collection.find(query)]
        except PyMongoError as e:
            logger.exception("Exception looking up resources near %s, %s for disaster %s", lat, lon, disaster_id)
            raise StoreError(str(e))
        logger.debug("Found %s resources within %sm of %s, %s", len(resources), radius_meters, lat, lon)
        return resources
