import logging

import requests

from dal.exceptions import ExtractionFailed, NoLocationFound, FetchFailed
from dal.models import GeocodeResult
from dal.sources.source import SourceAdapter

logger = logging.getLogger(__name__)

DEFAULT_NOMINATIM_URL = "https://nominatim.openstreetmap.org/search"


class Geocoder(SourceAdapter):
    """
    Turn a free text description into coordinates.
    First ask the language model for the place name, then look the place name up in Nominatim.
    """
    def __init__(self, gemini, nominatim_url=DEFAULT_NOMINATIM_URL, timeout=10, user_agent="disaster-response", session=None):
        self.gemini = gemini
        self.nominatim_url = nominatim_url
        self.timeout = timeout
        self.user_agent = user_agent
        self.session = session or requests.Session()

    def fetch(self, resource_id, description=None, **params):
        location_name = self.gemini.generate("Extract location from: %s" % description, stage="extraction")
        if not location_name:
            raise ExtractionFailed("Could not extract a location from the description")

        try:
            resp = self.session.get(self.nominatim_url, params={"format": "json", "q": location_name},
                                    headers={"User-Agent": self.user_agent}, timeout=self.timeout)
            resp.raise_for_status()
            matches = resp.json()
        except (requests.RequestException, ValueError) as e:
            logger.exception("Exception geocoding %s", location_name)
            raise FetchFailed("Geocoding lookup failed: %s" % e, stage="geocoding")

        if not isinstance(matches, list):
            # Nominatim reports errors as an object rather than a list of hits.
            logger.error("Unexpected geocoding response for %s: %s", location_name, matches)
            raise FetchFailed("Geocoding lookup returned an error for %s" % location_name, stage="geocoding")
        if not matches:
            raise NoLocationFound("No location found for %s" % location_name)
        best = matches[0]
        try:
            lat, lng = float(best["lat"]), float(best["lon"])
        except (KeyError, TypeError, ValueError):
            logger.error("Geocoding hit for %s has no usable coordinates: %s", location_name, best)
            raise NoLocationFound("No coordinates found for %s" % location_name)
        logger.info("Geocoded %s to %s, %s", location_name, lat, lng)
        return GeocodeResult(location_name=location_name, lat=lat, lng=lng)
