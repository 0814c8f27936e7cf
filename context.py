import os
import logging

from pymongo import MongoClient

from flask_socketio import SocketIO

from kafka import KafkaProducer

from dal.utils import JSONEncoder
from dal.cache_store import CacheStore
from dal.aggregator import Aggregator
from dal.broadcast import BroadcastBus
from dal.disasters import DisasterStore
from dal.resources import ResourceStore
from dal.sources import GeminiClient, Geocoder, SocialMediaFeed, OfficialUpdatesScraper, ImageVerifier
from dal.sources.gemini import DEFAULT_GEMINI_URL, DEFAULT_GEMINI_MODEL
from dal.sources.geocoder import DEFAULT_NOMINATIM_URL
from dal.sources.official_updates import DEFAULT_OFFICIAL_UPDATES_URL

logger = logging.getLogger(__name__)

# Application context.
# Everything shared is built here once and handed to the components that need it.

MONGODB_HOST=os.environ.get('MONGODB_HOST', "localhost")
MONGODB_PORT=int(os.environ.get('MONGODB_PORT', 27017))
MONGODB_URL=os.environ.get("MONGODB_URL", None)
if not MONGODB_URL:
    MONGODB_URL = "mongodb://" + MONGODB_HOST + ":" + str(MONGODB_PORT) + "/admin"

MONGODB_USERNAME=os.environ.get('MONGODB_USERNAME', None)
MONGODB_PASSWORD=os.environ.get('MONGODB_PASSWORD', None)
MONGODB_DATABASE=os.environ.get('MONGODB_DATABASE', "disaster_response")

# The secret for the generative analysis service; used for location extraction and image verification.
GEMINI_API_KEY = os.environ.get("GEMINI_API_KEY", None)
if not GEMINI_API_KEY:
    logger.warning("GEMINI_API_KEY is not set; geocoding and image verification will fail")
GEMINI_MODEL = os.environ.get("GEMINI_MODEL", DEFAULT_GEMINI_MODEL)
GEMINI_URL = os.environ.get("GEMINI_URL", DEFAULT_GEMINI_URL)
NOMINATIM_URL = os.environ.get("NOMINATIM_URL", DEFAULT_NOMINATIM_URL)
OFFICIAL_UPDATES_URL = os.environ.get("OFFICIAL_UPDATES_URL", DEFAULT_OFFICIAL_UPDATES_URL)

# Every call to an external source is bounded by this; a timeout is a FetchFailed.
ADAPTER_TIMEOUT_SECONDS = float(os.environ.get("ADAPTER_TIMEOUT_SECONDS", "10"))
CACHE_TTL_SECONDS = int(os.environ.get("CACHE_TTL_SECONDS", "3600"))
RESOURCE_RADIUS_METERS = int(os.environ.get("RESOURCE_RADIUS_METERS", "10000"))
SERVE_STALE_ON_ERROR = os.environ.get("SERVE_STALE_ON_ERROR", "False").lower() in ["true", "1", "yes"]

CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")
SOCKETIO_ASYNC_MODE = os.environ.get("SOCKETIO_ASYNC_MODE", "eventlet")

mongoclient = MongoClient(host=MONGODB_URL, username=MONGODB_USERNAME, password=MONGODB_PASSWORD, tz_aware=True)
disasterdb = mongoclient[MONGODB_DATABASE]

socketio = SocketIO(cors_allowed_origins=CORS_ORIGINS, async_mode=SOCKETIO_ASYNC_MODE)

def __getKafkaProducer():
    if os.environ.get("SKIP_KAFKA_CONNECTION", False):
        return None
    else:
        return KafkaProducer(bootstrap_servers=os.environ.get("KAFKA_BOOTSTRAP_SERVER", "localhost:9092").split(","), value_serializer=lambda m: JSONEncoder().encode(m).encode('utf-8'))

kafka_producer = __getKafkaProducer()

bus = BroadcastBus(socketio=socketio, kafka_producer=kafka_producer)

cache_store = CacheStore(disasterdb)
aggregator = Aggregator(cache_store, bus, serve_stale_on_error=SERVE_STALE_ON_ERROR)
disasters = DisasterStore(disasterdb, bus)
resources = ResourceStore(disasterdb)

gemini = GeminiClient(GEMINI_API_KEY, model=GEMINI_MODEL, base_url=GEMINI_URL, timeout=ADAPTER_TIMEOUT_SECONDS)
geocoder = Geocoder(gemini, nominatim_url=NOMINATIM_URL, timeout=ADAPTER_TIMEOUT_SECONDS)
social_feed = SocialMediaFeed()
official_updates = OfficialUpdatesScraper(url=OFFICIAL_UPDATES_URL, timeout=ADAPTER_TIMEOUT_SECONDS)
image_verifier = ImageVerifier(gemini)


def init_app(app):
    cache_store.ensure_indices()
    resources.ensure_indices()
    socketio.init_app(app)
