'''
The HTTP surface.
Routing and response shaping only; the work is done by the dal's stores, adapters and the aggregator.
Validation happens here, before any external call is made.
Mutations and fresh enrichment results are published to the Socket.IO clients by the dal.
'''

import logging

import pydantic
from flask import Blueprint, Response, request

from dal.aggregator import DEFAULT_TTL
from dal.exceptions import DisasterServiceException, ValidationError
from dal.models import DisasterCreate, DisasterUpdate, SocialMediaPost, OfficialUpdate, ImageVerification
from dal.models.events import SOCIAL_MEDIA_UPDATED, OFFICIAL_UPDATES_UPDATED, IMAGE_VERIFIED, RESOURCES_UPDATED
from dal.resources import DEFAULT_RADIUS_METERS
from dal.utils import JSONEncoder

logger = logging.getLogger(__name__)


def json_response(value, status=200):
    return Response(JSONEncoder().encode(value), status=status, mimetype="application/json")


def parse_body(model):
    try:
        return model(**(request.get_json(silent=True) or {}))
    except pydantic.ValidationError as e:
        raise ValidationError("Invalid %s: %s" % (model.__name__, e))


def required_float(args, name):
    value = args.get(name)
    if value in (None, ""):
        raise ValidationError("lat/lon required")
    try:
        return float(value)
    except ValueError:
        raise ValidationError("%s must be a number, not %s" % (name, value))


def as_dict(disaster):
    return disaster.model_dump(mode="json", by_alias=True)


def create_disasters_blueprint(disasters, resources, aggregator, bus, geocoder, social_feed,
                               official_updates, image_verifier, ttl=DEFAULT_TTL, radius_meters=DEFAULT_RADIUS_METERS):
    """
    Build the blueprint around the components it routes to.
    """
    disasters_blueprint = Blueprint('disasters_api', __name__)

    @disasters_blueprint.errorhandler(DisasterServiceException)
    def handle_service_exception(e):
        logger.error("%s (%s): %s", type(e).__name__, e.status_code, e.message)
        return json_response({'success': False, 'errormsg': e.message}, status=e.status_code)

    @disasters_blueprint.route("/", methods=["GET"])
    def svc_liveness():
        return Response("Disaster Response API is running", mimetype="text/plain")

    @disasters_blueprint.route("/disasters", methods=["GET"])
    def svc_get_disasters():
        return json_response([as_dict(x) for x in disasters.list_disasters()])

    @disasters_blueprint.route("/disasters", methods=["POST"])
    def svc_create_disaster():
        """
        Create a disaster. The JSON body has title, location_name, description, tags and owner_id.
        """
        disaster = disasters.create_disaster(parse_body(DisasterCreate))
        return json_response(as_dict(disaster), status=201)

    @disasters_blueprint.route("/disasters/<disaster_id>", methods=["GET"])
    def svc_get_disaster(disaster_id):
        return json_response(as_dict(disasters.get_disaster(disaster_id)))

    @disasters_blueprint.route("/disasters/<disaster_id>", methods=["PUT"])
    def svc_update_disaster(disaster_id):
        """
        Update a disaster. Only the fields in the JSON body change; owner_id names the user making the change.
        """
        disaster = disasters.update_disaster(disaster_id, parse_body(DisasterUpdate))
        return json_response(as_dict(disaster))

    @disasters_blueprint.route("/disasters/<disaster_id>", methods=["DELETE"])
    def svc_delete_disaster(disaster_id):
        deleted = disasters.delete_disaster(disaster_id)
        return json_response({'message': 'Deleted', 'data': as_dict(deleted)})

    @disasters_blueprint.route("/geocode", methods=["POST"])
    def svc_geocode():
        """
        Extract a place name from the description and return its coordinates.
        """
        description = (request.get_json(silent=True) or {}).get("description")
        if not description:
            raise ValidationError("Description is required")
        location = geocoder.fetch(None, description=description)
        return json_response(dict(source="fresh", **location.model_dump()))

    @disasters_blueprint.route("/disasters/<disaster_id>/social-media", methods=["GET"])
    def svc_get_social_media(disaster_id):
        resolved = aggregator.resolve(
            "social-media-%s" % disaster_id, ttl,
            lambda: social_feed.fetch(disaster_id),
            list[SocialMediaPost],
            topic=SOCIAL_MEDIA_UPDATED,
            event=lambda posts: {"disaster_id": disaster_id, "posts": posts})
        return json_response({'source': resolved.source, 'posts': resolved.value})

    @disasters_blueprint.route("/disasters/<disaster_id>/resources", methods=["GET"])
    def svc_get_nearby_resources(disaster_id):
        """
        Resources within the configured radius of the lat/lon query parameters.
        """
        lat = required_float(request.args, "lat")
        lon = required_float(request.args, "lon")
        nearby = resources.nearby_resources(disaster_id, lat, lon, radius_meters)
        bus.publish(RESOURCES_UPDATED, {"disaster_id": disaster_id, "lat": lat, "lon": lon})
        return json_response({'source': 'fresh', 'resources': [x.model_dump(mode="json", by_alias=True) for x in nearby]})

    @disasters_blueprint.route("/disasters/<disaster_id>/official-updates", methods=["GET"])
    def svc_get_official_updates(disaster_id):
        resolved = aggregator.resolve(
            "official-updates-%s" % disaster_id, ttl,
            lambda: official_updates.fetch(disaster_id),
            list[OfficialUpdate],
            topic=OFFICIAL_UPDATES_UPDATED,
            event=lambda updates: {"disaster_id": disaster_id, "updates": updates})
        return json_response({'source': resolved.source, 'updates': resolved.value})

    @disasters_blueprint.route("/disasters/<disaster_id>/verify-image", methods=["POST"])
    def svc_verify_image(disaster_id):
        """
        Ask for an analysis of the image at image_url in the JSON body.
        """
        image_url = (request.get_json(silent=True) or {}).get("image_url")
        if not image_url:
            raise ValidationError("image_url is required")
        resolved = aggregator.resolve(
            "image-verification-%s-%s" % (disaster_id, image_url), ttl,
            lambda: image_verifier.fetch(disaster_id, image_url=image_url),
            ImageVerification,
            topic=IMAGE_VERIFIED,
            event=lambda verdict: {"disaster_id": disaster_id, "image_url": image_url, "result": verdict.result})
        return json_response({'source': resolved.source, 'result': resolved.value.result})

    return disasters_blueprint
