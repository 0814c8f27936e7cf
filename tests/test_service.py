"""
The HTTP routes, driven through the Flask test client with the network stubbed out.
"""

from unittest.mock import MagicMock

import pytest
from bson import ObjectId
from flask import Flask

from dal.exceptions import ExtractionFailed, FetchFailed, StoreError
from dal.models import GeocodeResult, GeoPoint, ImageVerification, OfficialUpdate, Resource
from dal.models.events import DISASTER_UPDATED, RESOURCES_UPDATED, SOCIAL_MEDIA_UPDATED
from dal.sources import SocialMediaFeed
from services.disasters import create_disasters_blueprint


@pytest.fixture
def sources():
    geocoder, official_updates, image_verifier, resources = MagicMock(), MagicMock(), MagicMock(), MagicMock()
    official_updates.fetch.return_value = [OfficialUpdate(title="FEMA Approves Disaster Aid for Flooding", url="/pr/1")]
    image_verifier.fetch.return_value = ImageVerification(result="Consistent with flooding")
    resources.nearby_resources.return_value = [
        Resource(_id=ObjectId(), disaster_id="42", name="Red Cross Shelter", type="shelter",
                 location=GeoPoint(coordinates=[-73.9712, 40.7831]))]
    return {"geocoder": geocoder, "official_updates": official_updates,
            "image_verifier": image_verifier, "resources": resources}


@pytest.fixture
def client(disasters, aggregator, bus, sources):
    app = Flask("test")
    app.register_blueprint(create_disasters_blueprint(
        disasters, sources["resources"], aggregator, bus, sources["geocoder"], SocialMediaFeed(),
        sources["official_updates"], sources["image_verifier"], ttl=3600, radius_meters=10000), url_prefix="/api")
    return app.test_client()


def test_liveness(client):
    assert client.get("/api/").data == b"Disaster Response API is running"


class TestDisasterRoutes:
    def test_crud_round(self, client, bus):
        created = client.post("/api/disasters", json={"title": "NYC Flood", "owner_id": "u1", "tags": ["flood"]})
        assert created.status_code == 201
        disaster_id = created.get_json()["_id"]
        assert created.get_json()["audit_trail"][0]["action"] == "create"

        updated = client.put("/api/disasters/%s" % disaster_id, json={"description": "Rising", "owner_id": "u2"})
        assert updated.status_code == 200
        assert [x["user_id"] for x in updated.get_json()["audit_trail"]] == ["u1", "u2"]

        assert [x["_id"] for x in client.get("/api/disasters").get_json()] == [disaster_id]
        assert client.get("/api/disasters/%s" % disaster_id).get_json()["description"] == "Rising"

        deleted = client.delete("/api/disasters/%s" % disaster_id)
        assert deleted.get_json()["message"] == "Deleted"
        assert [p["type"] for t, p in bus.events if t == DISASTER_UPDATED] == ["created", "updated", "deleted"]

    def test_create_requires_title(self, client, bus):
        resp = client.post("/api/disasters", json={"owner_id": "u1"})
        assert resp.status_code == 400
        assert resp.get_json()["success"] is False
        assert bus.events == []

    @pytest.mark.parametrize("body", [{"title": None, "owner_id": "u2"}, {"tags": None, "owner_id": "u2"}])
    def test_update_rejects_explicit_nulls(self, client, bus, body):
        disaster_id = client.post("/api/disasters", json={"title": "NYC Flood", "owner_id": "u1", "tags": ["flood"]}).get_json()["_id"]

        resp = client.put("/api/disasters/%s" % disaster_id, json=body)

        assert resp.status_code == 400
        assert resp.get_json()["success"] is False
        stored = client.get("/api/disasters/%s" % disaster_id).get_json()
        assert stored["title"] == "NYC Flood" and stored["tags"] == ["flood"]
        assert [x["action"] for x in stored["audit_trail"]] == ["create"]
        assert client.get("/api/disasters").status_code == 200
        assert [p["type"] for t, p in bus.events if t == DISASTER_UPDATED] == ["created"]

    def test_missing_disaster_is_404(self, client):
        assert client.get("/api/disasters/%s" % ObjectId()).status_code == 404
        assert client.put("/api/disasters/nonsense", json={"title": "x"}).status_code == 404
        assert client.delete("/api/disasters/%s" % ObjectId()).status_code == 404

    def test_store_error_is_500(self, client, disasters, monkeypatch):
        def broken():
            raise StoreError("unreachable")
        monkeypatch.setattr(disasters, "list_disasters", broken)
        resp = client.get("/api/disasters")
        assert resp.status_code == 500
        assert resp.get_json() == {"success": False, "errormsg": "unreachable"}


class TestGeocode:
    def test_geocode(self, client, sources):
        sources["geocoder"].fetch.return_value = GeocodeResult(location_name="Manhattan, NYC", lat=40.78, lng=-73.97)
        resp = client.post("/api/geocode", json={"description": "Flooding in Manhattan"})
        assert resp.get_json() == {"source": "fresh", "location_name": "Manhattan, NYC", "lat": 40.78, "lng": -73.97}

    def test_description_required_before_any_call(self, client, sources):
        assert client.post("/api/geocode", json={}).status_code == 400
        sources["geocoder"].fetch.assert_not_called()

    def test_extraction_failure(self, client, sources):
        sources["geocoder"].fetch.side_effect = ExtractionFailed("Could not extract a location from the description")
        resp = client.post("/api/geocode", json={"description": "it is raining"})
        assert resp.status_code == 502
        assert "extract" in resp.get_json()["errormsg"]


class TestEnrichmentRoutes:
    def test_social_media_fresh_then_cache(self, client, bus):
        first = client.get("/api/disasters/42/social-media").get_json()
        second = client.get("/api/disasters/42/social-media").get_json()
        assert first["source"] == "fresh" and second["source"] == "cache"
        assert len(first["posts"]) == 2 and first["posts"] == second["posts"]
        assert bus.topics() == [SOCIAL_MEDIA_UPDATED]
        assert bus.events[0][1]["disaster_id"] == "42"

    def test_official_updates_cached(self, client, sources):
        first = client.get("/api/disasters/42/official-updates").get_json()
        second = client.get("/api/disasters/42/official-updates").get_json()
        assert first == {"source": "fresh", "updates": [{"title": "FEMA Approves Disaster Aid for Flooding", "url": "/pr/1"}]}
        assert second["source"] == "cache" and second["updates"] == first["updates"]
        assert sources["official_updates"].fetch.call_count == 1

    def test_official_updates_failure_is_502_and_not_cached(self, client, sources, cache_store):
        sources["official_updates"].fetch.side_effect = FetchFailed("down")
        assert client.get("/api/disasters/42/official-updates").status_code == 502
        assert cache_store.get("official-updates-42") is None

    def test_verify_image_keyed_by_url(self, client, sources):
        body = {"image_url": "http://example.org/a.jpg"}
        assert client.post("/api/disasters/42/verify-image", json=body).get_json() == {"source": "fresh", "result": "Consistent with flooding"}
        assert client.post("/api/disasters/42/verify-image", json=body).get_json()["source"] == "cache"
        other = client.post("/api/disasters/42/verify-image", json={"image_url": "http://example.org/b.jpg"})
        assert other.get_json()["source"] == "fresh"
        assert sources["image_verifier"].fetch.call_count == 2

    def test_verify_image_requires_url(self, client, sources):
        assert client.post("/api/disasters/42/verify-image", json={}).status_code == 400
        sources["image_verifier"].fetch.assert_not_called()

    def test_resources(self, client, sources, bus):
        resp = client.get("/api/disasters/42/resources?lat=40.7831&lon=-73.9712")
        body = resp.get_json()
        assert body["source"] == "fresh"
        assert body["resources"][0]["name"] == "Red Cross Shelter"
        sources["resources"].nearby_resources.assert_called_once_with("42", 40.7831, -73.9712, 10000)
        assert bus.events == [(RESOURCES_UPDATED, {"disaster_id": "42", "lat": 40.7831, "lon": -73.9712})]

    @pytest.mark.parametrize("query", ["", "?lat=40.7", "?lon=-73.9", "?lat=north&lon=-73.9"])
    def test_resources_requires_lat_lon(self, client, sources, query):
        assert client.get("/api/disasters/42/resources%s" % query).status_code == 400
        sources["resources"].nearby_resources.assert_not_called()
