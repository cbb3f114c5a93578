"""Integration tests for the event catalog endpoints.

Run with: pytest tests/test_event_catalog.py -v
"""

import uuid
from datetime import datetime, timedelta, timezone
from io import BytesIO

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image
from rest_framework.test import APIClient

from events import models as orm


@pytest.mark.django_db
class TestEventList:
    """Tests for GET /api/events"""

    def test_list_events_returns_public_events(self, api_client: APIClient, db_event):
        published = db_event(title="Live")
        db_event(title="Hidden", status="draft")

        response = api_client.get("/api/events")

        assert response.status_code == 200
        assert [e["id"] for e in response.json()] == [str(published.id)]

    def test_list_events_empty_catalog(self, api_client: APIClient):
        response = api_client.get("/api/events")
        assert response.status_code == 200
        assert response.json() == []

    def test_list_events_shape(self, api_client: APIClient, db_event):
        db_event(total_seats=10, occupied_seats=4)

        item = api_client.get("/api/events").json()[0]

        assert item["totalSeats"] == 10
        assert item["occupiedSeats"] == 4
        assert item["availableSeats"] == 6
        assert item["status"] == "published"
        assert item["imageUrl"] is None
        assert set(item) >= {"title", "description", "location", "startTime"}

    def test_list_events_search_and_status(self, api_client: APIClient, db_event):
        db_event(title="Django Day", location="Braga")
        db_event(title="Rust Night", location="Faro", status="completed")

        by_text = api_client.get("/api/events", {"search": "django"}).json()
        by_status = api_client.get("/api/events", {"status": "completed"}).json()

        assert [e["title"] for e in by_text] == ["Django Day"]
        assert [e["title"] for e in by_status] == ["Rust Night"]

    def test_list_events_upcoming(self, api_client: APIClient, db_event):
        now = datetime.now(timezone.utc)
        db_event(title="Past", start_time=now - timedelta(days=2))
        db_event(title="Next", start_time=now + timedelta(days=2))

        response = api_client.get("/api/events", {"upcoming": "true"})

        assert [e["title"] for e in response.json()] == ["Next"]

    def test_list_events_unknown_status(self, api_client: APIClient):
        response = api_client.get("/api/events", {"status": "archived"})
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "VALIDATION_ERROR"

    def test_admin_sees_drafts(self, admin_api_client: APIClient, db_event):
        db_event(title="Hidden", status="draft")
        response = admin_api_client.get("/api/events")
        assert [e["title"] for e in response.json()] == ["Hidden"]


@pytest.mark.django_db
class TestEventDetail:
    """Tests for GET /api/events/{id}"""

    def test_get_event_returns_details(self, api_client: APIClient, db_event):
        event = db_event(title="Live")

        response = api_client.get(f"/api/events/{event.id}")

        assert response.status_code == 200
        assert response.json()["title"] == "Live"

    def test_get_event_not_found(self, api_client: APIClient):
        response = api_client.get(f"/api/events/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "EVENT_NOT_FOUND", "message": "Event not found"}
        }

    def test_get_event_invalid_id_format(self, api_client: APIClient):
        response = api_client.get("/api/events/not-a-uuid")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_EVENT_ID"

    def test_draft_is_hidden_from_public(
        self, api_client: APIClient, admin_api_client: APIClient, db_event
    ):
        event = db_event(status="draft")

        assert api_client.get(f"/api/events/{event.id}").status_code == 404
        assert admin_api_client.get(f"/api/events/{event.id}").status_code == 200


@pytest.mark.django_db
class TestEventCreate:
    """Tests for POST /api/events"""

    payload = {
        "title": "Python Meetup",
        "description": "Talks and networking",
        "location": "Lisbon",
        "startTime": "2030-05-01T18:30:00Z",
        "totalSeats": 40,
    }

    def test_admin_creates_draft_event(self, admin_api_client: APIClient):
        response = admin_api_client.post("/api/events", self.payload, format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "draft"
        assert body["occupiedSeats"] == 0
        assert orm.Event.objects.filter(pk=body["id"]).exists()

    def test_create_requires_authentication(self, api_client: APIClient):
        response = api_client.post("/api/events", self.payload, format="json")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"

    def test_create_requires_staff(self, member_api_client: APIClient):
        response = member_api_client.post("/api/events", self.payload, format="json")
        assert response.status_code == 403
        assert response.json()["error"]["code"] == "FORBIDDEN"

    def test_create_validates_body(self, admin_api_client: APIClient):
        response = admin_api_client.post(
            "/api/events", {**self.payload, "totalSeats": -1}, format="json"
        )
        assert response.status_code == 400
        body = response.json()["error"]
        assert body["code"] == "VALIDATION_ERROR"
        assert "totalSeats" in body["fields"]


@pytest.mark.django_db
class TestEventUpdate:
    """Tests for PATCH /api/events/{id}"""

    def test_capacity_below_occupied_is_rejected(self, admin_api_client: APIClient, db_event):
        event = db_event(total_seats=5, occupied_seats=5)

        response = admin_api_client.patch(
            f"/api/events/{event.id}", {"totalSeats": 3}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_CAPACITY"
        event.refresh_from_db()
        assert event.total_seats == 5

    def test_capacity_can_grow(self, admin_api_client: APIClient, db_event):
        event = db_event(total_seats=5, occupied_seats=5)

        response = admin_api_client.patch(
            f"/api/events/{event.id}", {"totalSeats": 10}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["totalSeats"] == 10
        event.refresh_from_db()
        assert event.total_seats == 10

    def test_publish_draft(self, admin_api_client: APIClient, db_event):
        event = db_event(status="draft")

        response = admin_api_client.patch(
            f"/api/events/{event.id}", {"status": "published", "title": "Open now"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["status"] == "published"
        assert response.json()["title"] == "Open now"

    def test_invalid_status_transition(self, admin_api_client: APIClient, db_event):
        event = db_event(status="cancelled")

        response = admin_api_client.patch(
            f"/api/events/{event.id}", {"status": "published"}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_TRANSITION"

    def test_empty_body_is_rejected(self, admin_api_client: APIClient, db_event):
        event = db_event()
        response = admin_api_client.patch(f"/api/events/{event.id}", {}, format="json")
        assert response.status_code == 400

    def test_update_requires_authentication(self, api_client: APIClient, db_event):
        event = db_event()
        response = api_client.patch(f"/api/events/{event.id}", {"totalSeats": 3}, format="json")
        assert response.status_code == 401

    def test_update_missing_event(self, admin_api_client: APIClient):
        response = admin_api_client.patch(
            f"/api/events/{uuid.uuid4()}", {"title": "x"}, format="json"
        )
        assert response.status_code == 404


@pytest.mark.django_db
class TestEventDelete:
    """Tests for DELETE /api/events/{id}"""

    def test_delete_event_cascades(self, admin_api_client: APIClient, db_event):
        event = db_event()
        orm.Registration.objects.create(event=event, name="Ana", email="ana@example.com")

        response = admin_api_client.delete(f"/api/events/{event.id}")

        assert response.status_code == 204
        assert not orm.Event.objects.exists()
        assert not orm.Registration.objects.exists()

    def test_delete_requires_staff(self, member_api_client: APIClient, db_event):
        event = db_event()
        assert member_api_client.delete(f"/api/events/{event.id}").status_code == 403


def _png(name: str = "cover.png") -> SimpleUploadedFile:
    buffer = BytesIO()
    Image.new("RGB", (8, 8), color="teal").save(buffer, format="PNG")
    return SimpleUploadedFile(name, buffer.getvalue(), content_type="image/png")


@pytest.fixture
def media_root(settings, tmp_path):
    settings.MEDIA_ROOT = tmp_path
    return tmp_path


@pytest.mark.django_db
class TestEventImage:
    """Tests for the multipart image field on create and update"""

    payload = TestEventCreate.payload

    def test_create_with_image(self, admin_api_client: APIClient, media_root):
        response = admin_api_client.post(
            "/api/events", {**self.payload, "image": _png()}, format="multipart"
        )

        assert response.status_code == 201
        url = response.json()["imageUrl"]
        assert url.startswith("/media/events/")
        assert url.endswith(".png")
        stored = orm.Event.objects.get(pk=response.json()["id"])
        assert (media_root / stored.image.name).is_file()

    def test_create_without_image(self, admin_api_client: APIClient):
        response = admin_api_client.post("/api/events", self.payload, format="json")

        assert response.status_code == 201
        assert response.json()["imageUrl"] is None

    def test_upload_name_is_not_trusted(self, admin_api_client: APIClient, media_root):
        response = admin_api_client.post(
            "/api/events",
            {**self.payload, "image": _png("../../etc/cover.PNG")},
            format="multipart",
        )

        assert response.status_code == 201
        stored = orm.Event.objects.get(pk=response.json()["id"])
        assert stored.image.name.startswith("events/")
        assert ".." not in stored.image.name

    def test_rejects_non_image_upload(self, admin_api_client: APIClient, media_root):
        upload = SimpleUploadedFile("cover.png", b"not an image", content_type="image/png")

        response = admin_api_client.post(
            "/api/events", {**self.payload, "image": upload}, format="multipart"
        )

        assert response.status_code == 400
        assert "image" in response.json()["error"]["fields"]
        assert not orm.Event.objects.exists()

    def test_patch_replaces_image(self, admin_api_client: APIClient, db_event, media_root):
        event = db_event()

        response = admin_api_client.patch(
            f"/api/events/{event.id}", {"image": _png()}, format="multipart"
        )

        assert response.status_code == 200
        event.refresh_from_db()
        assert event.image.name.startswith("events/")
        assert response.json()["imageUrl"] == f"/media/{event.image.name}"

    def test_patch_clears_image(self, admin_api_client: APIClient, db_event, media_root):
        event = db_event()
        admin_api_client.patch(f"/api/events/{event.id}", {"image": _png()}, format="multipart")

        response = admin_api_client.patch(
            f"/api/events/{event.id}", {"image": None}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["imageUrl"] is None
        event.refresh_from_db()
        assert not event.image
