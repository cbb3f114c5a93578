"""Integration tests for the contact message endpoints."""

import uuid
from datetime import timedelta

import pytest
from rest_framework.test import APIClient

from events import models as orm


@pytest.mark.django_db
class TestContactMessages:
    def test_anyone_can_send_a_message(self, api_client: APIClient):
        response = api_client.post(
            "/api/messages",
            {"name": " Ana ", "email": "ana@example.com", "message": "Is there parking?"},
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["name"] == "Ana"
        assert orm.ContactMessage.objects.get().message == "Is there parking?"

    def test_message_body_is_validated(self, api_client: APIClient):
        response = api_client.post(
            "/api/messages", {"name": "Ana", "email": "nope", "message": "Hi"}, format="json"
        )
        assert response.status_code == 400
        assert "email" in response.json()["error"]["fields"]

    def test_listing_requires_admin(self, api_client: APIClient, member_api_client: APIClient):
        assert api_client.get("/api/messages").status_code == 401
        assert member_api_client.get("/api/messages").status_code == 403

    def test_admin_lists_newest_first(self, admin_api_client: APIClient):
        first = orm.ContactMessage.objects.create(
            name="Ana", email="ana@example.com", message="first"
        )
        orm.ContactMessage.objects.create(name="Rui", email="rui@example.com", message="second")
        orm.ContactMessage.objects.filter(pk=first.pk).update(
            created_at=first.created_at - timedelta(minutes=5)
        )

        response = admin_api_client.get("/api/messages")

        assert response.status_code == 200
        assert [m["message"] for m in response.json()] == ["second", "first"]

    def test_admin_deletes_message(self, admin_api_client: APIClient):
        message = orm.ContactMessage.objects.create(
            name="Ana", email="ana@example.com", message="Hi"
        )

        response = admin_api_client.delete(f"/api/messages/{message.id}")

        assert response.status_code == 204
        assert not orm.ContactMessage.objects.exists()

    def test_delete_missing_message(self, admin_api_client: APIClient):
        response = admin_api_client.delete(f"/api/messages/{uuid.uuid4()}")
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "MESSAGE_NOT_FOUND"

    def test_delete_invalid_id(self, admin_api_client: APIClient):
        response = admin_api_client.delete("/api/messages/123")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_MESSAGE_ID"
