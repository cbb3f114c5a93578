"""Integration tests for login and logout."""

import pytest
from rest_framework.authtoken.models import Token
from rest_framework.test import APIClient

PASSWORD = "s3cret-pass-123"


@pytest.fixture
def staff_user(django_user_model):
    return django_user_model.objects.create_user(
        username="organizer", email="Organizer@Example.com", password=PASSWORD, is_staff=True
    )


@pytest.mark.django_db
class TestLogin:
    """Tests for POST /api/auth/login"""

    def test_login_with_username(self, api_client: APIClient, staff_user):
        response = api_client.post(
            "/api/auth/login", {"identifier": "organizer", "password": PASSWORD}, format="json"
        )

        assert response.status_code == 200
        body = response.json()
        assert body["token"] == Token.objects.get(user=staff_user).key
        assert body["user"]["username"] == "organizer"
        assert body["user"]["is_staff"] is True

    def test_login_with_email_is_case_insensitive(self, api_client: APIClient, staff_user):
        response = api_client.post(
            "/api/auth/login",
            {"identifier": "organizer@example.com", "password": PASSWORD},
            format="json",
        )
        assert response.status_code == 200

    def test_wrong_password(self, api_client: APIClient, staff_user):
        response = api_client.post(
            "/api/auth/login", {"identifier": "organizer", "password": "wrong"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_CREDENTIALS"
        assert not Token.objects.exists()

    def test_missing_fields(self, api_client: APIClient):
        response = api_client.post("/api/auth/login", {"identifier": "x"}, format="json")
        assert response.status_code == 400
        assert "password" in response.json()["error"]["fields"]

    def test_token_opens_admin_endpoints(self, api_client: APIClient, staff_user):
        token = api_client.post(
            "/api/auth/login", {"identifier": "organizer", "password": PASSWORD}, format="json"
        ).json()["token"]

        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        assert api_client.get("/api/messages").status_code == 200


@pytest.mark.django_db
class TestLogout:
    """Tests for POST /api/auth/logout"""

    def test_logout_revokes_token(self, admin_api_client: APIClient, admin_user):
        response = admin_api_client.post("/api/auth/logout")

        assert response.status_code == 200
        assert not Token.objects.filter(user=admin_user).exists()
        assert admin_api_client.get("/api/messages").status_code == 401

    def test_logout_requires_token(self, api_client: APIClient):
        assert api_client.post("/api/auth/logout").status_code == 401

    def test_unknown_token_is_rejected(self, api_client: APIClient):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer not-a-token")
        response = api_client.get("/api/messages")
        assert response.status_code == 401
        assert response.json()["error"]["code"] == "UNAUTHORIZED"
