"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Let domain errors propagate to the exception handler (handlers/errors.py)
- Never contain business logic
- Never expose internal error details
"""

import logging

from django.contrib.auth import authenticate, get_user_model
from django.core.cache import cache
from rest_framework import status
from rest_framework.authtoken.models import Token
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import ScopedRateThrottle
from rest_framework.views import APIView

from events.cache import EVENT_LIST_KEY, cache_event_read, event_detail_key
from events.domain import EventStatus
from events.domain.errors import EventNotFoundError
from events.handlers.authentication import IsAdmin, IsAdminOrReadOnly, is_admin
from events.handlers.errors import InvalidCredentials
from events.handlers.serializers import (
    ContactMessageCreateSerializer,
    ContactMessageSerializer,
    EventCreateSerializer,
    EventSerializer,
    EventUpdateSerializer,
    LoginSerializer,
    RegistrationCreateSerializer,
    RegistrationSerializer,
    RegistrationStatusSerializer,
    UserSerializer,
)
from events.services import factory
from events.services.reservation_service import parse_event_id
from events.stores.django_store import store_event_image

logger = logging.getLogger(__name__)

_TRUE_VALUES = ("1", "true", "yes")


class EventListView(APIView):
    """Handler for GET/POST /api/events"""

    permission_classes = [IsAdminOrReadOnly]

    def get(self, request: Request) -> Response:
        search = request.query_params.get("search", "").strip()
        status_filter = request.query_params.get("status", "").strip()
        upcoming = request.query_params.get("upcoming", "").lower() in _TRUE_VALUES
        admin = is_admin(request)

        cacheable = not admin and not (search or status_filter or upcoming)
        if cacheable:
            cached = cache.get(EVENT_LIST_KEY)
            if cached is not None:
                return Response(cached)

        events = factory.event_service().list_events(
            search=search,
            status=status_filter,
            upcoming=upcoming,
            include_drafts=admin,
        )
        data = EventSerializer(events, many=True).data
        if cacheable:
            cache_event_read(EVENT_LIST_KEY, data)
        return Response(data)

    def post(self, request: Request) -> Response:
        serializer = EventCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        payload = serializer.validated_data
        event = factory.event_service().create_event(
            title=payload["title"],
            description=payload["description"],
            location=payload["location"],
            start_time=payload["startTime"],
            total_seats=payload["totalSeats"],
            image_ref=store_event_image(payload["image"]) if payload.get("image") else None,
        )
        return Response(EventSerializer(event).data, status=status.HTTP_201_CREATED)


class EventDetailView(APIView):
    """Handler for GET/PATCH/DELETE /api/events/{event_id}"""

    permission_classes = [IsAdminOrReadOnly]

    def get(self, request: Request, event_id: str) -> Response:
        key = event_detail_key(parse_event_id(event_id))
        data = cache.get(key)
        if data is None:
            event = factory.event_service().get_event(event_id)
            data = EventSerializer(event).data
            cache_event_read(key, data)

        if data["status"] == EventStatus.DRAFT.value and not is_admin(request):
            raise EventNotFoundError(event_id)
        return Response(data)

    def patch(self, request: Request, event_id: str) -> Response:
        serializer = EventUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        changes = serializer.to_changes()
        if changes.get("image_ref") is not None:
            changes["image_ref"] = store_event_image(changes["image_ref"])
        event = factory.event_service().update_event(event_id, changes)
        return Response(EventSerializer(event).data)

    def delete(self, request: Request, event_id: str) -> Response:
        factory.event_service().delete_event(event_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class EventRegistrationView(APIView):
    """Handler for POST /api/events/{event_id}/registrations"""

    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "registrations"

    def post(self, request: Request, event_id: str) -> Response:
        serializer = RegistrationCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        registration = factory.reservation_service().register(
            event_id,
            name=serializer.validated_data["name"],
            email=serializer.validated_data["email"],
        )
        return Response(
            {"registrationId": str(registration.id)},
            status=status.HTTP_201_CREATED,
        )


class RegistrationListView(APIView):
    """Handler for GET /api/registrations?eventId=&status=&search="""

    permission_classes = [AllowAny]

    def get(self, request: Request) -> Response:
        registrations = factory.reservation_service().list_registrations(
            event_id=request.query_params.get("eventId") or None,
            status=request.query_params.get("status") or None,
            search=request.query_params.get("search", "").strip() or None,
        )
        serializer = RegistrationSerializer(
            registrations, many=True, context={"admin": is_admin(request)}
        )
        return Response(serializer.data)


class RegistrationDetailView(APIView):
    """Handler for PATCH /api/registrations/{registration_id}"""

    permission_classes = [IsAdmin]

    def patch(self, request: Request, registration_id: str) -> Response:
        serializer = RegistrationStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        registration = factory.reservation_service().set_status(
            registration_id, serializer.validated_data["status"]
        )
        return Response(
            RegistrationSerializer(registration, context={"admin": True}).data
        )


class MessageListView(APIView):
    """Handler for GET (admin) and POST (public) /api/messages"""

    throttle_scope = "messages"

    def get_permissions(self):
        if self.request.method == "POST":
            return [AllowAny()]
        return [IsAdmin()]

    def get_throttles(self):
        if self.request.method == "POST":
            return [ScopedRateThrottle()]
        return []

    def get(self, request: Request) -> Response:
        messages = factory.contact_service().list_messages()
        return Response(ContactMessageSerializer(messages, many=True).data)

    def post(self, request: Request) -> Response:
        serializer = ContactMessageCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = factory.contact_service().submit_message(**serializer.validated_data)
        return Response(
            ContactMessageSerializer(message).data, status=status.HTTP_201_CREATED
        )


class MessageDetailView(APIView):
    """Handler for DELETE /api/messages/{message_id}"""

    permission_classes = [IsAdmin]

    def delete(self, request: Request, message_id: str) -> Response:
        factory.contact_service().delete_message(message_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


class LoginView(APIView):
    """Handler for POST /api/auth/login"""

    authentication_classes = []
    permission_classes = [AllowAny]
    throttle_classes = [ScopedRateThrottle]
    throttle_scope = "login"

    def post(self, request: Request) -> Response:
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        identifier = serializer.validated_data["identifier"].strip()
        password = serializer.validated_data["password"]

        username = identifier
        if "@" in identifier:
            match = get_user_model().objects.filter(email__iexact=identifier).first()
            if match is not None:
                username = match.get_username()

        user = authenticate(request=request, username=username, password=password)
        if user is None:
            logger.info("Login failed", extra={"identifier": identifier})
            raise InvalidCredentials()

        token, _ = Token.objects.get_or_create(user=user)
        logger.info("Login succeeded", extra={"user_id": user.pk})
        return Response({"token": token.key, "user": UserSerializer(user).data})


class LogoutView(APIView):
    """Handler for POST /api/auth/logout"""

    permission_classes = [IsAuthenticated]

    def post(self, request: Request) -> Response:
        if request.auth is not None:
            request.auth.delete()
        logger.info("Logout", extra={"user_id": request.user.pk})
        return Response({"message": "Logged out."})
