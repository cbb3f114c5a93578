"""Serializers for transforming domain models to API responses and
validating request bodies. Field names are camelCase on the wire.
"""

from django.contrib.auth import get_user_model
from django.core.files.storage import default_storage
from rest_framework import serializers

from events.domain import EventStatus, RegistrationStatus


class EventSerializer(serializers.Serializer):
    """Serializer for Event domain model."""

    id = serializers.CharField(source="id.value")
    title = serializers.CharField()
    description = serializers.CharField()
    location = serializers.CharField()
    startTime = serializers.DateTimeField(source="start_time")
    totalSeats = serializers.IntegerField(source="total_seats")
    occupiedSeats = serializers.IntegerField(source="occupied_seats")
    availableSeats = serializers.IntegerField(source="available_seats")
    status = serializers.CharField(source="status.value")
    imageUrl = serializers.SerializerMethodField()
    createdAt = serializers.DateTimeField(source="created_at")
    updatedAt = serializers.DateTimeField(source="updated_at")

    def get_imageUrl(self, obj) -> str | None:
        if not obj.image_ref:
            return None
        return default_storage.url(obj.image_ref)


class RegistrationSerializer(serializers.Serializer):
    """Serializer for Registration domain model.

    The email and event title are only shown when the serializer context
    sets admin.
    """

    id = serializers.CharField(source="id.value")
    eventId = serializers.CharField(source="event_id.value")
    eventTitle = serializers.CharField(source="event_title", allow_null=True)
    name = serializers.CharField()
    email = serializers.EmailField()
    status = serializers.CharField(source="status.value")
    createdAt = serializers.DateTimeField(source="created_at")

    def to_representation(self, instance):
        data = super().to_representation(instance)
        if not self.context.get("admin", False):
            data.pop("email", None)
            data.pop("eventTitle", None)
        return data


class ContactMessageSerializer(serializers.Serializer):
    """Serializer for ContactMessage domain model."""

    id = serializers.CharField(source="id.value")
    name = serializers.CharField()
    email = serializers.EmailField()
    message = serializers.CharField()
    createdAt = serializers.DateTimeField(source="created_at")


class EventCreateSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    description = serializers.CharField()
    location = serializers.CharField(max_length=255)
    startTime = serializers.DateTimeField()
    totalSeats = serializers.IntegerField(min_value=0)
    image = serializers.ImageField(required=False, allow_null=True)


class EventUpdateSerializer(serializers.Serializer):
    """All fields optional; only the ones sent are applied."""

    title = serializers.CharField(max_length=255, required=False)
    description = serializers.CharField(required=False)
    location = serializers.CharField(max_length=255, required=False)
    startTime = serializers.DateTimeField(required=False)
    totalSeats = serializers.IntegerField(min_value=0, required=False)
    status = serializers.ChoiceField(
        choices=[s.value for s in EventStatus], required=False
    )
    image = serializers.ImageField(required=False, allow_null=True)

    FIELD_MAP = {
        "title": "title",
        "description": "description",
        "location": "location",
        "startTime": "start_time",
        "totalSeats": "total_seats",
        "status": "status",
        "image": "image_ref",
    }

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("At least one field must be provided.")
        return attrs

    def to_changes(self) -> dict:
        return {self.FIELD_MAP[key]: value for key, value in self.validated_data.items()}


class RegistrationCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()


class RegistrationStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=[s.value for s in RegistrationStatus])


class ContactMessageCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    email = serializers.EmailField()
    message = serializers.CharField()


class LoginSerializer(serializers.Serializer):
    """Credentials for the login endpoint. identifier is a username or an email."""

    identifier = serializers.CharField()
    password = serializers.CharField(trim_whitespace=False, write_only=True)


class UserSerializer(serializers.ModelSerializer):
    class Meta:
        model = get_user_model()
        fields = ["id", "username", "email", "is_staff"]
