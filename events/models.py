"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import os
import uuid

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q


def event_image_upload_to(instance, filename):
    """Store event images under events/ with a random name, keeping the extension."""
    ext = os.path.splitext(filename)[1].lower()
    return f"events/{uuid.uuid4().hex}{ext}"


class Event(models.Model):
    """Persistence model for events."""

    class Status(models.TextChoices):
        DRAFT = "draft", "Draft"
        PUBLISHED = "published", "Published"
        CANCELLED = "cancelled", "Cancelled"
        COMPLETED = "completed", "Completed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    description = models.TextField()
    location = models.CharField(max_length=255)
    start_time = models.DateTimeField()
    total_seats = models.PositiveIntegerField()
    occupied_seats = models.PositiveIntegerField(default=0)
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.DRAFT
    )
    image = models.ImageField(
        upload_to=event_image_upload_to, max_length=255, blank=True, null=True
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["start_time"]
        indexes = [
            models.Index(fields=["start_time"], name="event_start_time_idx"),
            models.Index(fields=["status", "start_time"], name="event_status_start_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(occupied_seats__lte=F("total_seats")),
                name="event_occupied_seats_within_total",
            ),
        ]

    def clean(self):
        if self.total_seats is not None and self.occupied_seats > self.total_seats:
            raise ValidationError(
                {"total_seats": "Total seats cannot be lower than occupied seats."}
            )

    def __str__(self) -> str:
        return self.title


class Registration(models.Model):
    """Persistence model for registrations."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending"
        CONFIRMED = "confirmed", "Confirmed"
        CANCELLED = "cancelled", "Cancelled"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    event = models.ForeignKey(
        Event, on_delete=models.CASCADE, related_name="registrations"
    )
    name = models.CharField(max_length=255)
    email = models.EmailField()
    status = models.CharField(
        max_length=20, choices=Status.choices, default=Status.PENDING
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["event", "-created_at"], name="registration_event_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.name} - {self.event.title}"


class ContactMessage(models.Model):
    """Persistence model for contact form messages."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=255)
    email = models.EmailField()
    message = models.TextField()
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at"]

    def __str__(self) -> str:
        return f"{self.name} <{self.email}>"
