from django.urls import path

from events.handlers import (
    EventDetailView,
    EventListView,
    EventRegistrationView,
    LoginView,
    LogoutView,
    MessageDetailView,
    MessageListView,
    RegistrationDetailView,
    RegistrationListView,
)

urlpatterns = [
    path("events", EventListView.as_view(), name="event-list"),
    path("events/<str:event_id>", EventDetailView.as_view(), name="event-detail"),
    path(
        "events/<str:event_id>/registrations",
        EventRegistrationView.as_view(),
        name="event-registrations",
    ),
    path("registrations", RegistrationListView.as_view(), name="registration-list"),
    path(
        "registrations/<str:registration_id>",
        RegistrationDetailView.as_view(),
        name="registration-detail",
    ),
    path("messages", MessageListView.as_view(), name="message-list"),
    path("messages/<str:message_id>", MessageDetailView.as_view(), name="message-detail"),
    path("auth/login", LoginView.as_view(), name="auth-login"),
    path("auth/logout", LogoutView.as_view(), name="auth-logout"),
]
