from events.handlers.views import (
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

__all__ = [
    "EventListView",
    "EventDetailView",
    "EventRegistrationView",
    "RegistrationListView",
    "RegistrationDetailView",
    "MessageListView",
    "MessageDetailView",
    "LoginView",
    "LogoutView",
]
