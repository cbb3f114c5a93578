from django.contrib import admin

from events.models import ContactMessage, Event, Registration

# Seat counts and the event lifecycle change only through the API services.
EVENT_ADMIN_EDITABLE = ["title", "description", "location", "start_time", "image"]


class RegistrationInline(admin.TabularInline):
    model = Registration
    extra = 0
    fields = ["name", "email", "status", "created_at"]
    readonly_fields = ["name", "email", "status", "created_at"]
    can_delete = False

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ["title", "location", "start_time", "status", "occupied_seats", "total_seats"]
    list_filter = ["status"]
    search_fields = ["title", "description", "location"]
    inlines = [RegistrationInline]

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return ["status", "occupied_seats", "created_at", "updated_at"]
        return ["status", "total_seats", "occupied_seats", "created_at", "updated_at"]

    def save_model(self, request, obj, form, change):
        if change:
            obj.save(update_fields=[*EVENT_ADMIN_EDITABLE, "updated_at"])
        else:
            obj.save()


@admin.register(Registration)
class RegistrationAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "event", "status", "created_at"]
    list_filter = ["status", "event"]
    search_fields = ["name", "email"]
    readonly_fields = ["event", "name", "email", "status", "created_at"]

    def has_add_permission(self, request):
        return False


@admin.register(ContactMessage)
class ContactMessageAdmin(admin.ModelAdmin):
    list_display = ["name", "email", "created_at"]
    search_fields = ["name", "email", "message"]
    readonly_fields = ["name", "email", "message", "created_at"]
