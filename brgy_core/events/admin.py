# brgy_core/events/admin.py
from django.contrib import admin

from brgy_core.events.models import Event, EventAttendance, EventRegistration


@admin.register(Event)
class EventAdmin(admin.ModelAdmin):
    list_display = ("title", "event_date", "start_time", "location", "category", "status")
    list_filter = ("status", "category")
    search_fields = ("title", "description", "location")
    ordering = ("-event_date",)


@admin.register(EventRegistration)
class EventRegistrationAdmin(admin.ModelAdmin):
    list_display = ("event", "user", "status", "registered_at")
    list_filter = ("status",)
    search_fields = ("event__title", "user__email")


@admin.register(EventAttendance)
class EventAttendanceAdmin(admin.ModelAdmin):
    list_display = ("event", "user", "attended_at")
    search_fields = ("event__title", "user__email")
