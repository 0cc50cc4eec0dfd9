# brgy_core/cms/admin.py
from django.contrib import admin

from brgy_core.cms.models import Announcement, Benefit, Feature, ServiceFeature, SystemSettings, Testimonial


@admin.register(Feature)
class FeatureAdmin(admin.ModelAdmin):
    list_display = ("title", "icon_type", "is_active", "sort_order")
    list_filter = ("is_active",)
    ordering = ("sort_order",)


@admin.register(Benefit)
class BenefitAdmin(admin.ModelAdmin):
    list_display = ("text", "is_active", "sort_order")
    ordering = ("sort_order",)


@admin.register(Testimonial)
class TestimonialAdmin(admin.ModelAdmin):
    list_display = ("name", "role", "rating", "is_active", "sort_order")
    ordering = ("sort_order",)


@admin.register(ServiceFeature)
class ServiceFeatureAdmin(admin.ModelAdmin):
    list_display = ("description", "is_active", "sort_order")
    ordering = ("sort_order",)


@admin.register(Announcement)
class AnnouncementAdmin(admin.ModelAdmin):
    list_display = ("title", "priority", "is_public", "published_at", "expires_at", "is_active")
    list_filter = ("priority", "is_public", "is_active")
    search_fields = ("title", "content")


admin.site.register(SystemSettings)
