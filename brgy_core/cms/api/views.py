# brgy_core/cms/api/views.py
from __future__ import annotations

from uuid import UUID

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound, ValidationError as DRFValidationError
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from brgy_core.cms import selectors
from brgy_core.cms.api.serializers import (
    AnnouncementSerializer,
    BenefitSerializer,
    ContactInfoSerializer,
    FeatureSerializer,
    PublicAnnouncementSerializer,
    PublicStatsSerializer,
    ServiceFeatureSerializer,
    SystemSettingsSerializer,
    TestimonialSerializer,
)
from brgy_core.cms.models import Announcement, Benefit, Feature, ServiceFeature, SystemSettings, Testimonial
from brgy_core.cms.permissions import AnnouncementPermission, ContentPermission
from brgy_core.cms.services import AnnouncementService, ContentService, SystemSettingsService
from brgy_core.common.api.pagination import paginate
from brgy_core.common.permissions import AdminOnlyPermission


def _parse_uuid(value, field_name: str) -> UUID:
    try:
        return UUID(str(value))
    except (TypeError, ValueError):
        raise DRFValidationError({field_name: "Invalid UUID"})


# ---------------------------------------------------------
# Public (landing page)
# ---------------------------------------------------------

class _PublicView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []


class PublicStatsView(_PublicView):
    @extend_schema(tags=["Public"], responses=PublicStatsSerializer)
    def get(self, request):
        return Response({"stats": selectors.public_stats()})


class _PublicListView(_PublicView):
    model = None
    serializer_class = None
    key = ""

    def get(self, request):
        rows = selectors.active(self.model)
        return Response({self.key: self.serializer_class(rows, many=True).data})


@extend_schema(tags=["Public"])
class PublicFeaturesView(_PublicListView):
    model = Feature
    serializer_class = FeatureSerializer
    key = "features"


@extend_schema(tags=["Public"])
class PublicBenefitsView(_PublicListView):
    model = Benefit
    serializer_class = BenefitSerializer
    key = "benefits"


@extend_schema(tags=["Public"])
class PublicTestimonialsView(_PublicListView):
    model = Testimonial
    serializer_class = TestimonialSerializer
    key = "testimonials"


class PublicServiceFeaturesView(_PublicView):
    @extend_schema(tags=["Public"], responses=OpenApiTypes.OBJECT)
    def get(self, request):
        descriptions = selectors.active(ServiceFeature).values_list("description", flat=True)
        return Response({"features": list(descriptions)})


class PublicContactInfoView(_PublicView):
    @extend_schema(tags=["Public"], responses=ContactInfoSerializer)
    def get(self, request):
        return Response({"contact_info": ContactInfoSerializer(selectors.contact_info()).data})


class PublicAnnouncementsView(_PublicView):
    @extend_schema(tags=["Public"], responses=PublicAnnouncementSerializer(many=True))
    def get(self, request):
        rows = selectors.public_announcements()
        return Response({"announcements": PublicAnnouncementSerializer(rows, many=True).data})


# ---------------------------------------------------------
# Admin
# ---------------------------------------------------------

class _ContentViewSet(viewsets.ViewSet):
    """
    CRUD + toggle-active for one landing-page model.
    Admin listings include inactive rows.
    """
    permission_classes = [ContentPermission]

    model = None
    serializer_class = None
    label = ""

    def _get(self, pk):
        try:
            return self.model.objects.get(id=_parse_uuid(pk, "id"))
        except self.model.DoesNotExist:
            raise NotFound(f"{self.label} not found")

    def list(self, request):
        return paginate(request, self.model.objects.order_by("sort_order", "created_at"), self.serializer_class)

    def retrieve(self, request, pk=None):
        return Response(self.serializer_class(self._get(pk)).data)

    def create(self, request):
        ser = self.serializer_class(data=request.data)
        ser.is_valid(raise_exception=True)
        obj = ContentService.create(actor_user_id=request.user.id, model=self.model, data=dict(ser.validated_data))
        return Response(self.serializer_class(obj).data, status=status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        obj = self._get(pk)
        ser = self.serializer_class(obj, data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        obj = ContentService.update(actor_user_id=request.user.id, obj=obj, data=dict(ser.validated_data))
        return Response(self.serializer_class(obj).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    def destroy(self, request, pk=None):
        ContentService.delete(actor_user_id=request.user.id, obj=self._get(pk))
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(request=None)
    @action(detail=True, methods=["patch"], url_path="toggle-active")
    def toggle_active(self, request, pk=None):
        obj = ContentService.toggle_active(actor_user_id=request.user.id, obj=self._get(pk))
        return Response(self.serializer_class(obj).data)


@extend_schema(tags=["Admin CMS"])
class FeatureViewSet(_ContentViewSet):
    model = Feature
    serializer_class = FeatureSerializer
    queryset = Feature.objects.none()
    label = "Feature"


@extend_schema(tags=["Admin CMS"])
class BenefitViewSet(_ContentViewSet):
    model = Benefit
    serializer_class = BenefitSerializer
    queryset = Benefit.objects.none()
    label = "Benefit"


@extend_schema(tags=["Admin CMS"])
class TestimonialViewSet(_ContentViewSet):
    model = Testimonial
    serializer_class = TestimonialSerializer
    queryset = Testimonial.objects.none()
    label = "Testimonial"


@extend_schema(tags=["Admin CMS"])
class ServiceFeatureViewSet(_ContentViewSet):
    model = ServiceFeature
    serializer_class = ServiceFeatureSerializer
    queryset = ServiceFeature.objects.none()
    label = "Service feature"


@extend_schema(tags=["Admin CMS"])
class AnnouncementViewSet(_ContentViewSet):
    permission_classes = [AnnouncementPermission]

    model = Announcement
    serializer_class = AnnouncementSerializer
    queryset = Announcement.objects.none()
    label = "Announcement"

    def list(self, request):
        qs = selectors.list_announcements(search=request.query_params.get("search"))
        return paginate(request, qs, AnnouncementSerializer)

    def create(self, request):
        ser = AnnouncementSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        obj = AnnouncementService.create(actor_user_id=request.user.id, data=dict(ser.validated_data))
        return Response(AnnouncementSerializer(obj).data, status=status.HTTP_201_CREATED)

    @extend_schema(request=None)
    @action(detail=True, methods=["patch"], url_path="publish")
    def publish(self, request, pk=None):
        obj = AnnouncementService.publish(actor_user_id=request.user.id, announcement=self._get(pk))
        return Response(AnnouncementSerializer(obj).data)


class SystemSettingsView(APIView):
    permission_classes = [AdminOnlyPermission]

    @extend_schema(tags=["Admin CMS"], responses=SystemSettingsSerializer)
    def get(self, request):
        return Response(SystemSettingsSerializer(SystemSettings.load()).data)

    @extend_schema(tags=["Admin CMS"], request=SystemSettingsSerializer, responses=SystemSettingsSerializer)
    def put(self, request):
        ser = SystemSettingsSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)
        obj = SystemSettingsService.update(actor_user_id=request.user.id, data=dict(ser.validated_data))
        return Response(SystemSettingsSerializer(obj).data)
