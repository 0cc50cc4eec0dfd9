# brgy_core/iam/api/users.py
from __future__ import annotations

from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.response import Response

from brgy_core.common.api.pagination import paginate
from brgy_core.common.storage import get_download_url
from brgy_core.iam.api.serializers import (
    AdminUserCreateSerializer,
    AdminUserUpdateSerializer,
    UserRolesSerializer,
    UserSerializer,
    UserStatusSerializer,
)
from brgy_core.iam.permissions import UserAdminPermission
from brgy_core.iam.selectors import list_users
from brgy_core.iam.services.accounts import UserAdminService, profile_for


class UserAdminViewSet(viewsets.ViewSet):
    permission_classes = [UserAdminPermission]
    serializer_class = UserSerializer

    @extend_schema(
        tags=["Admin"],
        responses={200: UserSerializer(many=True)},
        parameters=[
            OpenApiParameter(name="search", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="status", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
            OpenApiParameter(name="role", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=False),
        ],
    )
    def list(self, request):
        qs = list_users(
            search=(request.query_params.get("search") or "").strip() or None,
            status=request.query_params.get("status") or None,
            role=request.query_params.get("role") or None,
        )
        return paginate(request, qs, UserSerializer)

    @extend_schema(tags=["Admin"], responses={200: UserSerializer})
    def retrieve(self, request, pk=None):
        return Response(UserSerializer(UserAdminService.get_user(pk)).data)

    @extend_schema(tags=["Admin"], request=AdminUserCreateSerializer, responses={201: UserSerializer})
    def create(self, request):
        ser = AdminUserCreateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)

        user = UserAdminService.create_user(
            actor_user_id=request.user.id,
            email=data.pop("email"),
            password=data.pop("password"),
            first_name=data.pop("first_name", ""),
            last_name=data.pop("last_name", ""),
            roles=data.pop("roles", []),
            profile=data,
        )
        return Response(UserSerializer(user).data, status=status.HTTP_201_CREATED)

    @extend_schema(tags=["Admin"], request=AdminUserUpdateSerializer, responses={200: UserSerializer})
    def update(self, request, pk=None):
        ser = AdminUserUpdateSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = UserAdminService.update_user(actor_user_id=request.user.id, user_id=pk, data=dict(ser.validated_data))
        return Response(UserSerializer(user).data)

    def partial_update(self, request, pk=None):
        return self.update(request, pk=pk)

    @extend_schema(tags=["Admin"], responses={204: None})
    def destroy(self, request, pk=None):
        UserAdminService.delete_user(actor_user_id=request.user.id, user_id=pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(tags=["Admin"], request=UserStatusSerializer, responses={200: UserSerializer})
    @action(detail=True, methods=["patch"], url_path="status")
    def set_status(self, request, pk=None):
        ser = UserStatusSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = UserAdminService.set_status(actor_user_id=request.user.id, user_id=pk, status=ser.validated_data["status"])
        return Response(UserSerializer(user).data)

    @extend_schema(tags=["Admin"], request=UserRolesSerializer, responses={200: UserSerializer})
    @action(detail=True, methods=["put"], url_path="roles")
    def set_roles(self, request, pk=None):
        ser = UserRolesSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        user = UserAdminService.set_roles(actor_user_id=request.user.id, user_id=pk, roles=ser.validated_data["roles"])
        return Response(UserSerializer(user).data)

    @extend_schema(tags=["Admin"], responses={200: OpenApiTypes.OBJECT})
    @action(detail=True, methods=["get"], url_path="proof-of-residency")
    def proof_of_residency(self, request, pk=None):
        user = UserAdminService.get_user(pk)
        profile = profile_for(user)
        if profile is None or not profile.proof_of_residency:
            raise NotFound("No proof of residency on file")
        return Response({"url": get_download_url(profile.proof_of_residency)})
