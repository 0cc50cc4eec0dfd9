# brgy_core/iam/api/me.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from brgy_core.iam.api.serializers import ProfileUpdateSerializer, UserSerializer
from brgy_core.iam.services.accounts import AccountService


class ProfileView(APIView):
    """
    Current user, roles and resident profile. Also mounted at /me/.
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: UserSerializer}, tags=["Auth"])
    def get(self, request):
        return Response(UserSerializer(request.user, context={"request": request}).data, status=status.HTTP_200_OK)

    @extend_schema(request=ProfileUpdateSerializer, responses={200: UserSerializer}, tags=["Auth"])
    def put(self, request):
        ser = ProfileUpdateSerializer(data=request.data, partial=True)
        ser.is_valid(raise_exception=True)

        AccountService.update_profile(user=request.user, data=dict(ser.validated_data))

        request.user.refresh_from_db()
        return Response(UserSerializer(request.user, context={"request": request}).data, status=status.HTTP_200_OK)
