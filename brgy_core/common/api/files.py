# brgy_core/common/api/files.py
from __future__ import annotations

import os

from django.http import FileResponse
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework.exceptions import NotFound, PermissionDenied, ValidationError
from rest_framework.permissions import AllowAny
from rest_framework.views import APIView

from brgy_core.common.storage import InvalidDownloadToken, file_exists, open_file, resolve_download_token


class SignedFileDownloadView(APIView):
    """
    Streams a stored file for a signed token produced by get_download_url().
    The token itself is the credential.
    """
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(
        tags=["Files"],
        parameters=[
            OpenApiParameter(name="token", type=OpenApiTypes.STR, location=OpenApiParameter.QUERY, required=True),
        ],
        responses={200: OpenApiTypes.BINARY},
    )
    def get(self, request):
        token = request.query_params.get("token")
        if not token:
            raise ValidationError({"token": "This field is required."})

        try:
            path = resolve_download_token(token)
        except InvalidDownloadToken as e:
            raise PermissionDenied(str(e))

        if not file_exists(path):
            raise NotFound("File not found.")

        return FileResponse(open_file(path), as_attachment=True, filename=os.path.basename(path))
