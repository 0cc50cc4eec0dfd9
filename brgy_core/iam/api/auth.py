# brgy_core/iam/api/auth.py

from __future__ import annotations

from datetime import timedelta
from typing import Any

from django.conf import settings
from django.contrib.auth.models import update_last_login
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.serializers import TokenRefreshSerializer
from rest_framework_simplejwt.tokens import RefreshToken

from brgy_core.iam.api.serializers import (
    DetailSerializer,
    EmailCodeSerializer,
    EmailOnlySerializer,
    LoginRequestSerializer,
    LoginResponseSerializer,
    RegisterSerializer,
    ResetPasswordSerializer,
    UserSerializer,
)
from brgy_core.iam.services.accounts import AccountService, AuthService


def _seconds(value: Any) -> int:
    """
    Convert a JWT lifetime setting into seconds.
    Supports timedelta OR int/float (already seconds).
    """
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    try:
        return int(value)
    except (TypeError, ValueError):
        # 0 means "session cookie"
        return 0


def _set_auth_cookies(response: Response, *, access: str, refresh: str) -> None:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}

    access_name = jwt_cfg.get("AUTH_COOKIE", "brgy_access")
    refresh_name = jwt_cfg.get("AUTH_COOKIE_REFRESH", "brgy_refresh")

    secure = bool(jwt_cfg.get("AUTH_COOKIE_SECURE", False))
    samesite = jwt_cfg.get("AUTH_COOKIE_SAMESITE", "Lax")

    for name, value, lifetime in (
        (access_name, access, jwt_cfg.get("ACCESS_TOKEN_LIFETIME", timedelta(minutes=30))),
        (refresh_name, refresh, jwt_cfg.get("REFRESH_TOKEN_LIFETIME", timedelta(days=7))),
    ):
        response.set_cookie(
            name,
            value,
            max_age=_seconds(lifetime),
            httponly=True,
            secure=secure,
            samesite=samesite,
            path="/",
        )


def _clear_auth_cookies(response: Response) -> None:
    jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
    response.delete_cookie(jwt_cfg.get("AUTH_COOKIE", "brgy_access"), path="/")
    response.delete_cookie(jwt_cfg.get("AUTH_COOKIE_REFRESH", "brgy_refresh"), path="/")


def _login_response(request, user, detail: str) -> Response:
    refresh = RefreshToken.for_user(user)
    update_last_login(None, user)

    res = Response(
        {"detail": detail, "user": UserSerializer(user, context={"request": request}).data},
        status=status.HTTP_200_OK,
    )
    _set_auth_cookies(res, access=str(refresh.access_token), refresh=str(refresh))
    return res


class RegisterView(APIView):
    permission_classes = [AllowAny]
    parser_classes = [MultiPartParser, FormParser, JSONParser]

    @extend_schema(request=RegisterSerializer, responses={201: UserSerializer}, tags=["Auth"])
    def post(self, request):
        ser = RegisterSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = dict(ser.validated_data)

        profile = AccountService.register_resident(
            email=data.pop("email"),
            password=data.pop("password"),
            first_name=data.pop("first_name"),
            last_name=data.pop("last_name"),
            proof_of_residency=data.pop("proof_of_residency"),
            profile=data,
        )
        body = UserSerializer(profile.user, context={"request": request}).data
        body["detail"] = "Registration submitted. Your account is pending approval."
        return Response(body, status=status.HTTP_201_CREATED)


class LoginView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=LoginRequestSerializer, responses={200: LoginResponseSerializer}, tags=["Auth"])
    def post(self, request):
        ser = LoginRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        user = AuthService.check_credentials(**ser.validated_data)
        return _login_response(request, user, "login ok")


class RefreshView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=None, responses={200: DetailSerializer}, tags=["Auth"])
    def post(self, request):
        jwt_cfg = getattr(settings, "SIMPLE_JWT", {}) or {}
        refresh_cookie_name = jwt_cfg.get("AUTH_COOKIE_REFRESH", "brgy_refresh")
        refresh = request.COOKIES.get(refresh_cookie_name) or request.data.get("refresh")

        serializer = TokenRefreshSerializer(data={"refresh": refresh})
        serializer.is_valid(raise_exception=True)

        access = serializer.validated_data["access"]
        new_refresh = serializer.validated_data.get("refresh", refresh)

        res = Response({"detail": "refreshed"}, status=status.HTTP_200_OK)
        _set_auth_cookies(res, access=access, refresh=new_refresh)
        return res


class LogoutView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(request=None, responses={200: DetailSerializer}, tags=["Auth"])
    def post(self, request):
        res = Response({"detail": "logged out"}, status=status.HTTP_200_OK)
        _clear_auth_cookies(res)
        return res


class SendOtpView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=LoginRequestSerializer, responses={200: DetailSerializer}, tags=["Auth"])
    def post(self, request):
        ser = LoginRequestSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response(AuthService.send_login_otp(**ser.validated_data), status=status.HTTP_200_OK)


class ResendOtpView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=EmailOnlySerializer, responses={200: DetailSerializer}, tags=["Auth"])
    def post(self, request):
        ser = EmailOnlySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response(AuthService.resend_login_otp(**ser.validated_data), status=status.HTTP_200_OK)


class VerifyOtpView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=EmailCodeSerializer, responses={200: LoginResponseSerializer}, tags=["Auth"])
    def post(self, request):
        ser = EmailCodeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)

        user = AuthService.verify_login_otp(**ser.validated_data)
        return _login_response(request, user, "login ok")


class ForgotPasswordView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=EmailOnlySerializer, responses={200: DetailSerializer}, tags=["Auth"])
    def post(self, request):
        ser = EmailOnlySerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response(AuthService.forgot_password(**ser.validated_data), status=status.HTTP_200_OK)


class VerifyResetCodeView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=EmailCodeSerializer, tags=["Auth"])
    def post(self, request):
        ser = EmailCodeSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        return Response(AuthService.verify_reset_code(**ser.validated_data), status=status.HTTP_200_OK)


class ResetPasswordView(APIView):
    permission_classes = [AllowAny]
    authentication_classes = []

    @extend_schema(request=ResetPasswordSerializer, responses={200: DetailSerializer}, tags=["Auth"])
    def post(self, request):
        ser = ResetPasswordSerializer(data=request.data)
        ser.is_valid(raise_exception=True)
        data = ser.validated_data
        return Response(
            AuthService.reset_password(email=data["email"], code=data["code"], new_password=data["new_password"]),
            status=status.HTTP_200_OK,
        )
