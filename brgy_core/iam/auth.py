# brgy_core/iam/auth.py

from __future__ import annotations

from django.conf import settings
from rest_framework.exceptions import AuthenticationFailed
from rest_framework_simplejwt.authentication import JWTAuthentication

ACTIVE = "ACTIVE"


def access_cookie_name() -> str:
    return settings.SIMPLE_JWT.get("AUTH_COOKIE", "brgy_access")


class CookieOrHeaderJWTAuthentication(JWTAuthentication):
    """
    Authenticate using:
      1) Authorization: Bearer <access>
      2) the HttpOnly access cookie set by login / verify-otp

    A token issued before an admin suspended or deactivated the resident
    stops working immediately instead of living out its lifetime.
    """

    def authenticate(self, request):
        header = self.get_header(request)
        if header:
            result = super().authenticate(request)
        else:
            raw_token = request.COOKIES.get(access_cookie_name())
            if not raw_token:
                return None
            validated_token = self.get_validated_token(raw_token)
            result = (self.get_user(validated_token), validated_token)

        if result is not None:
            self._assert_active(result[0])
        return result

    @staticmethod
    def _assert_active(user) -> None:
        # accounts without a profile (createsuperuser) rely on user.is_active alone
        profile = getattr(user, "resident_profile", None)
        if profile is not None and profile.status != ACTIVE:
            raise AuthenticationFailed("Account is inactive", code="user_inactive")
