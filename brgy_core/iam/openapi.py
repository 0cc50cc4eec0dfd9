# brgy_core/iam/openapi.py
from drf_spectacular.extensions import OpenApiAuthenticationExtension


class CookieOrHeaderJWTAuthenticationScheme(OpenApiAuthenticationExtension):
    target_class = "brgy_core.iam.auth.CookieOrHeaderJWTAuthentication"
    name = "BearerOrCookieJWT"

    def get_security_definition(self, auto_schema):
        # Swagger UI can only send the header; the portal frontend uses the cookies.
        return {
            "type": "http",
            "scheme": "bearer",
            "bearerFormat": "JWT",
            "description": (
                "Access token from POST /auth/login/ or /auth/verify-otp/. "
                "Browsers send it in the brgy_access cookie (refresh in brgy_refresh); "
                "other clients use `Authorization: Bearer <token>`."
            ),
        }
