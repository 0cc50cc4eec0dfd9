# brgy_core/api/urls.py
from __future__ import annotations

from django.urls import path
from rest_framework.routers import DefaultRouter

from brgy_core.audit.api.views import AuditEventViewSet
from brgy_core.certificates.api.views import DaycareCertificateViewSet, HealthCertificateViewSet
from brgy_core.cms.api.views import (
    AnnouncementViewSet,
    BenefitViewSet,
    FeatureViewSet,
    PublicAnnouncementsView,
    PublicBenefitsView,
    PublicContactInfoView,
    PublicFeaturesView,
    PublicServiceFeaturesView,
    PublicStatsView,
    PublicTestimonialsView,
    ServiceFeatureViewSet,
    SystemSettingsView,
    TestimonialViewSet,
)
from brgy_core.common.api.files import SignedFileDownloadView
from brgy_core.daycare.api.views import (
    AttendanceViewSet,
    DaycareRegistrationViewSet,
    DaycareStudentViewSet,
    LearningMaterialViewSet,
    ProgressReportViewSet,
)
from brgy_core.events.api.views import EventAttendanceViewSet, EventRegistrationViewSet, EventViewSet
from brgy_core.health.api.views import (
    ImmunizationCardViewSet,
    ImmunizationRecordViewSet,
    ImmunizationScheduleView,
    PatientViewSet,
)
from brgy_core.iam.api.auth import (
    ForgotPasswordView,
    LoginView,
    LogoutView,
    RefreshView,
    RegisterView,
    ResendOtpView,
    ResetPasswordView,
    SendOtpView,
    VerifyOtpView,
    VerifyResetCodeView,
)
from brgy_core.iam.api.me import ProfileView
from brgy_core.iam.api.users import UserAdminViewSet
from brgy_core.reports.api.views import AdminStatsView, ReportExportView, ReportView

router = DefaultRouter()

# Health
router.register(r"health/patients", PatientViewSet, basename="health-patients")
router.register(r"health/immunization-records", ImmunizationRecordViewSet, basename="health-immunization-records")
router.register(r"health/immunization-cards", ImmunizationCardViewSet, basename="health-immunization-cards")
router.register(r"health/certificates", HealthCertificateViewSet, basename="health-certificates")

# Daycare
router.register(r"daycare/registrations", DaycareRegistrationViewSet, basename="daycare-registrations")
router.register(r"daycare/students", DaycareStudentViewSet, basename="daycare-students")
router.register(r"daycare/attendance", AttendanceViewSet, basename="daycare-attendance")
router.register(r"daycare/progress-reports", ProgressReportViewSet, basename="daycare-progress-reports")
router.register(r"daycare/learning-materials", LearningMaterialViewSet, basename="daycare-learning-materials")
router.register(r"daycare/certificates", DaycareCertificateViewSet, basename="daycare-certificates")

# SK events: sub-resources before "events" so events/{pk}/ does not swallow them
router.register(r"events/registrations", EventRegistrationViewSet, basename="event-registrations")
router.register(r"events/attendance", EventAttendanceViewSet, basename="event-attendance")
router.register(r"events", EventViewSet, basename="events")

# Admin
router.register(r"admin/users", UserAdminViewSet, basename="admin-users")
router.register(r"admin/audit-logs", AuditEventViewSet, basename="admin-audit-logs")
router.register(r"admin/announcements", AnnouncementViewSet, basename="admin-announcements")
router.register(r"admin/features", FeatureViewSet, basename="admin-features")
router.register(r"admin/benefits", BenefitViewSet, basename="admin-benefits")
router.register(r"admin/testimonials", TestimonialViewSet, basename="admin-testimonials")
router.register(r"admin/service-features", ServiceFeatureViewSet, basename="admin-service-features")

urlpatterns = [
    # Auth + profile
    path("auth/register/", RegisterView.as_view(), name="register"),
    path("auth/login/", LoginView.as_view(), name="login"),
    path("auth/refresh/", RefreshView.as_view(), name="refresh"),
    path("auth/logout/", LogoutView.as_view(), name="logout"),
    path("auth/send-otp/", SendOtpView.as_view(), name="send-otp"),
    path("auth/resend-otp/", ResendOtpView.as_view(), name="resend-otp"),
    path("auth/verify-otp/", VerifyOtpView.as_view(), name="verify-otp"),
    path("auth/forgot-password/", ForgotPasswordView.as_view(), name="forgot-password"),
    path("auth/verify-reset-code/", VerifyResetCodeView.as_view(), name="verify-reset-code"),
    path("auth/reset-password/", ResetPasswordView.as_view(), name="reset-password"),
    path("auth/profile/", ProfileView.as_view(), name="profile"),
    path("me/", ProfileView.as_view(), name="me"),

    # Signed object-storage downloads
    path("files/download/", SignedFileDownloadView.as_view(), name="files-download"),

    path("health/immunization-schedule/", ImmunizationScheduleView.as_view(), name="immunization-schedule"),

    # Reports
    path("reports/<str:kind>/", ReportView.as_view(), name="report"),
    path("reports/<str:kind>/export/", ReportExportView.as_view(), name="report-export"),
    path("admin/stats/", AdminStatsView.as_view(), name="admin-stats"),
    path("admin/settings/", SystemSettingsView.as_view(), name="admin-settings"),

    # Public landing page
    path("public/stats/", PublicStatsView.as_view(), name="public-stats"),
    path("public/features/", PublicFeaturesView.as_view(), name="public-features"),
    path("public/benefits/", PublicBenefitsView.as_view(), name="public-benefits"),
    path("public/testimonials/", PublicTestimonialsView.as_view(), name="public-testimonials"),
    path("public/service-features/", PublicServiceFeaturesView.as_view(), name="public-service-features"),
    path("public/contact-info/", PublicContactInfoView.as_view(), name="public-contact-info"),
    path("public/announcements/", PublicAnnouncementsView.as_view(), name="public-announcements"),

    # Router URLs last (so explicit paths win if ever overlapping)
    *router.urls,
]
