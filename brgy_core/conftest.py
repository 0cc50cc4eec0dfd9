# brgy_core/conftest.py
from datetime import date
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from rest_framework.test import APIClient

from brgy_core.common.permissions import ALL_ROLES, ROLE_SYSTEM_ADMIN


@pytest.fixture
def ensure_groups(db):
    return {name: Group.objects.get_or_create(name=name)[0] for name in ALL_ROLES}


@pytest.fixture
def make_user(db, ensure_groups):
    """
    make_user("BHW") -> active user with a resident profile in that group.
    Pass role=None for a user with no groups (VISITOR).
    """
    from brgy_core.iam.models import ResidentProfile

    User = get_user_model()
    counter = {"n": 0}

    def _make(role=None, *, email=None, password="Pass@12345", status="ACTIVE", first_name="Test", last_name="User"):
        counter["n"] += 1
        email = email or f"user{counter['n']}-{(role or 'visitor').lower()}@example.com"
        user = User.objects.create_user(
            username=email,
            email=email,
            password=password,
            first_name=first_name,
            last_name=last_name,
            is_active=status == "ACTIVE",
        )
        if role:
            user.groups.add(ensure_groups[role])
        ResidentProfile.objects.create(user=user, status=status, contact_number="09171234567")
        return user

    return _make


@pytest.fixture
def admin_user(make_user):
    return make_user(ROLE_SYSTEM_ADMIN, email="admin@example.com", first_name="Ada", last_name="Admin")


@pytest.fixture
def api_client(admin_user):
    c = APIClient()
    c.force_authenticate(user=admin_user)
    return c


@pytest.fixture
def anon_client():
    return APIClient()


@pytest.fixture
def client_for(make_user):
    """
    client_for("BHW") -> (APIClient authenticated as a fresh user with that role, user)
    """

    def _client(role=None, **kwargs):
        user = make_user(role, **kwargs)
        c = APIClient()
        c.force_authenticate(user=user)
        return c, user

    return _client


@pytest.fixture
def patient(db, admin_user):
    from brgy_core.health.models import Patient

    return Patient.objects.create(
        first_name="Maria",
        middle_name="Santos",
        last_name="Reyes",
        date_of_birth=date(2024, 1, 15),
        gender=Patient.Gender.FEMALE,
        address="Purok 3, Binitayan, Daraga",
        mother_name="Ana Reyes",
        father_name="Jose Reyes",
        place_of_birth="Daraga",
        birth_weight=Decimal("3.20"),
        birth_length=Decimal("50.00"),
        blood_type="O+",
        created_by=admin_user,
    )


@pytest.fixture
def student(db, admin_user):
    from brgy_core.daycare.models import DaycareRegistration, DaycareStudent

    reg = DaycareRegistration.objects.create(
        parent=admin_user,
        child_first_name="Lito",
        child_last_name="Garcia",
        child_date_of_birth=date(2021, 6, 1),
        child_gender="MALE",
        address="Purok 1, Binitayan",
        parent_contact="09171234567",
        emergency_contact="09179876543",
        status=DaycareRegistration.Status.APPROVED,
    )
    return DaycareStudent.objects.create(
        registration=reg,
        first_name="Lito",
        last_name="Garcia",
        date_of_birth=date(2021, 6, 1),
        gender="MALE",
        address="Purok 1, Binitayan",
        emergency_contact="09179876543",
        enrollment_date=date.today(),
    )
