# brgy_core/iam/selectors.py
from __future__ import annotations

from typing import Optional

from django.contrib.auth import get_user_model
from django.db.models import Q, QuerySet


def list_users(*, search: Optional[str] = None, status: Optional[str] = None, role: Optional[str] = None) -> QuerySet:
    User = get_user_model()
    qs = User.objects.select_related("resident_profile").prefetch_related("groups").order_by("-date_joined")

    if search:
        qs = qs.filter(
            Q(email__icontains=search)
            | Q(first_name__icontains=search)
            | Q(last_name__icontains=search)
            | Q(resident_profile__contact_number__icontains=search)
        )
    if status:
        qs = qs.filter(resident_profile__status=status)
    if role:
        qs = qs.filter(groups__name=role).distinct()
    return qs
