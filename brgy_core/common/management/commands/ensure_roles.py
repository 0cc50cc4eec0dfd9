# brgy_core/common/management/commands/ensure_roles.py

from django.contrib.auth import get_user_model
from django.contrib.auth.models import Group
from django.core.management.base import BaseCommand, CommandError

from brgy_core.common.permissions import ALL_ROLES, ROLE_SYSTEM_ADMIN


class Command(BaseCommand):
    help = "Create the portal role groups (idempotent). Optionally grant SYSTEM_ADMIN to an existing account."

    def add_arguments(self, parser):
        parser.add_argument("--admin-email", help="Existing user to add to the SYSTEM_ADMIN group.")

    def handle(self, *args, **options):
        groups = {}
        created = 0
        for name in ALL_ROLES:
            groups[name], was_created = Group.objects.get_or_create(name=name)
            created += int(was_created)

        self.stdout.write(self.style.SUCCESS(f"Roles ensured ({len(ALL_ROLES)}). Newly created: {created}"))

        email = options.get("admin_email")
        if not email:
            return

        user = get_user_model().objects.filter(email__iexact=email.strip()).first()
        if user is None:
            raise CommandError(f"No user with email {email}")
        user.groups.add(groups[ROLE_SYSTEM_ADMIN])
        self.stdout.write(self.style.SUCCESS(f"{user.email} is now {ROLE_SYSTEM_ADMIN}"))
