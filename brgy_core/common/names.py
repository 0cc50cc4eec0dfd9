# brgy_core/common/names.py


def display_name(user, default: str = "Unknown") -> str:
    """'First Last', else the email, else default (also for user=None)."""
    if user is None:
        return default
    name = f"{user.first_name} {user.last_name}".strip()
    return name or user.email or default
