"""
Capability gate for admin-only operations.

Every admin-only service method passes the acting user through
ensure_admin() before validating input or touching the store.
"""

from .exceptions import Forbidden
from .models import Role, User


def ensure_admin(user: User) -> None:
    """
    Raise Forbidden unless the user holds the admin role.

    Raises:
        Forbidden: If the user's role is not Role.ADMIN
    """
    if user.role is not Role.ADMIN:
        raise Forbidden()
