"""
Administrator access control.

Administrators sign in with Django's session authentication. Signing in is
not enough to use the admin endpoints: the account's username or email must
also appear in settings.ADMIN_ALLOWLIST (compared case-insensitively).
"""

from functools import wraps
import logging

from django.conf import settings # pyright: ignore[reportMissingModuleSource]
from django.http import JsonResponse # pyright: ignore[reportMissingModuleSource]

logger = logging.getLogger(__name__)


def allowed_identities():
    return {identity.strip().lower() for identity in settings.ADMIN_ALLOWLIST if identity.strip()}


def user_identifier(user):
    """Identifier stored on the user's selection rows."""
    return user.get_username()


def is_allowed_admin(user):
    """True if ``user`` is signed in and on the allow-list."""
    if not user or not user.is_authenticated:
        return False
    allowed = allowed_identities()
    candidates = {user.get_username().lower(), (user.email or '').lower()}
    candidates.discard('')
    return bool(candidates & allowed)


def admin_required(view_func):
    """
    Gate a JSON view behind the allow-list.

    Anonymous requests get 401, signed-in users off the list get 403.
    """

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        if not request.user.is_authenticated:
            return JsonResponse({'error': 'Authentication required.'}, status=401)
        if not is_allowed_admin(request.user):
            logger.warning(f"Admin access denied for {request.user.get_username()}")
            return JsonResponse({'error': 'Not authorized.'}, status=403)
        return view_func(request, *args, **kwargs)

    return wrapper
