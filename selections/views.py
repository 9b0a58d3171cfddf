"""
View functions for the Election Tracker
=======================================

JSON handlers for:
- Administrator sign-in / sign-out
- Saving picks and reading back the current picks (allow-listed admins)
- Selection history, deletion, repeated patterns, statistics
- Public viewer: any administrator's history and counts, no login

Errors:
- Invalid payloads or picks: 400 {"errors": [...]}
- Record store failures: 503 {"error": <original message>}
- Deleting an unknown save: 204, the rows are already gone
"""

from functools import wraps
import json
import logging

from django.contrib.auth import authenticate, login, logout # pyright: ignore[reportMissingModuleSource]
from django.http import HttpResponse, JsonResponse # pyright: ignore[reportMissingModuleSource]
from django.views.decorators.csrf import ensure_csrf_cookie # pyright: ignore[reportMissingModuleSource]
from django.views.decorators.http import require_http_methods # pyright: ignore[reportMissingModuleSource]

from . import services
from .auth import admin_required, is_allowed_admin, user_identifier
from .exceptions import SelectionValidationError, StoreUnavailable
from .forms import LoginForm, SaveSelectionsForm
from .utils import LIST_A, LIST_B

logger = logging.getLogger(__name__)


def store_errors_as_json(view_func):
    """Turn StoreUnavailable into a 503 carrying the store's message."""

    @wraps(view_func)
    def wrapper(request, *args, **kwargs):
        try:
            return view_func(request, *args, **kwargs)
        except StoreUnavailable as e:
            logger.error(f"Record store unavailable: {str(e)}")
            return JsonResponse({'error': str(e)}, status=503)

    return wrapper


def parse_json_body(request):
    """Decode a JSON request body, or None if it is not valid JSON."""
    if not request.body:
        return {}
    try:
        payload = json.loads(request.body)
    except (ValueError, UnicodeDecodeError):
        return None
    return payload if isinstance(payload, dict) else None


def form_errors(form):
    return [f"{field}: {error}" if field != '__all__' else str(error)
            for field, errors in form.errors.items()
            for error in errors]


def split_stats(stats):
    """Split CandidateStats into the two roster columns."""
    return {
        'list_a': [c.to_dict() for c in stats if c.list_name == LIST_A],
        'list_b': [c.to_dict() for c in stats if c.list_name == LIST_B],
    }


# ============================================================================
# AUTH
# ============================================================================

@require_http_methods(["GET"])
@ensure_csrf_cookie
def me(request):
    """
    Current sign-in state. Also sets the CSRF cookie for the frontend.

    Returns:
        JSON: {'authenticated': bool, 'user_id': str|None, 'is_admin': bool}
    """
    user = request.user
    return JsonResponse({
        'authenticated': user.is_authenticated,
        'user_id': user_identifier(user) if user.is_authenticated else None,
        'is_admin': is_allowed_admin(user),
    })


@require_http_methods(["POST"])
def admin_login(request):
    """
    Sign an administrator in with email + password.

    Credentials are checked first; accounts that authenticate but are not on
    the allow-list are refused with 403 and not signed in.
    """

    payload = parse_json_body(request)
    if payload is None:
        return JsonResponse({'errors': ['Request body must be a JSON object.']}, status=400)

    form = LoginForm(payload)
    if not form.is_valid():
        return JsonResponse({'errors': form_errors(form)}, status=400)

    user = authenticate(
        request,
        username=form.cleaned_data['email'],
        password=form.cleaned_data['password'],
    )
    if user is None:
        logger.warning(f"Failed login for {form.cleaned_data['email']}")
        return JsonResponse({'error': 'Invalid email or password.'}, status=401)

    if not is_allowed_admin(user):
        logger.warning(f"Login refused, not on allow-list: {user.get_username()}")
        return JsonResponse({'error': 'Not authorized.'}, status=403)

    login(request, user)
    logger.info(f"Admin signed in: {user.get_username()}")
    return JsonResponse({'user_id': user_identifier(user)})


@require_http_methods(["POST"])
def admin_logout(request):
    logout(request)
    return HttpResponse(status=204)


# ============================================================================
# ADMIN SURFACE
# ============================================================================

@require_http_methods(["GET"])
def candidates(request):
    """The two rosters and the selection limit."""
    rosters = services.get_rosters()
    return JsonResponse({
        'list_a': rosters[LIST_A],
        'list_b': rosters[LIST_B],
        'max_selections': services.max_selections_allowed(),
    })


@require_http_methods(["GET", "POST"])
@admin_required
@store_errors_as_json
def admin_selections(request):
    """
    Current picks of the signed-in administrator.

    GET: picks of the newest save
    POST: append a new save; body {"selections": [{"name", "list_name"}, ...]}

    Returns:
        GET: 200 {'selections': [...], 'max_selections': int}
        POST: 201 {'selections': [...]} or 400 {'errors': [...]}
    """

    user_id = user_identifier(request.user)

    if request.method == 'POST':
        payload = parse_json_body(request)
        if payload is None:
            return JsonResponse({'errors': ['Request body must be a JSON object.']}, status=400)

        form = SaveSelectionsForm(payload)
        if not form.is_valid():
            return JsonResponse({'errors': form_errors(form)}, status=400)

        try:
            saved = services.save_user_selections(user_id, form.cleaned_data['selections'])
        except SelectionValidationError as e:
            return JsonResponse({'errors': e.messages}, status=400)

        return JsonResponse({'selections': [s.to_dict() for s in saved]}, status=201)

    recent = services.get_recent_user_selections(user_id)
    return JsonResponse({
        'selections': [s.to_dict() for s in recent],
        'max_selections': services.max_selections_allowed(),
    })


@require_http_methods(["GET", "DELETE"])
@admin_required
@store_errors_as_json
def admin_history(request):
    """
    GET: every save of the signed-in administrator, newest first
    DELETE: remove all of them
    """

    user_id = user_identifier(request.user)

    if request.method == 'DELETE':
        services.delete_all_user_selections(user_id)
        return HttpResponse(status=204)

    history = services.get_user_selection_history(user_id)
    return JsonResponse({'history': [s.to_dict() for s in history]})


@require_http_methods(["DELETE"])
@admin_required
@store_errors_as_json
def admin_history_group(request, group_id):
    """Remove one save. Unknown ids succeed too."""
    services.delete_user_selections(user_identifier(request.user), group_id)
    return HttpResponse(status=204)


@require_http_methods(["GET"])
@admin_required
@store_errors_as_json
def admin_patterns(request):
    patterns = services.find_identical_selection_patterns(user_identifier(request.user))
    return JsonResponse({'patterns': [p.to_dict() for p in patterns]})


@require_http_methods(["GET"])
@admin_required
@store_errors_as_json
def admin_stats(request):
    """Selection counts over every save of the signed-in administrator."""
    stats = services.get_candidate_stats(user_identifier(request.user))
    return JsonResponse(split_stats(stats))


@require_http_methods(["GET"])
@admin_required
@store_errors_as_json
def global_stats(request):
    """Selection counts over every save of every administrator."""
    return JsonResponse(split_stats(services.get_all_candidate_stats()))


# ============================================================================
# PUBLIC VIEWER
# ============================================================================

@require_http_methods(["GET"])
@store_errors_as_json
def viewer_index(request):
    """Administrators that have saved picks."""
    return JsonResponse({'users': services.list_viewer_users()})


@require_http_methods(["GET"])
@store_errors_as_json
def viewer_detail(request, user_id):
    """
    One administrator's saves and counts.

    Returns:
        JSON with display_name, history (newest first), list_a / list_b
        counts. An id with no saves returns empty history and zero counts.
    """

    display_name, email = services.display_name_for(user_id)
    history = services.get_user_selection_history(user_id)
    stats = services.get_candidate_stats(user_id)

    return JsonResponse({
        'user_id': user_id,
        'display_name': display_name,
        'email': email,
        'history': [s.to_dict() for s in history],
        **split_stats(stats),
    })
