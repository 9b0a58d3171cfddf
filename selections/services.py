"""
Selection service
=================

Operations behind the admin and viewer endpoints. Each call fetches what it
needs from the record store and hands it to the pure functions in
``selections.utils``.

Persistence policy is append-only: every save inserts a fresh batch and
history accumulates. An administrator's current picks are the newest
reconstructed session. Two concurrent saves by one administrator simply
produce two sessions.

Store failures (StoreUnavailable) propagate unchanged.
"""

from datetime import timedelta
from typing import Dict, List, Optional, Sequence, Tuple
import logging

from django.conf import settings # pyright: ignore[reportMissingModuleSource]

from .exceptions import SelectionValidationError
from .records import CandidateStats, NewSelection, PatternGroup, SelectionRecord, Session
from .store import SelectionStore, get_store
from .utils import (
    LIST_A, LIST_B, MAX_SELECTION_ORDER, candidate_stats, cluster_sessions,
    find_identical_patterns, guess_display_name
)

logger = logging.getLogger(__name__)


def get_rosters() -> Dict[str, List[str]]:
    """Return the configured rosters keyed by list name."""
    return {
        LIST_A: list(settings.CANDIDATE_LIST_A),
        LIST_B: list(settings.CANDIDATE_LIST_B),
    }


def cluster_threshold() -> timedelta:
    return timedelta(milliseconds=settings.SESSION_CLUSTER_THRESHOLD_MS)


def max_selections_allowed() -> int:
    """MAX_SELECTIONS, capped at the highest rank the table accepts."""
    return min(settings.MAX_SELECTIONS, MAX_SELECTION_ORDER)


def validate_picks(picks: Sequence[Tuple[str, str]]) -> None:
    """
    Check a save request against the selection rules.

    Raises:
        SelectionValidationError: nothing picked, too many picks, unknown
            list or candidate, or the same candidate picked twice
    """

    max_selections = max_selections_allowed()

    if not picks:
        raise SelectionValidationError('Select at least one candidate.', code='empty')

    if len(picks) > max_selections:
        raise SelectionValidationError(
            f'Maximum of {max_selections} candidates can be selected.',
            code='too_many',
        )

    rosters = get_rosters()
    errors = []
    seen = set()

    for name, list_name in picks:
        if list_name not in rosters:
            errors.append(f'Unknown list "{list_name}".')
            continue
        if name not in rosters[list_name]:
            errors.append(f'"{name}" is not a candidate on {list_name}.')
            continue
        if (name, list_name) in seen:
            errors.append(f'"{name}" ({list_name}) is selected more than once.')
            continue
        seen.add((name, list_name))

    if errors:
        raise SelectionValidationError(errors, code='invalid')


def save_user_selections(
    user_id: str,
    picks: Sequence[Tuple[str, str]],
    store: Optional[SelectionStore] = None
) -> List[SelectionRecord]:
    """
    Append a new save for ``user_id``.

    Args:
        user_id: Administrator identifier
        picks: (candidate_name, list_name) pairs in priority order
        store: Record store (default: configured store)

    Returns:
        The inserted rows, selection_order 1..n in pick order
    """

    validate_picks(picks)
    store = store or get_store()

    rows = [
        NewSelection(
            user_id=user_id,
            candidate_name=name,
            list_name=list_name,
            selection_order=index + 1,
        )
        for index, (name, list_name) in enumerate(picks)
    ]
    inserted = store.insert(rows)

    logger.info(f"Saved {len(inserted)} selections for {user_id}")
    return sorted(inserted, key=lambda r: r.selection_order)


def get_user_selection_history(
    user_id: str,
    store: Optional[SelectionStore] = None
) -> List[Session]:
    """All save events of ``user_id``, newest first."""
    store = store or get_store()
    return cluster_sessions(store.query_by_user(user_id), cluster_threshold())


def get_recent_user_selections(
    user_id: str,
    store: Optional[SelectionStore] = None
) -> List[SelectionRecord]:
    """Picks of the newest save, or [] if the user never saved."""
    history = get_user_selection_history(user_id, store)
    if history:
        return history[0].selections
    return []


def delete_user_selections(
    user_id: str,
    group_id: str,
    store: Optional[SelectionStore] = None
) -> int:
    """
    Delete one save event.

    An unknown ``group_id`` means the rows are already gone; that is
    reported as zero deletions, not an error.

    Returns:
        Number of rows deleted
    """

    store = store or get_store()
    history = get_user_selection_history(user_id, store)
    session = next((s for s in history if s.group_id == group_id), None)

    if session is None or not session.selections:
        logger.info(f"No selections found for group {group_id} of {user_id}")
        return 0

    deleted = store.delete_by_ids([s.id for s in session.selections])
    logger.info(f"Deleted group {group_id} ({deleted} rows) for {user_id}")
    return deleted


def delete_all_user_selections(
    user_id: str,
    store: Optional[SelectionStore] = None
) -> int:
    """Delete every row of ``user_id``; returns the number deleted."""
    store = store or get_store()
    deleted = store.delete_by_user(user_id)
    logger.info(f"Deleted all {deleted} selections for {user_id}")
    return deleted


def find_identical_selection_patterns(
    user_id: str,
    store: Optional[SelectionStore] = None
) -> List[PatternGroup]:
    return find_identical_patterns(get_user_selection_history(user_id, store))


def get_candidate_stats(
    user_id: str,
    store: Optional[SelectionStore] = None
) -> List[CandidateStats]:
    """Per-candidate counts over every save of ``user_id``."""
    store = store or get_store()
    rosters = get_rosters()
    return candidate_stats(rosters[LIST_A], rosters[LIST_B], store.query_by_user(user_id))


def get_all_candidate_stats(store: Optional[SelectionStore] = None) -> List[CandidateStats]:
    """Per-candidate counts over every save of every administrator."""
    store = store or get_store()
    rosters = get_rosters()
    return candidate_stats(rosters[LIST_A], rosters[LIST_B], store.query_all())


def get_unique_user_ids(store: Optional[SelectionStore] = None) -> List[str]:
    store = store or get_store()
    return sorted(set(store.query_distinct_user_ids()))


def display_name_for(user_id: str) -> Tuple[str, Optional[str]]:
    return guess_display_name(user_id, settings.ADMIN_ALLOWLIST)


def list_viewer_users(store: Optional[SelectionStore] = None) -> List[Dict]:
    """
    Administrators that have saved picks, for the public viewer.

    Returns:
        [{'id': ..., 'display_name': ..., 'email': ... or None}, ...]
    """

    users = []
    for user_id in get_unique_user_ids(store):
        display_name, email = display_name_for(user_id)
        users.append({
            'id': user_id,
            'display_name': display_name,
            'email': email,
        })
    return users
