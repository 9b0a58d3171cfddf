"""Tests for the selection service over the in-memory store."""

import pytest

from selections import services
from selections.exceptions import SelectionValidationError, StoreUnavailable
from selections.utils import LIST_A, LIST_B
from tests.conftest import ADMIN_EMAIL, LIST_A_ROSTER, FailingStore

USER = ADMIN_EMAIL


def test_save_assigns_sequential_orders(memory_store) -> None:
    """Picks are stored with ranks 1..n in the given order."""
    saved = services.save_user_selections(
        USER, [('Bravo 4', LIST_B), ('Alpha 2', LIST_A), ('Alpha 7', LIST_A)], store=memory_store
    )

    assert [(s.selection_order, s.candidate_name) for s in saved] == [
        (1, 'Bravo 4'), (2, 'Alpha 2'), (3, 'Alpha 7'),
    ]
    assert len(memory_store.query_by_user(USER)) == 3


def test_save_rejects_more_than_max(memory_store) -> None:
    """Ten picks are refused before the store is touched."""
    picks = [(name, LIST_A) for name in LIST_A_ROSTER] + [('Bravo 1', LIST_B)]

    with pytest.raises(SelectionValidationError) as exc:
        services.save_user_selections(USER, picks, store=memory_store)

    assert 'Maximum of 9' in exc.value.messages[0]
    assert memory_store.query_all() == []


def test_max_selections_capped_at_highest_rank(memory_store, settings) -> None:
    """A limit above 9 is capped, so a tenth pick never reaches the store."""
    settings.MAX_SELECTIONS = 12
    picks = [(name, LIST_A) for name in LIST_A_ROSTER] + [('Bravo 1', LIST_B)]

    with pytest.raises(SelectionValidationError) as exc:
        services.save_user_selections(USER, picks, store=memory_store)

    assert 'Maximum of 9' in exc.value.messages[0]
    assert services.max_selections_allowed() == 9
    assert memory_store.query_all() == []


def test_save_accepts_exactly_max(memory_store) -> None:
    """Nine picks is the limit, not beyond it."""
    picks = [(name, LIST_A) for name in LIST_A_ROSTER]

    saved = services.save_user_selections(USER, picks, store=memory_store)

    assert [s.selection_order for s in saved] == list(range(1, 10))


def test_save_rejects_empty(memory_store) -> None:
    """An empty save is a validation error."""
    with pytest.raises(SelectionValidationError):
        services.save_user_selections(USER, [], store=memory_store)

    assert memory_store.query_all() == []


@pytest.mark.parametrize('picks, message', [
    ([('Nobody', LIST_A)], 'is not a candidate on List A'),
    ([('Alpha 1', LIST_B)], 'is not a candidate on List B'),
    ([('Alpha 1', 'List C')], 'Unknown list'),
    ([('Alpha 1', LIST_A), ('Alpha 1', LIST_A)], 'selected more than once'),
])
def test_save_rejects_invalid_picks(memory_store, picks, message) -> None:
    """Off-roster, unknown-list and duplicate picks are refused."""
    with pytest.raises(SelectionValidationError) as exc:
        services.save_user_selections(USER, picks, store=memory_store)

    assert any(message in m for m in exc.value.messages)
    assert memory_store.query_all() == []


def test_saves_append_history(memory_store, clock) -> None:
    """Each save adds a session; the newest one is current."""
    services.save_user_selections(USER, [('Alpha 1', LIST_A)], store=memory_store)
    clock.advance(60)
    services.save_user_selections(USER, [('Bravo 2', LIST_B), ('Alpha 3', LIST_A)], store=memory_store)

    history = services.get_user_selection_history(USER, store=memory_store)
    recent = services.get_recent_user_selections(USER, store=memory_store)

    assert [s.selection_count for s in history] == [2, 1]
    assert [s.candidate_name for s in recent] == ['Bravo 2', 'Alpha 3']


def test_recent_selections_empty_for_new_user(memory_store) -> None:
    """A user who never saved has no current picks."""
    assert services.get_recent_user_selections('nobody', store=memory_store) == []


def test_cluster_threshold_comes_from_settings(memory_store, clock, settings) -> None:
    """Widening the window merges saves that were close in time."""
    services.save_user_selections(USER, [('Alpha 1', LIST_A)], store=memory_store)
    clock.advance(1.5)
    services.save_user_selections(USER, [('Alpha 2', LIST_A)], store=memory_store)

    assert len(services.get_user_selection_history(USER, store=memory_store)) == 2

    settings.SESSION_CLUSTER_THRESHOLD_MS = 2000
    assert len(services.get_user_selection_history(USER, store=memory_store)) == 1


def test_delete_one_session(memory_store, clock) -> None:
    """Deleting a group removes exactly its rows."""
    services.save_user_selections(USER, [('Alpha 1', LIST_A), ('Alpha 2', LIST_A)], store=memory_store)
    clock.advance(10)
    services.save_user_selections(USER, [('Bravo 1', LIST_B)], store=memory_store)
    older = services.get_user_selection_history(USER, store=memory_store)[1]

    deleted = services.delete_user_selections(USER, older.group_id, store=memory_store)

    assert deleted == 2
    remaining = services.get_user_selection_history(USER, store=memory_store)
    assert len(remaining) == 1
    assert remaining[0].selections[0].candidate_name == 'Bravo 1'


def test_delete_unknown_session_is_noop(memory_store) -> None:
    """A group that no longer exists is already deleted."""
    services.save_user_selections(USER, [('Alpha 1', LIST_A)], store=memory_store)

    assert services.delete_user_selections(USER, 'no-such-group', store=memory_store) == 0
    assert len(memory_store.query_by_user(USER)) == 1


def test_delete_session_of_other_user_is_noop(memory_store) -> None:
    """Group ids are looked up in the caller's own history only."""
    other = services.save_user_selections('someone-else', [('Alpha 1', LIST_A)], store=memory_store)

    assert services.delete_user_selections(USER, other[0].id, store=memory_store) == 0
    assert len(memory_store.query_by_user('someone-else')) == 1


def test_delete_all(memory_store, clock) -> None:
    """Every row of the user goes, other users keep theirs."""
    services.save_user_selections(USER, [('Alpha 1', LIST_A)], store=memory_store)
    clock.advance(10)
    services.save_user_selections(USER, [('Alpha 2', LIST_A)], store=memory_store)
    services.save_user_selections('someone-else', [('Alpha 3', LIST_A)], store=memory_store)

    assert services.delete_all_user_selections(USER, store=memory_store) == 2
    assert services.get_user_selection_history(USER, store=memory_store) == []
    assert len(memory_store.query_by_user('someone-else')) == 1


def test_patterns_through_history(memory_store, clock) -> None:
    """Repeated saves are found across the stored history."""
    picks = [('Alpha 1', LIST_A), ('Bravo 3', LIST_B)]
    services.save_user_selections(USER, picks, store=memory_store)
    clock.advance(10)
    services.save_user_selections(USER, picks, store=memory_store)
    clock.advance(10)
    services.save_user_selections(USER, list(reversed(picks)), store=memory_store)

    patterns = services.find_identical_selection_patterns(USER, store=memory_store)

    assert len(patterns) == 1
    assert patterns[0].count == 2


def test_user_and_global_stats(memory_store, clock) -> None:
    """Per-user counts only see that user; global counts see everyone."""
    services.save_user_selections(USER, [('Alpha 1', LIST_A), ('Bravo 3', LIST_B)], store=memory_store)
    clock.advance(10)
    services.save_user_selections(USER, [('Alpha 1', LIST_A)], store=memory_store)
    services.save_user_selections('someone-else', [('Alpha 1', LIST_A)], store=memory_store)

    mine = {(s.name, s.list_name): s.selection_count
            for s in services.get_candidate_stats(USER, store=memory_store)}
    everyone = {(s.name, s.list_name): s.selection_count
                for s in services.get_all_candidate_stats(store=memory_store)}

    assert len(mine) == 18
    assert mine[('Alpha 1', LIST_A)] == 2
    assert mine[('Bravo 3', LIST_B)] == 1
    assert everyone[('Alpha 1', LIST_A)] == 3


def test_viewer_users(memory_store) -> None:
    """Known admins get their name, others the generic label."""
    services.save_user_selections(USER, [('Alpha 1', LIST_A)], store=memory_store)
    services.save_user_selections('9b1deb4d-3b7d', [('Alpha 1', LIST_A)], store=memory_store)

    users = services.list_viewer_users(store=memory_store)

    assert users == [
        {'id': '9b1deb4d-3b7d', 'display_name': 'Admin 9b1deb4d', 'email': None},
        {'id': USER, 'display_name': 'Jane Doe', 'email': USER},
    ]


def test_store_failures_propagate() -> None:
    """Backend errors reach the caller unchanged."""
    store = FailingStore()

    with pytest.raises(StoreUnavailable, match='connection refused'):
        services.get_user_selection_history(USER, store=store)

    with pytest.raises(StoreUnavailable):
        services.save_user_selections(USER, [('Alpha 1', LIST_A)], store=store)


def test_validation_runs_before_store_failure() -> None:
    """Invalid saves are rejected even when the store is down."""
    with pytest.raises(SelectionValidationError):
        services.save_user_selections(USER, [], store=FailingStore())
