"""Tests for the ORM-backed record store."""

from datetime import timedelta
from unittest.mock import patch

import pytest
from django.db import DatabaseError
from django.db.models import F

from selections.exceptions import StoreUnavailable
from selections.models import Selection
from selections.records import NewSelection
from selections.store import DjangoSelectionStore, InMemorySelectionStore, get_store
from selections.utils import LIST_A, LIST_B, MAX_SELECTION_ORDER

pytestmark = pytest.mark.django_db


def _picks(user_id, *names):
    return [NewSelection(user_id, name, 'List A', i + 1) for i, name in enumerate(names)]


def test_insert_assigns_id_and_timestamp() -> None:
    """The store fills in id and created_at for every row of the batch."""
    store = DjangoSelectionStore()

    inserted = store.insert(_picks('u1', 'Alpha 1', 'Alpha 2'))

    assert len(inserted) == 2
    assert all(r.id and r.created_at for r in inserted)
    assert abs(inserted[1].created_at - inserted[0].created_at) < timedelta(seconds=1)
    assert Selection.objects.count() == 2


def test_insert_nothing() -> None:
    """An empty batch is a no-op."""
    assert DjangoSelectionStore().insert([]) == []


def test_query_by_user_filters() -> None:
    """Only the requested user's rows come back."""
    store = DjangoSelectionStore()
    store.insert(_picks('u1', 'Alpha 1'))
    store.insert(_picks('u2', 'Alpha 2', 'Alpha 3'))

    rows = store.query_by_user('u2')

    assert sorted(r.candidate_name for r in rows) == ['Alpha 2', 'Alpha 3']
    assert len(store.query_all()) == 3


def test_delete_by_ids_and_user() -> None:
    """Targeted and per-user deletes report how many rows went."""
    store = DjangoSelectionStore()
    first = store.insert(_picks('u1', 'Alpha 1', 'Alpha 2'))
    store.insert(_picks('u2', 'Alpha 3'))

    assert store.delete_by_ids([first[0].id]) == 1
    assert store.delete_by_ids([first[0].id]) == 0
    assert store.delete_by_ids([]) == 0
    assert store.delete_by_user('u1') == 1
    assert store.query_distinct_user_ids() == ['u2']


def test_distinct_user_ids() -> None:
    """Each user appears once, sorted."""
    store = DjangoSelectionStore()
    store.insert(_picks('zed', 'Alpha 1', 'Alpha 2'))
    store.insert(_picks('amy', 'Alpha 3'))

    assert store.query_distinct_user_ids() == ['amy', 'zed']


def test_rows_keep_database_timestamps() -> None:
    """Timestamps moved in the database are what the store reports."""
    store = DjangoSelectionStore()
    inserted = store.insert(_picks('u1', 'Alpha 1'))
    Selection.objects.update(created_at=F('created_at') - timedelta(minutes=5))

    row = store.query_by_user('u1')[0]

    assert inserted[0].created_at - row.created_at == timedelta(minutes=5)


def test_database_errors_become_store_unavailable() -> None:
    """Backend failures keep their original message."""
    store = DjangoSelectionStore()

    with patch.object(Selection.objects, 'filter', side_effect=DatabaseError('connection refused')):
        with pytest.raises(StoreUnavailable, match='connection refused'):
            store.query_by_user('u1')
        with pytest.raises(StoreUnavailable, match='connection refused'):
            store.delete_by_user('u1')


def test_get_store_uses_setting(settings) -> None:
    """The configured dotted path picks the store class."""
    assert isinstance(get_store(), DjangoSelectionStore)

    settings.SELECTION_STORE = 'selections.store.InMemorySelectionStore'
    assert isinstance(get_store(), InMemorySelectionStore)


def test_model_uses_shared_list_names_and_rank_limit() -> None:
    """The table accepts exactly the two roster names and ranks up to 9."""
    assert Selection._meta.get_field('list_name').choices == [(LIST_A, LIST_A), (LIST_B, LIST_B)]

    with pytest.raises(StoreUnavailable):
        DjangoSelectionStore().insert([NewSelection('u1', 'Alpha 1', LIST_A, MAX_SELECTION_ORDER + 1)])
    assert Selection.objects.count() == 0
