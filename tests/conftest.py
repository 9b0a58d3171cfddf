from datetime import datetime, timedelta, timezone

import pytest

from selections.exceptions import StoreUnavailable
from selections.records import SelectionRecord
from selections.store import InMemorySelectionStore, SelectionStore

LIST_A_ROSTER = [f'Alpha {i}' for i in range(1, 10)]
LIST_B_ROSTER = [f'Bravo {i}' for i in range(1, 10)]

ADMIN_EMAIL = 'jane.doe@example.com'

T0 = datetime(2024, 5, 1, 12, 0, 0, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def tracker_settings(settings):
    settings.SECURE_SSL_REDIRECT = False
    settings.MAX_SELECTIONS = 9
    settings.SESSION_CLUSTER_THRESHOLD_MS = 1000
    settings.CANDIDATE_LIST_A = list(LIST_A_ROSTER)
    settings.CANDIDATE_LIST_B = list(LIST_B_ROSTER)
    settings.ADMIN_ALLOWLIST = [ADMIN_EMAIL, 'john.smith@example.com']
    settings.SELECTION_STORE = 'selections.store.DjangoSelectionStore'
    return settings


class FakeClock:
    """Callable clock for InMemorySelectionStore."""

    def __init__(self, start=T0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += timedelta(seconds=seconds)


class FailingStore(SelectionStore):
    """Every operation fails the way an unreachable backend would."""

    def _fail(self, *args, **kwargs):
        raise StoreUnavailable('connection refused')

    insert = delete_by_ids = delete_by_user = _fail
    query_by_user = query_all = query_distinct_user_ids = _fail


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    return InMemorySelectionStore(clock=clock)


_counter = [0]


def make_record(order, name, list_name, created_at, user_id='admin-1', record_id=None):
    if record_id is None:
        _counter[0] += 1
        record_id = f'row-{_counter[0]:05d}'
    return SelectionRecord(
        id=record_id,
        user_id=user_id,
        candidate_name=name,
        list_name=list_name,
        selection_order=order,
        created_at=created_at,
    )


def at(ms):
    """T0 shifted by ``ms`` milliseconds."""
    return T0 + timedelta(milliseconds=ms)
