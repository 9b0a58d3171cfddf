"""
Record store for selection rows
===============================

The rest of the app only talks to persistence through ``SelectionStore``:

- insert(records)              batch insert; store assigns id + created_at
- delete_by_ids(ids)           remove specific rows
- delete_by_user(user_id)      remove every row of one administrator
- query_by_user(user_id)       rows of one administrator, any order
- query_all()                  every row (global statistics)
- query_distinct_user_ids()    administrators that have saved anything

``DjangoSelectionStore`` is the production adapter (Django ORM on the
database configured by DATABASE_URL). ``InMemorySelectionStore`` keeps rows
in a dict and takes an injectable clock, which makes timestamp-sensitive
behaviour easy to exercise.

Backend failures are re-raised as StoreUnavailable with the original
message. Nothing here retries.
"""

import logging
import uuid
from typing import Callable, Dict, Iterable, List, Optional, Sequence

from django.conf import settings # pyright: ignore[reportMissingModuleSource]
from django.db import DatabaseError, transaction # pyright: ignore[reportMissingModuleSource]
from django.utils import timezone # pyright: ignore[reportMissingModuleSource]
from django.utils.module_loading import import_string # pyright: ignore[reportMissingModuleSource]

from .exceptions import StoreUnavailable
from .models import Selection
from .records import NewSelection, SelectionRecord

logger = logging.getLogger(__name__)


class SelectionStore:
    """Interface implemented by every record store."""

    def insert(self, records: Sequence[NewSelection]) -> List[SelectionRecord]:
        raise NotImplementedError

    def delete_by_ids(self, ids: Iterable[str]) -> int:
        raise NotImplementedError

    def delete_by_user(self, user_id: str) -> int:
        raise NotImplementedError

    def query_by_user(self, user_id: str) -> List[SelectionRecord]:
        raise NotImplementedError

    def query_all(self) -> List[SelectionRecord]:
        raise NotImplementedError

    def query_distinct_user_ids(self) -> List[str]:
        raise NotImplementedError


def _to_record(row: Selection) -> SelectionRecord:
    return SelectionRecord(
        id=str(row.id),
        user_id=row.user_id,
        candidate_name=row.candidate_name,
        list_name=row.list_name,
        selection_order=row.selection_order,
        created_at=row.created_at,
    )


class DjangoSelectionStore(SelectionStore):
    """Store backed by the ``Selection`` model."""

    def insert(self, records):
        if not records:
            return []
        rows = [
            Selection(
                user_id=r.user_id,
                candidate_name=r.candidate_name,
                list_name=r.list_name,
                selection_order=r.selection_order,
            )
            for r in records
        ]
        try:
            with transaction.atomic():
                created = Selection.objects.bulk_create(rows)
        except DatabaseError as e:
            logger.error(f"Error inserting selections: {str(e)}")
            raise StoreUnavailable(str(e)) from e
        return [_to_record(row) for row in created]

    def delete_by_ids(self, ids):
        ids = list(ids)
        if not ids:
            return 0
        try:
            deleted, _ = Selection.objects.filter(id__in=ids).delete()
        except DatabaseError as e:
            logger.error(f"Error deleting selections: {str(e)}")
            raise StoreUnavailable(str(e)) from e
        return deleted

    def delete_by_user(self, user_id):
        try:
            deleted, _ = Selection.objects.filter(user_id=user_id).delete()
        except DatabaseError as e:
            logger.error(f"Error deleting all selections: {str(e)}")
            raise StoreUnavailable(str(e)) from e
        return deleted

    def query_by_user(self, user_id):
        try:
            return [_to_record(row) for row in Selection.objects.filter(user_id=user_id)]
        except DatabaseError as e:
            logger.error(f"Error fetching user selections: {str(e)}")
            raise StoreUnavailable(str(e)) from e

    def query_all(self):
        try:
            return [_to_record(row) for row in Selection.objects.all()]
        except DatabaseError as e:
            logger.error(f"Error fetching all selections: {str(e)}")
            raise StoreUnavailable(str(e)) from e

    def query_distinct_user_ids(self):
        try:
            return list(
                Selection.objects.order_by('user_id')
                .values_list('user_id', flat=True)
                .distinct()
            )
        except DatabaseError as e:
            logger.error(f"Error fetching user IDs: {str(e)}")
            raise StoreUnavailable(str(e)) from e


class InMemorySelectionStore(SelectionStore):
    """
    Dict-backed store.

    Args:
        records: Rows to start with
        clock: Zero-argument callable returning the created_at for the next
            inserted batch (defaults to django.utils.timezone.now)
    """

    def __init__(self, records: Optional[Iterable[SelectionRecord]] = None,
                 clock: Optional[Callable] = None):
        self._rows: Dict[str, SelectionRecord] = {r.id: r for r in (records or [])}
        self.clock = clock or timezone.now

    def insert(self, records):
        created_at = self.clock()
        inserted = []
        for r in records:
            record = SelectionRecord(
                id=str(uuid.uuid4()),
                user_id=r.user_id,
                candidate_name=r.candidate_name,
                list_name=r.list_name,
                selection_order=r.selection_order,
                created_at=created_at,
            )
            self._rows[record.id] = record
            inserted.append(record)
        return inserted

    def delete_by_ids(self, ids):
        deleted = 0
        for record_id in ids:
            if self._rows.pop(str(record_id), None) is not None:
                deleted += 1
        return deleted

    def delete_by_user(self, user_id):
        doomed = [r.id for r in self._rows.values() if r.user_id == user_id]
        return self.delete_by_ids(doomed)

    def query_by_user(self, user_id):
        return [r for r in self._rows.values() if r.user_id == user_id]

    def query_all(self):
        return list(self._rows.values())

    def query_distinct_user_ids(self):
        return sorted({r.user_id for r in self._rows.values()})


def get_store() -> SelectionStore:
    """Instantiate the store class named by settings.SELECTION_STORE."""
    return import_string(settings.SELECTION_STORE)()
