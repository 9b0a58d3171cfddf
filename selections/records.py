"""
Plain value types passed between the record store, the history
reconstruction functions and the views.

These are deliberately free of the ORM so the clustering, pattern and
statistics code can run over rows from any store.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List


@dataclass(frozen=True)
class NewSelection:
    """A pick about to be inserted; the store assigns id and created_at."""
    user_id: str
    candidate_name: str
    list_name: str
    selection_order: int


@dataclass(frozen=True)
class SelectionRecord:
    """One persisted pick."""
    id: str
    user_id: str
    candidate_name: str
    list_name: str
    selection_order: int
    created_at: datetime

    def to_dict(self):
        return {
            'id': self.id,
            'candidate_name': self.candidate_name,
            'list_name': self.list_name,
            'selection_order': self.selection_order,
        }


@dataclass
class Session:
    """
    One reconstructed save event.

    Attributes:
        group_id: Id of the earliest record of the cluster
        timestamp: created_at of the earliest record
        selections: Members ordered by selection_order
    """
    group_id: str
    timestamp: datetime
    selections: List[SelectionRecord] = field(default_factory=list)

    @property
    def selection_count(self):
        return len(self.selections)

    def to_dict(self):
        return {
            'group_id': self.group_id,
            'timestamp': self.timestamp.isoformat(),
            'selection_count': self.selection_count,
            'selections': [s.to_dict() for s in self.selections],
        }


@dataclass
class PatternGroup:
    """Identical session contents saved more than once."""
    pattern_id: str
    count: int
    selections: List[SelectionRecord] = field(default_factory=list)

    def to_dict(self):
        return {
            'pattern_id': self.pattern_id,
            'count': self.count,
            'selections': [s.to_dict() for s in self.selections],
        }


@dataclass(frozen=True)
class CandidateStats:
    name: str
    list_name: str
    selection_count: int

    def to_dict(self):
        return {
            'name': self.name,
            'list_name': self.list_name,
            'selection_count': self.selection_count,
        }
