"""
Selection History Reconstruction & Utility Functions
====================================================

Core logic over flat selection rows:
- Session clustering (rebuild save events from created_at proximity)
- Pattern matching (save contents repeated across a user's history)
- Statistics aggregation (per-candidate selection counts)
- Display names for administrator identifiers

The store keeps one row per picked candidate and no save identifier, so a
"save" is recovered as a cluster of rows whose timestamps sit within a short
window of the cluster's newest row. Clustering is a single greedy pass over
rows newest-first, not a transitive closure: a row is compared with cluster
anchors only, never with its nearest neighbour.

All functions here are pure; fetching rows is the caller's job.
"""

from collections import defaultdict
from datetime import timedelta
from typing import Dict, Iterable, List, Optional, Sequence, Tuple
import logging
import re

from .records import CandidateStats, PatternGroup, SelectionRecord, Session

logger = logging.getLogger(__name__)

LIST_A = 'List A'
LIST_B = 'List B'
LIST_CHOICES = [(LIST_A, LIST_A), (LIST_B, LIST_B)]

# Highest selection_order the table accepts
MAX_SELECTION_ORDER = 9

CLUSTER_THRESHOLD = timedelta(seconds=1)


def cluster_sessions(
    records: Iterable[SelectionRecord],
    threshold: Optional[timedelta] = None
) -> List[Session]:
    """
    Group one user's selection rows into save events.

    Rows are scanned newest-first (ties by id, so input order never matters).
    Each row joins the first open cluster whose anchor timestamp is less
    than ``threshold`` away; otherwise it anchors a new cluster. The anchor
    is therefore a cluster's newest row.

    Args:
        records: All rows of one user, in any order
        threshold: Clustering window (default: 1 second)

    Returns:
        Sessions newest-first. Each session is identified by the id of its
        earliest row, stamped with that row's created_at, and lists members
        by selection_order.
    """

    if threshold is None:
        threshold = CLUSTER_THRESHOLD

    ordered = sorted(records, key=lambda r: (r.created_at, r.id), reverse=True)

    clusters: List[List[SelectionRecord]] = []
    for record in ordered:
        for cluster in clusters:
            if abs(record.created_at - cluster[0].created_at) < threshold:
                cluster.append(record)
                break
        else:
            clusters.append([record])

    sessions = []
    for cluster in clusters:
        earliest = min(cluster, key=lambda r: (r.created_at, r.id))
        sessions.append(Session(
            group_id=earliest.id,
            timestamp=earliest.created_at,
            selections=sorted(cluster, key=lambda r: (r.selection_order, r.id)),
        ))

    # Newest first; equal timestamps fall back to group_id ascending
    sessions.sort(key=lambda s: s.group_id)
    sessions.sort(key=lambda s: s.timestamp, reverse=True)

    logger.debug(f"Clustered {len(ordered)} rows into {len(sessions)} sessions")
    return sessions


def pattern_key(selections: Sequence[SelectionRecord]) -> str:
    """
    Content signature of a session.

    Example: "1:Alice:List A|2:Bob:List B"
    """
    ordered = sorted(selections, key=lambda s: s.selection_order)
    return '|'.join(
        f"{s.selection_order}:{s.candidate_name}:{s.list_name}" for s in ordered
    )


def find_identical_patterns(sessions: Sequence[Session]) -> List[PatternGroup]:
    """
    Find session contents a user saved more than once.

    Two sessions match only if candidates, lists and ranks are all equal;
    the same candidates in another order are a different pattern.

    Args:
        sessions: Output of cluster_sessions()

    Returns:
        Patterns with count >= 2, most repeated first. Ties keep the order
        in which each pattern first appears in ``sessions``.
    """

    if len(sessions) <= 1:
        return []

    counts: Dict[str, int] = {}
    first_seen: Dict[str, List[SelectionRecord]] = {}

    for session in sessions:
        key = pattern_key(session.selections)
        if not key:
            continue
        if key not in counts:
            counts[key] = 0
            first_seen[key] = sorted(session.selections, key=lambda s: s.selection_order)
        counts[key] += 1

    patterns = [
        PatternGroup(pattern_id=key, count=count, selections=first_seen[key])
        for key, count in counts.items()
        if count > 1
    ]
    patterns.sort(key=lambda p: p.count, reverse=True)
    return patterns


def candidate_stats(
    list_a: Sequence[str],
    list_b: Sequence[str],
    records: Iterable[SelectionRecord]
) -> List[CandidateStats]:
    """
    Count how often each roster candidate was picked.

    Every row counts once regardless of its rank, and every historical save
    counts, not just the latest. Rows naming someone who is not on the
    matching roster are ignored.

    Args:
        list_a: List A roster, in display order
        list_b: List B roster, in display order
        records: Rows in scope (one user or everyone)

    Returns:
        One entry per roster candidate, List A first, zero if never picked
    """

    counts = defaultdict(int)
    for record in records:
        counts[(record.candidate_name, record.list_name)] += 1

    stats = [CandidateStats(name, LIST_A, counts[(name, LIST_A)]) for name in list_a]
    stats += [CandidateStats(name, LIST_B, counts[(name, LIST_B)]) for name in list_b]
    return stats


def guess_display_name(
    user_id: str,
    known_identities: Iterable[str]
) -> Tuple[str, Optional[str]]:
    """
    Guess a human label for an administrator identifier.

    An identity equal to ``user_id`` (case-insensitive) wins. Otherwise the
    first 8 characters of ``user_id`` are compared with each known
    identity (case-insensitive): it matches if the identity contains them,
    or if they contain the identity's own first 8 characters. The matched
    identity's local part ("jane.doe" in "jane.doe@example.com") becomes the
    label, split on ".", "_" and "-" and title-cased.

    Args:
        user_id: Identifier stored on selection rows
        known_identities: Email-like administrator identities

    Returns:
        (display_name, matched_identity). Unknown ids give
        ("Admin <first 8 chars>", None).
    """

    if not user_id:
        return 'Admin', None

    identities = [i.strip() for i in known_identities if i.strip()]
    short_id = user_id[:8].lower()

    # Exact identity first, then the 8-character prefix
    matched = next((i for i in identities if i.lower() == user_id.strip().lower()), None)
    if matched is None:
        matched = next(
            (i for i in identities if short_id in i.lower() or i.lower()[:8] in short_id),
            None,
        )

    if matched is None:
        return f"Admin {short_id}", None

    parts = [p for p in re.split(r'[._-]', matched.split('@')[0]) if p]
    if not parts:
        return matched, matched
    return ' '.join(p[:1].upper() + p[1:].lower() for p in parts), matched
