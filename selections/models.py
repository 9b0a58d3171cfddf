"""
Database models for the Election Tracker
========================================

Defines the data structure for:
- Selection: one candidate picked by one administrator in one save

A save inserts one row per picked candidate, all in a single batch. The
table carries no save/session identifier; save events are reconstructed
from ``created_at`` proximity (see ``selections.utils.cluster_sessions``).
"""

from django.db import models # pyright: ignore[reportMissingModuleSource]
from django.core.validators import MinValueValidator, MaxValueValidator, MaxLengthValidator # pyright: ignore[reportMissingModuleSource]
import uuid

from .utils import LIST_CHOICES, MAX_SELECTION_ORDER


class Selection(models.Model):
    """
    A single candidate pick.

    Attributes:
        id: UUID primary key, assigned on insert
        user_id: Identifier of the administrator who made the pick
        candidate_name: Name as it appears on the roster
        list_name: Roster the candidate belongs to
        selection_order: Priority rank within its save (1 = first choice)
        created_at: Insert timestamp, shared (to the millisecond) by a batch
    """

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    user_id = models.CharField(
        max_length=255,
        db_index=True,
        help_text="Identifier of the administrator who made the pick"
    )
    candidate_name = models.CharField(
        max_length=200,
        validators=[MaxLengthValidator(200)],
        help_text="Candidate name, must match a roster entry"
    )
    list_name = models.CharField(
        max_length=10,
        choices=LIST_CHOICES,
        help_text="Roster the candidate was picked from"
    )
    selection_order = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(MAX_SELECTION_ORDER)],
        help_text="Priority rank within the save (1-9)"
    )
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['-created_at', 'selection_order']
        indexes = [
            models.Index(fields=['user_id', 'created_at'], name='selection_user_created_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(selection_order__gte=1) & models.Q(selection_order__lte=MAX_SELECTION_ORDER),
                name='selection_order_between_1_and_9',
            ),
        ]

    def __str__(self):
        return f"#{self.selection_order} {self.candidate_name} ({self.list_name}) by {self.user_id}"
