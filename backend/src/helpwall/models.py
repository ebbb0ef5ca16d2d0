"""
Data models and status constants for the HelpWall backend.
Based on the task lifecycle: Open → (Pending review assignment) → In progress → Completed → Thanked
"""
from decimal import Decimal
from typing import Any, Dict


class TaskStatus:
    """Stored task lifecycle statuses."""
    OPEN = 'open'
    IN_PROGRESS = 'in_progress'
    COMPLETED = 'completed'


class TaskPhase:
    """
    Lifecycle phases as seen by clients.
    PENDING_REVIEW_ASSIGNMENT is derived from an open review task that has applicants.
    """
    OPEN = 'OPEN'
    PENDING_REVIEW_ASSIGNMENT = 'PENDING_REVIEW_ASSIGNMENT'
    IN_PROGRESS = 'IN_PROGRESS'
    COMPLETED = 'COMPLETED'


class NotifyTarget:
    """Audience for the new-task notification."""
    ALL = 'all'
    PERSONAL = 'personal'  # Members near the task location
    GROUP = 'group'

    CHOICES = (ALL, PERSONAL, GROUP)


class LedgerSide:
    """Each settlement writes exactly one entry per side."""
    DEBIT = 'DEBIT'
    CREDIT = 'CREDIT'


# Supported expected durations, in minutes
EXPECTED_MINUTES_OPTIONS = (5, 10, 15, 20, 25, 30)

# One time credit per five minutes of expected help
MINUTES_PER_CREDIT = 5


# Stored status -> statuses it may move to
ALLOWED_TRANSITIONS = {
    TaskStatus.OPEN: {TaskStatus.IN_PROGRESS},
    TaskStatus.IN_PROGRESS: {TaskStatus.COMPLETED},
    TaskStatus.COMPLETED: set(),
}


def can_transition(source: str, target: str) -> bool:
    return target in ALLOWED_TRANSITIONS.get(source, set())


def credit_for_minutes(expected_minutes: int) -> Decimal:
    """Time credit earned for a task of the given expected duration."""
    return Decimal(expected_minutes) / Decimal(MINUTES_PER_CREDIT)


def task_phase(task: Dict[str, Any]) -> str:
    """
    Derive the client-facing phase of a task.

    Args:
        task: Task item as stored in DynamoDB

    Returns:
        TaskPhase constant
    """
    status = task.get('status')
    if status == TaskStatus.COMPLETED:
        return TaskPhase.COMPLETED
    if status == TaskStatus.IN_PROGRESS:
        return TaskPhase.IN_PROGRESS
    if task.get('requiresReview') and task.get('applicants'):
        return TaskPhase.PENDING_REVIEW_ASSIGNMENT
    return TaskPhase.OPEN
