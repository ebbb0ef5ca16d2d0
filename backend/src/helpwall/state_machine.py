"""
Task State Machine.

Lifecycle:
    open ──accept_direct──────────────────────────────► in_progress ──complete──► completed
    open ──apply (review tasks)──► PENDING_REVIEW_ASSIGNMENT ──approve──► in_progress

Only open tasks can be edited or deleted. Completion lives in settlement.py
because it also moves time credit.

Each operation reads the task first to reject obviously invalid requests with
a precise error, then performs a single conditional write. The read is only
advisory: when the store rejects the write, the task is read again and the
same checks decide which error the caller receives.
"""
from typing import Any, Dict, Optional
from .errors import (
    AlreadyApplied,
    CannotHelpOwnTask,
    NotApplicant,
    NotOwner,
    ReviewRequired,
    TaskAlreadyAssigned,
    TaskNotFound,
    TaskNotOpen,
    TaskNotOpenForApplications,
    ValidationError,
)
from .logging import logger
from .models import TaskStatus, can_transition, credit_for_minutes
from .utils import utc_timestamp
from .validation import require_text, validate_expected_minutes
from . import task_repository


def _load(task_id: str) -> Dict[str, Any]:
    task = task_repository.get_task(task_id)
    if task is None:
        raise TaskNotFound(f'Task {task_id} not found')
    return task


def _check_apply(task: Dict[str, Any], candidate_id: str) -> None:
    if not task.get('requiresReview') or task.get('status') != TaskStatus.OPEN:
        raise TaskNotOpenForApplications('Task is not accepting applications')
    if task.get('ownerId') == candidate_id:
        raise CannotHelpOwnTask('Owners cannot apply to their own task')
    if candidate_id in (task.get('applicants') or []):
        raise AlreadyApplied('You have already applied to this task')


def _check_approve(task: Dict[str, Any], owner_id: str, candidate_id: str) -> None:
    if task.get('ownerId') != owner_id:
        raise NotOwner('Only the task owner can approve applicants')
    if not task.get('requiresReview'):
        raise TaskNotOpenForApplications('Task does not take applications')
    if not can_transition(task.get('status'), TaskStatus.IN_PROGRESS):
        raise TaskAlreadyAssigned('Task has already been assigned')
    if candidate_id not in (task.get('applicants') or []):
        raise NotApplicant('Candidate has not applied to this task')


def _check_accept(task: Dict[str, Any], helper_id: str) -> None:
    if task.get('requiresReview'):
        raise ReviewRequired('Task requires owner approval; apply instead')
    if task.get('ownerId') == helper_id:
        raise CannotHelpOwnTask('Owners cannot accept their own task')
    if not can_transition(task.get('status'), TaskStatus.IN_PROGRESS):
        raise TaskAlreadyAssigned('Task has already been assigned')


def _check_owner_open(task: Dict[str, Any], caller_id: str) -> None:
    if task.get('ownerId') != caller_id:
        raise NotOwner('Only the task owner can change this task')
    if task.get('status') != TaskStatus.OPEN:
        raise TaskNotOpen('Task can only be changed while it is open')


def apply(task_id: str, candidate_id: str) -> Dict[str, Any]:
    """
    Add a candidate helper to a review-required task.

    A repeat application raises AlreadyApplied and leaves the list unchanged.

    Returns:
        The updated task
    """
    _check_apply(_load(task_id), candidate_id)

    updated = task_repository.add_applicant(task_id, candidate_id, utc_timestamp())
    if updated is None:
        _check_apply(_load(task_id), candidate_id)
        raise TaskNotOpenForApplications('Task is not accepting applications')

    logger.info(f"Task {task_id}: {candidate_id} applied ({len(updated.get('applicants', []))} applicants)")
    return updated


def approve(task_id: str, owner_id: str, candidate_id: str) -> Dict[str, Any]:
    """
    Assign one applicant as helper. The choice is final; other applicants stay
    recorded but are never converted to an assignment.
    """
    _check_approve(_load(task_id), owner_id, candidate_id)

    updated = task_repository.assign_applicant(task_id, owner_id, candidate_id, utc_timestamp())
    if updated is None:
        _check_approve(_load(task_id), owner_id, candidate_id)
        raise TaskAlreadyAssigned('Task has already been assigned')

    logger.info(f"Task {task_id}: owner approved applicant {candidate_id}, now {TaskStatus.IN_PROGRESS}")
    return updated


def accept_direct(task_id: str, helper_id: str) -> Dict[str, Any]:
    """
    Claim a direct-accept task. Of N concurrent callers exactly one wins;
    the others receive TaskAlreadyAssigned.
    """
    _check_accept(_load(task_id), helper_id)

    updated = task_repository.assign_direct(task_id, helper_id, utc_timestamp())
    if updated is None:
        logger.warning(f"Task {task_id}: accept by {helper_id} lost the assignment race")
        _check_accept(_load(task_id), helper_id)
        raise TaskAlreadyAssigned('Task has already been assigned')

    logger.info(f"Task {task_id}: accepted by {helper_id}, now {TaskStatus.IN_PROGRESS}")
    return updated


def delete(task_id: str, caller_id: str) -> None:
    """Remove an open task. No ledger or gratitude state exists yet to cascade."""
    _check_owner_open(_load(task_id), caller_id)

    if not task_repository.delete_open_task(task_id, caller_id):
        _check_owner_open(_load(task_id), caller_id)
        raise TaskNotOpen('Task can only be changed while it is open')

    logger.info(f"Task {task_id}: deleted by owner")


def edit(
    task_id: str,
    caller_id: str,
    description: Optional[str] = None,
    image_url: Optional[str] = None,
    expected_minutes: Optional[int] = None
) -> Dict[str, Any]:
    """
    Edit an open task's description, image or expected time.
    Changing the expected time recomputes its credit value.
    """
    fields = {}
    if description is not None:
        fields['description'] = require_text(description, 'description')
    if image_url is not None:
        fields['imageUrl'] = require_text(image_url, 'image_url')
    if expected_minutes is not None:
        minutes = validate_expected_minutes(expected_minutes)
        fields['expectedMinutes'] = minutes
        fields['creditValue'] = credit_for_minutes(minutes)
    if not fields:
        raise ValidationError('Nothing to update')

    _check_owner_open(_load(task_id), caller_id)

    updated = task_repository.update_open_fields(task_id, caller_id, fields, utc_timestamp())
    if updated is None:
        _check_owner_open(_load(task_id), caller_id)
        raise TaskNotOpen('Task can only be changed while it is open')

    logger.info(f"Task {task_id}: updated {', '.join(sorted(fields))}")
    return updated
