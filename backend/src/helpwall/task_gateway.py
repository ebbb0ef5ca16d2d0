"""
Task Creation Gateway.
Validates a new help request, stores it as an open task, then forwards a
notification request. Notification is informational: its failure never undoes
the task creation.
"""
import uuid
from typing import Any, Dict, Optional
from .errors import ValidationError
from .logging import logger
from .models import NotifyTarget, TaskStatus, credit_for_minutes
from .utils import utc_timestamp
from .validation import (
    require_text,
    validate_expected_minutes,
    validate_location,
    validate_notify_target,
)
from . import notifier, task_repository


def create_task(
    owner_id: str,
    title: str,
    description: str,
    location: Dict[str, Any],
    expected_minutes: int,
    requires_review: bool = False,
    notify_target: str = NotifyTarget.PERSONAL,
    image_url: Optional[str] = None
) -> Dict[str, Any]:
    """
    Create a help request.

    Args:
        owner_id: Authenticated requester
        title: Short title, must not be empty
        description: Free text, may be empty
        location: {lat, lng}
        expected_minutes: One of EXPECTED_MINUTES_OPTIONS
        requires_review: True to vet applicants before assignment
        notify_target: Who the dispatcher should notify
        image_url: Optional picture of the request

    Returns:
        {'task': stored task, 'notified': recipients count}
    """
    title = require_text(title, 'title')
    if description is not None and not isinstance(description, str):
        raise ValidationError('description must be text')
    minutes = validate_expected_minutes(expected_minutes)
    coords = validate_location(location)
    notify_target = validate_notify_target(notify_target)
    if not isinstance(requires_review, bool):
        raise ValidationError('requires_review must be a boolean')

    timestamp = utc_timestamp()
    task = {
        'taskId': str(uuid.uuid4()),
        'ownerId': owner_id,
        'title': title,
        'description': (description or '').strip(),
        'lat': coords['lat'],
        'lng': coords['lng'],
        'expectedMinutes': minutes,
        'creditValue': credit_for_minutes(minutes),
        'requiresReview': requires_review,
        'applicants': [],
        'status': TaskStatus.OPEN,
        'createdAt': timestamp,
        'updatedAt': timestamp
    }
    if image_url:
        task['imageUrl'] = require_text(image_url, 'image_url')

    task_repository.put_new_task(task)
    logger.info(f"Created task {task['taskId']} for {owner_id} ({minutes} min, review={requires_review})")

    notified = notifier.dispatch_task_created(task['taskId'], coords, notify_target)

    return {
        'task': task,
        'notified': notified
    }
