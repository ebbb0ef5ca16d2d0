"""
Create Task Handler.
POST /tasks
Body: {
    "title": "...", "description": "...", "imageUrl": "...",
    "location": {"lat": 25.03, "lng": 121.56},
    "expectedMinutes": 15, "requiresReview": false, "notifyTarget": "personal"
}
"""
from helpwall.auth import get_user_sub
from helpwall.errors import HelpWallError
from helpwall.logging import logger, log_event
from helpwall.models import NotifyTarget
from helpwall.task_gateway import create_task
from helpwall.utils import format_response, error_response, parse_body


def handler(event, context):
    log_event(event)

    owner_id = get_user_sub(event)
    if not owner_id:
        return format_response(401, {'error': 'Unauthorized'})

    body = parse_body(event)

    try:
        result = create_task(
            owner_id=owner_id,
            title=body.get('title'),
            description=body.get('description', ''),
            location=body.get('location'),
            expected_minutes=body.get('expectedMinutes'),
            requires_review=body.get('requiresReview', False),
            notify_target=body.get('notifyTarget', NotifyTarget.PERSONAL),
            image_url=body.get('imageUrl')
        )
    except HelpWallError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error creating task: {e}")
        return format_response(500, {'error': 'Failed to create task'})

    return format_response(201, {
        'message': 'Task created',
        'task': result['task'],
        'notified': result['notified']
    })
