"""
Update Task Handler.
PATCH /tasks/{taskId}
Body: any of { "description": "...", "imageUrl": "...", "expectedMinutes": 20 }
"""
from helpwall import state_machine
from helpwall.auth import get_user_sub
from helpwall.errors import HelpWallError
from helpwall.logging import logger, log_event
from helpwall.utils import format_response, error_response, get_path_param, parse_body


def handler(event, context):
    log_event(event)

    owner_id = get_user_sub(event)
    if not owner_id:
        return format_response(401, {'error': 'Unauthorized'})

    task_id = get_path_param(event, 'taskId')
    if not task_id:
        return format_response(400, {'error': 'Missing taskId'})

    body = parse_body(event)

    try:
        task = state_machine.edit(
            task_id,
            owner_id,
            description=body.get('description'),
            image_url=body.get('imageUrl'),
            expected_minutes=body.get('expectedMinutes')
        )
        return format_response(200, {'message': 'Task updated', 'task': task})
    except HelpWallError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error updating task {task_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
