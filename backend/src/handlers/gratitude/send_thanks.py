"""
Send Thanks Handler.
POST /tasks/{taskId}/thanks
Body: { "message": "Thank you!" }
"""
from helpwall import gratitude
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

    message = parse_body(event).get('message')

    try:
        card = gratitude.send_thanks(task_id, owner_id, message)
    except HelpWallError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error sending thanks for task {task_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})

    return format_response(201, {'message': 'Thanks sent', 'card': card})
