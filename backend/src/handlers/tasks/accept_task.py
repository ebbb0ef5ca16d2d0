"""
Accept Task Handler.
POST /tasks/{taskId}/accept

Direct-accept tasks only. When several helpers race for the same task,
one gets 200 and the rest get 409 TaskAlreadyAssigned.
"""
from helpwall import state_machine
from helpwall.auth import get_user_sub
from helpwall.errors import HelpWallError
from helpwall.logging import logger, log_event
from helpwall.utils import format_response, error_response, get_path_param


def handler(event, context):
    log_event(event)

    helper_id = get_user_sub(event)
    if not helper_id:
        return format_response(401, {'error': 'Unauthorized'})

    task_id = get_path_param(event, 'taskId')
    if not task_id:
        return format_response(400, {'error': 'Missing taskId'})

    try:
        task = state_machine.accept_direct(task_id, helper_id)
        return format_response(200, {
            'message': 'Task accepted',
            'task': task
        })
    except HelpWallError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error accepting task {task_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
