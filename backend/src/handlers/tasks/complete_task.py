"""
Complete Task Handler.
POST /tasks/{taskId}/complete

Settles the task: owner is debited, helper credited and the task marked
completed in a single transaction.
"""
from helpwall import settlement
from helpwall.auth import get_user_sub
from helpwall.errors import HelpWallError
from helpwall.logging import logger, log_event
from helpwall.utils import format_response, error_response, get_path_param


def handler(event, context):
    log_event(event)

    owner_id = get_user_sub(event)
    if not owner_id:
        return format_response(401, {'error': 'Unauthorized'})

    task_id = get_path_param(event, 'taskId')
    if not task_id:
        return format_response(400, {'error': 'Missing taskId'})

    try:
        result = settlement.complete(task_id, owner_id)
    except HelpWallError as e:
        if e.status_code >= 500:
            logger.error(f"Settlement failed for task {task_id}: {e}")
        return error_response(e)
    except Exception as e:
        logger.error(f"Error completing task {task_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})

    return format_response(200, {
        'message': 'Task completed, time credit transferred',
        'settlement': result
    })
