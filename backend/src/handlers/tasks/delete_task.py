"""
Delete Task Handler.
DELETE /tasks/{taskId}
"""
from helpwall import state_machine
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
        state_machine.delete(task_id, owner_id)
        return format_response(200, {'message': 'Task deleted', 'taskId': task_id})
    except HelpWallError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error deleting task {task_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
