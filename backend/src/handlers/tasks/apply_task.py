"""
Apply Task Handler.
POST /tasks/{taskId}/apply
"""
from helpwall import state_machine
from helpwall.auth import get_user_sub
from helpwall.errors import HelpWallError
from helpwall.logging import logger, log_event
from helpwall.utils import format_response, error_response, get_path_param


def handler(event, context):
    log_event(event)

    candidate_id = get_user_sub(event)
    if not candidate_id:
        return format_response(401, {'error': 'Unauthorized'})

    task_id = get_path_param(event, 'taskId')
    if not task_id:
        return format_response(400, {'error': 'Missing taskId'})

    try:
        task = state_machine.apply(task_id, candidate_id)
    except HelpWallError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error applying to task {task_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})

    return format_response(200, {
        'message': 'Application recorded',
        'taskId': task_id,
        'applicants': task.get('applicants', [])
    })
