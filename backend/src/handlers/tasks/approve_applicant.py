"""
Approve Applicant Handler.
POST /tasks/{taskId}/approve
Body: { "candidateId": "..." }
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
    candidate_id = parse_body(event).get('candidateId')
    if not task_id or not candidate_id:
        return format_response(400, {'error': 'Missing taskId or candidateId'})

    try:
        task = state_machine.approve(task_id, owner_id, candidate_id)
        return format_response(200, {
            'message': 'Applicant approved',
            'task': task
        })
    except HelpWallError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error approving {candidate_id} for task {task_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
