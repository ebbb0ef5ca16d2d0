"""
List Tasks Handler.
GET /tasks?scope=wall|mine|helping

wall:    every task not yet completed, newest first
mine:    the caller's own requests, flagged when thanks were sent
helping: tasks the caller was assigned to, flagged when thanks were received
"""
from helpwall import stats, task_repository
from helpwall.auth import get_user_sub
from helpwall.logging import logger, log_event
from helpwall.models import task_phase
from helpwall.utils import format_response, get_query_param

SCOPES = ('wall', 'mine', 'helping')


def handler(event, context):
    log_event(event)

    user_id = get_user_sub(event)
    if not user_id:
        return format_response(401, {'error': 'Unauthorized'})

    scope = get_query_param(event, 'scope', 'wall')
    if scope not in SCOPES:
        return format_response(400, {'error': f"scope must be one of {', '.join(SCOPES)}"})

    try:
        if scope == 'mine':
            items = stats.requests_with_thanks(user_id)
        elif scope == 'helping':
            items = stats.help_history(user_id)
        else:
            items = [dict(task, phase=task_phase(task)) for task in task_repository.list_wall_tasks()]

        return format_response(200, {'scope': scope, 'tasks': items})

    except Exception as e:
        logger.error(f"Error listing tasks ({scope}): {e}")
        return format_response(500, {'error': 'Internal Server Error'})
