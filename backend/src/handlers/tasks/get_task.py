"""
Get Task Handler.
GET /tasks/{taskId}
Returns the task with its derived phase and its gratitude card, if any.
"""
from helpwall import gratitude, task_repository
from helpwall.auth import get_user_sub
from helpwall.logging import logger, log_event
from helpwall.models import task_phase
from helpwall.utils import format_response, get_path_param


def handler(event, context):
    log_event(event)

    if not get_user_sub(event):
        return format_response(401, {'error': 'Unauthorized'})

    task_id = get_path_param(event, 'taskId')
    if not task_id:
        return format_response(400, {'error': 'Missing taskId'})

    try:
        task = task_repository.get_task(task_id)
        if not task:
            return format_response(404, {'error': 'TaskNotFound', 'message': 'Task not found'})

        return format_response(200, {
            'task': dict(task, phase=task_phase(task)),
            'thanks': gratitude.get_card(task_id)
        })

    except Exception as e:
        logger.error(f"Error getting task {task_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
