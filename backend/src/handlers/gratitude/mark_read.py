"""
Mark Thanks Read Handler.
POST /thanks/{taskId}/read   - mark one card read
POST /thanks/read-all        - mark every unread card of the caller read
"""
from helpwall import gratitude
from helpwall.auth import get_user_sub
from helpwall.errors import HelpWallError
from helpwall.logging import logger, log_event
from helpwall.utils import format_response, error_response, get_path_param


def handler(event, context):
    log_event(event)

    receiver_id = get_user_sub(event)
    if not receiver_id:
        return format_response(401, {'error': 'Unauthorized'})

    task_id = get_path_param(event, 'taskId')

    try:
        if task_id:
            card = gratitude.mark_read(task_id, receiver_id)
            return format_response(200, {'message': 'Marked read', 'card': card})

        marked = gratitude.mark_all_read(receiver_id)
        return format_response(200, {'message': f'Marked {marked} cards read', 'marked': marked})

    except HelpWallError as e:
        return error_response(e)
    except Exception as e:
        logger.error(f"Error marking thanks read for {receiver_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
