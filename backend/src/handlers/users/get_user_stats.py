"""
Get User Stats Handler.
GET /users/{userId}/stats
Profile counters: requests posted, help given and received, thanks received.
"""
from helpwall import stats
from helpwall.auth import get_user_sub
from helpwall.logging import logger, log_event
from helpwall.utils import format_response, get_path_param


def handler(event, context):
    log_event(event)

    caller_id = get_user_sub(event)
    if not caller_id:
        return format_response(401, {'error': 'Unauthorized'})

    # Viewing another member's profile is allowed; default to the caller
    user_id = get_path_param(event, 'userId') or caller_id

    try:
        return format_response(200, stats.user_stats(user_id))
    except Exception as e:
        logger.error(f"Error getting stats for {user_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
