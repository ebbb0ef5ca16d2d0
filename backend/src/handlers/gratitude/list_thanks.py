"""
List Thanks Handler.
GET /thanks?unread=true
Cards received by the caller, newest first. unread=true returns the notification inbox.
"""
from helpwall import gratitude
from helpwall.auth import get_user_sub
from helpwall.logging import logger, log_event
from helpwall.utils import format_response, get_query_param


def handler(event, context):
    log_event(event)

    receiver_id = get_user_sub(event)
    if not receiver_id:
        return format_response(401, {'error': 'Unauthorized'})

    unread_only = (get_query_param(event, 'unread', 'false') or '').lower() == 'true'

    try:
        if unread_only:
            cards = gratitude.list_unread(receiver_id)
        else:
            cards = gratitude.list_received(receiver_id)

        return format_response(200, {
            'cards': cards,
            'unreadCount': sum(1 for card in cards if not card.get('isRead'))
        })

    except Exception as e:
        logger.error(f"Error listing thanks for {receiver_id}: {e}")
        return format_response(500, {'error': 'Internal Server Error'})
