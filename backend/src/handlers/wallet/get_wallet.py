"""
Get Wallet Handler.
GET /wallet
Current time-credit balance plus the caller's ledger history.
"""
from helpwall import ledger, stats
from helpwall.auth import get_user_sub
from helpwall.logging import logger, log_event
from helpwall.utils import format_response


def handler(event, context):
    log_event(event)

    user_id = get_user_sub(event)
    if not user_id:
        return format_response(401, {'error': 'Unauthorized'})

    try:
        return format_response(200, {
            'userId': user_id,
            'balance': ledger.get_balance(user_id),
            'currency': 'TIME_CREDIT',
            'history': stats.credit_history(user_id)
        })

    except Exception as e:
        logger.error(f"Error getting wallet for {user_id}: {e}")
        return format_response(500, {'message': 'Internal Server Error'})
