"""
Reconcile Balances Handler.
Triggered by EventBridge scheduler to check every cached balance against the ledger.

The ledger is the source of truth. A mismatch is logged for investigation;
the cached counter is not rewritten automatically.
"""
from helpwall import dynamo, ledger
from helpwall.config import config
from helpwall.logging import logger


def handler(event, context):
    logger.info("Running balance reconciliation...")

    # In production, page through the users table in parallel segments
    members = dynamo.scan(config.USERS_TABLE)

    inconsistent = []
    for member in members:
        user_id = member['userId']
        try:
            result = ledger.verify_balance(user_id)
        except Exception as e:
            logger.error(f"Error verifying balance of {user_id}: {e}")
            continue

        if not result['consistent']:
            logger.warning(
                f"Balance mismatch for {user_id}: cached={result['cachedBalance']} "
                f"ledger={result['ledgerTotal']}"
            )
            inconsistent.append(user_id)

    return {
        'checked': len(members),
        'inconsistent': inconsistent
    }
