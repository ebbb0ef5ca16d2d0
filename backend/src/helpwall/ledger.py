"""
Ledger Store.
Append-only time-credit movements keyed by (taskId, side), plus a derived
per-member balance counter. The ledger is the source of truth; the counter
is a read optimization that verify_balance can reconstruct.
"""
from decimal import Decimal
from typing import Any, Dict, List
from boto3.dynamodb.conditions import Key
from .config import config
from .models import LedgerSide
from . import dynamo

USER_INDEX = 'UserIndex'


def settlement_items(
    task_id: str,
    owner_id: str,
    helper_id: str,
    amount: Decimal,
    timestamp: str
) -> List[Dict[str, Any]]:
    """
    Transaction items moving `amount` from owner to helper for one task.

    Returns the two balance updates followed by the paired ledger entries.
    Each entry put is conditional on its (taskId, side) key being unused, so a
    task can never be settled twice.
    """
    return [
        _balance_update(owner_id, -amount, timestamp),
        _balance_update(helper_id, amount, timestamp),
        _entry_put(task_id, LedgerSide.DEBIT, owner_id, helper_id, -amount, timestamp),
        _entry_put(task_id, LedgerSide.CREDIT, helper_id, owner_id, amount, timestamp),
    ]


def _balance_update(user_id: str, delta: Decimal, timestamp: str) -> Dict[str, Any]:
    return {
        'Update': {
            'TableName': config.USERS_TABLE,
            'Key': {'userId': {'S': user_id}},
            'UpdateExpression': 'ADD balance :delta SET updatedAt = :ts',
            'ExpressionAttributeValues': {
                ':delta': {'N': str(delta)},
                ':ts': {'S': timestamp}
            }
        }
    }


def _entry_put(
    task_id: str,
    side: str,
    user_id: str,
    counterparty_id: str,
    change_amount: Decimal,
    timestamp: str
) -> Dict[str, Any]:
    return {
        'Put': {
            'TableName': config.LEDGER_TABLE,
            'Item': dynamo.serialize({
                'taskId': task_id,
                'side': side,
                'userId': user_id,
                'counterpartyId': counterparty_id,
                'changeAmount': change_amount,
                'createdAt': timestamp
            }),
            'ConditionExpression': 'attribute_not_exists(taskId)'
        }
    }


def entries_for_task(task_id: str) -> List[Dict[str, Any]]:
    return dynamo.query(
        config.LEDGER_TABLE,
        key_condition=Key('taskId').eq(task_id)
    )


def entries_for_user(user_id: str) -> List[Dict[str, Any]]:
    """A member's credit history, newest first."""
    return dynamo.query(
        config.LEDGER_TABLE,
        index_name=USER_INDEX,
        key_condition=Key('userId').eq(user_id),
        scan_forward=False
    )


def get_balance(user_id: str) -> Decimal:
    """Cached balance; members without a settlement yet have zero."""
    item = dynamo.get_item(config.USERS_TABLE, {'userId': user_id})
    if not item:
        return Decimal('0')
    return Decimal(item.get('balance', 0))


def verify_task(task_id: str) -> Dict[str, Any]:
    """
    Check zero-sum conservation for one task.

    A task is consistent when it has no entries (never settled) or exactly
    one debit and one credit that cancel out.
    """
    entries = entries_for_task(task_id)
    total = sum((Decimal(e['changeAmount']) for e in entries), Decimal('0'))
    return {
        'taskId': task_id,
        'entryCount': len(entries),
        'sum': total,
        'consistent': len(entries) in (0, 2) and total == 0
    }


def verify_balance(user_id: str) -> Dict[str, Any]:
    """Reconstruct a member's balance from the ledger and compare it with the counter."""
    ledger_total = sum(
        (Decimal(e['changeAmount']) for e in entries_for_user(user_id)),
        Decimal('0')
    )
    cached = get_balance(user_id)
    return {
        'userId': user_id,
        'ledgerTotal': ledger_total,
        'cachedBalance': cached,
        'consistent': ledger_total == cached
    }
