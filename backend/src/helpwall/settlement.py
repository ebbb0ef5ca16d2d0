"""
Settlement Service.
Completes an in-progress task and moves its time credit from owner to helper.

Flow (one DynamoDB transaction, all-or-nothing):
1. Task status in_progress -> completed (conditional on owner, helper and credit unchanged)
2. Debit credit value from the owner's balance
3. Credit the same amount to the helper's balance
4. Write the paired DEBIT/CREDIT ledger entries for the task

Balances may go negative; time credit is a social ledger, not a bank account.
A cancelled or failed attempt writes nothing, so the owner can simply retry.
The task status condition and the ledger keys stop a task from settling twice.
"""
from decimal import Decimal
from typing import Any, Dict
from botocore.exceptions import BotoCoreError, ClientError
from .config import config
from .errors import LedgerWriteFailed, NotOwner, TaskNotFound, TaskNotInProgress
from .logging import logger
from .models import TaskStatus, can_transition
from .utils import utc_timestamp
from . import dynamo, ledger, task_repository


def _check_complete(task: Dict[str, Any], owner_id: str) -> None:
    if task.get('ownerId') != owner_id:
        raise NotOwner('Only the task owner can complete this task')
    if not can_transition(task.get('status'), TaskStatus.COMPLETED) or not task.get('helperId'):
        raise TaskNotInProgress('Task is not in progress')


def _task_completion_item(task: Dict[str, Any], amount: Decimal, timestamp: str) -> Dict[str, Any]:
    return {
        'Update': {
            'TableName': config.TASKS_TABLE,
            'Key': {'taskId': {'S': task['taskId']}},
            'UpdateExpression': 'SET #status = :completed, completedAt = :ts, updatedAt = :ts',
            'ConditionExpression': (
                '#status = :in_progress AND ownerId = :owner '
                'AND helperId = :helper AND creditValue = :credit'
            ),
            'ExpressionAttributeNames': {'#status': 'status'},
            'ExpressionAttributeValues': {
                ':completed': {'S': TaskStatus.COMPLETED},
                ':in_progress': {'S': TaskStatus.IN_PROGRESS},
                ':owner': {'S': task['ownerId']},
                ':helper': {'S': task['helperId']},
                ':credit': {'N': str(amount)},
                ':ts': {'S': timestamp}
            }
        }
    }


def _audit(action: str, task_id: str, **details: Any) -> None:
    detail_str = ' '.join(f'{k}={v}' for k, v in details.items())
    logger.info(f"settlement.{action} task={task_id} {detail_str}".rstrip())


def complete(task_id: str, owner_id: str) -> Dict[str, Any]:
    """
    Settle a task on behalf of its owner.

    Args:
        task_id: Task to complete
        owner_id: Authenticated caller, must be the task owner

    Returns:
        Settlement summary: taskId, ownerId, helperId, amount, completedAt

    Raises:
        TaskNotFound, NotOwner, TaskNotInProgress, LedgerWriteFailed
    """
    task = task_repository.get_task(task_id)
    if task is None:
        raise TaskNotFound(f'Task {task_id} not found')
    _check_complete(task, owner_id)

    helper_id = task['helperId']
    amount = Decimal(task['creditValue'])
    timestamp = utc_timestamp()
    _audit('attempt', task_id, owner=owner_id, helper=helper_id, amount=amount)

    transact_items = [_task_completion_item(task, amount, timestamp)]
    transact_items.extend(ledger.settlement_items(task_id, owner_id, helper_id, amount, timestamp))

    try:
        dynamo.get_client().transact_write_items(TransactItems=transact_items)
    except ClientError as e:
        error_code = e.response.get('Error', {}).get('Code')
        if dynamo.is_transaction_cancelled(e):
            reasons = dynamo.cancellation_codes(e)
            _audit('rejected', task_id, reasons=reasons)
            current = task_repository.get_task(task_id)
            if current is None:
                raise TaskNotFound(f'Task {task_id} not found')
            _check_complete(current, owner_id)
            raise LedgerWriteFailed(f'Settlement of task {task_id} was cancelled: {reasons}')
        _audit('failed', task_id, error=error_code)
        logger.error(f"Settlement transaction failed for task {task_id}: {e}")
        raise LedgerWriteFailed(f'Settlement of task {task_id} failed') from e
    except BotoCoreError as e:
        _audit('failed', task_id, error=type(e).__name__)
        logger.error(f"Settlement transaction failed for task {task_id}: {e}")
        raise LedgerWriteFailed(f'Settlement of task {task_id} failed') from e

    _audit('committed', task_id, owner=owner_id, helper=helper_id, amount=amount)
    return {
        'taskId': task_id,
        'ownerId': owner_id,
        'helperId': helper_id,
        'amount': amount,
        'status': TaskStatus.COMPLETED,
        'completedAt': timestamp
    }
