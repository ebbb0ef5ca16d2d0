"""
Task Repository.
Durable task records in DynamoDB. Every mutation is a conditional write whose
precondition is evaluated by the store at commit time; a rejected condition
is reported as None so the caller can work out which precondition failed.
"""
from typing import Any, Dict, List, Optional
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError
from .config import config
from .logging import logger
from .models import TaskStatus
from . import dynamo

OWNER_INDEX = 'OwnerIndex'
HELPER_INDEX = 'HelperIndex'


def _tasks():
    return dynamo.table(config.TASKS_TABLE)


def get_task(task_id: str) -> Optional[Dict[str, Any]]:
    return dynamo.get_item(config.TASKS_TABLE, {'taskId': task_id})


def put_new_task(item: Dict[str, Any]) -> None:
    """Insert a freshly created task. Never overwrites an existing id."""
    _tasks().put_item(
        Item=item,
        ConditionExpression=Attr('taskId').not_exists()
    )


def _conditional_update(
    task_id: str,
    update_expression: str,
    condition: Any,
    values: Dict[str, Any],
    names: Optional[Dict[str, str]] = None
) -> Optional[Dict[str, Any]]:
    params = {
        'Key': {'taskId': task_id},
        'UpdateExpression': update_expression,
        'ConditionExpression': condition,
        'ExpressionAttributeValues': values,
        'ReturnValues': 'ALL_NEW'
    }
    if names:
        params['ExpressionAttributeNames'] = names

    try:
        response = _tasks().update_item(**params)
        return response.get('Attributes')
    except ClientError as e:
        if dynamo.is_conditional_failure(e):
            return None
        logger.error(f"Error updating task {task_id}: {e}")
        raise


def assign_direct(task_id: str, helper_id: str, timestamp: str) -> Optional[Dict[str, Any]]:
    """
    Claim an open direct-accept task for a helper.
    Exactly one of several concurrent claims can satisfy the condition.
    """
    condition = (
        Attr('status').eq(TaskStatus.OPEN)
        & Attr('requiresReview').eq(False)
        & Attr('ownerId').ne(helper_id)
        & Attr('helperId').not_exists()
    )
    return _conditional_update(
        task_id,
        'SET helperId = :helper, #status = :in_progress, assignedAt = :ts, updatedAt = :ts',
        condition,
        {
            ':helper': helper_id,
            ':in_progress': TaskStatus.IN_PROGRESS,
            ':ts': timestamp
        },
        {'#status': 'status'}
    )


def add_applicant(task_id: str, candidate_id: str, timestamp: str) -> Optional[Dict[str, Any]]:
    """Append a candidate to an open review task's applicant list."""
    condition = (
        Attr('status').eq(TaskStatus.OPEN)
        & Attr('requiresReview').eq(True)
        & Attr('ownerId').ne(candidate_id)
        & ~Attr('applicants').contains(candidate_id)
    )
    return _conditional_update(
        task_id,
        'SET applicants = list_append(applicants, :candidate), updatedAt = :ts',
        condition,
        {
            ':candidate': [candidate_id],
            ':ts': timestamp
        }
    )


def assign_applicant(
    task_id: str,
    owner_id: str,
    candidate_id: str,
    timestamp: str
) -> Optional[Dict[str, Any]]:
    """
    Approve one applicant of an open review task.
    The applicant list is left untouched so earlier applications stay on record.
    """
    condition = (
        Attr('status').eq(TaskStatus.OPEN)
        & Attr('requiresReview').eq(True)
        & Attr('ownerId').eq(owner_id)
        & Attr('applicants').contains(candidate_id)
        & Attr('helperId').not_exists()
    )
    return _conditional_update(
        task_id,
        'SET helperId = :helper, #status = :in_progress, assignedAt = :ts, updatedAt = :ts',
        condition,
        {
            ':helper': candidate_id,
            ':in_progress': TaskStatus.IN_PROGRESS,
            ':ts': timestamp
        },
        {'#status': 'status'}
    )


def update_open_fields(
    task_id: str,
    owner_id: str,
    fields: Dict[str, Any],
    timestamp: str
) -> Optional[Dict[str, Any]]:
    """Overwrite editable attributes while the task is still open."""
    names = {}
    values = {':ts': timestamp}
    assignments = ['updatedAt = :ts']
    for idx, (attr, value) in enumerate(sorted(fields.items())):
        names[f'#f{idx}'] = attr
        values[f':f{idx}'] = value
        assignments.append(f'#f{idx} = :f{idx}')

    condition = Attr('status').eq(TaskStatus.OPEN) & Attr('ownerId').eq(owner_id)
    return _conditional_update(
        task_id,
        'SET ' + ', '.join(assignments),
        condition,
        values,
        names
    )


def delete_open_task(task_id: str, owner_id: str) -> bool:
    """Delete a task only while it is open and only on behalf of its owner."""
    try:
        _tasks().delete_item(
            Key={'taskId': task_id},
            ConditionExpression=Attr('status').eq(TaskStatus.OPEN) & Attr('ownerId').eq(owner_id)
        )
        return True
    except ClientError as e:
        if dynamo.is_conditional_failure(e):
            return False
        logger.error(f"Error deleting task {task_id}: {e}")
        raise


def list_wall_tasks() -> List[Dict[str, Any]]:
    """Tasks still shown on the wall (not completed), newest first."""
    # TODO: replace the scan with a status/createdAt GSI once the wall needs paging
    items = dynamo.scan(
        config.TASKS_TABLE,
        filter_expression=Attr('status').ne(TaskStatus.COMPLETED)
    )
    return sorted(items, key=lambda t: t.get('createdAt', ''), reverse=True)


def list_by_owner(owner_id: str) -> List[Dict[str, Any]]:
    return dynamo.query(
        config.TASKS_TABLE,
        index_name=OWNER_INDEX,
        key_condition=Key('ownerId').eq(owner_id),
        scan_forward=False
    )


def list_by_helper(helper_id: str) -> List[Dict[str, Any]]:
    return dynamo.query(
        config.TASKS_TABLE,
        index_name=HELPER_INDEX,
        key_condition=Key('helperId').eq(helper_id),
        scan_forward=False
    )


def count_owned(owner_id: str, status: Optional[str] = None) -> int:
    return dynamo.count(
        config.TASKS_TABLE,
        OWNER_INDEX,
        Key('ownerId').eq(owner_id),
        Attr('status').eq(status) if status else None
    )


def count_helped(helper_id: str, status: Optional[str] = None) -> int:
    return dynamo.count(
        config.TASKS_TABLE,
        HELPER_INDEX,
        Key('helperId').eq(helper_id),
        Attr('status').eq(status) if status else None
    )
