"""
Gratitude Subsystem.
One thank-you card per completed task, from the owner to the helper.
The card table is keyed by taskId and the put is conditional, so a concurrent
double submit is rejected by DynamoDB rather than overwriting the first card.
"""
from typing import Any, Dict, List, Optional
from boto3.dynamodb.conditions import Attr, Key
from botocore.exceptions import ClientError
from .config import config
from .errors import (
    GratitudeAlreadySent,
    GratitudeNotFound,
    NotOwner,
    NotReceiver,
    TaskNotCompleted,
    TaskNotFound,
)
from .logging import logger
from .models import TaskStatus
from .utils import utc_timestamp
from .validation import require_text
from . import dynamo, task_repository

RECEIVER_INDEX = 'ReceiverIndex'
SENDER_INDEX = 'SenderIndex'


def _cards():
    return dynamo.table(config.GRATITUDE_TABLE)


def get_card(task_id: str) -> Optional[Dict[str, Any]]:
    return dynamo.get_item(config.GRATITUDE_TABLE, {'taskId': task_id})


def send_thanks(task_id: str, owner_id: str, message: str) -> Dict[str, Any]:
    """
    Create the gratitude card for a completed task.

    Args:
        task_id: Completed task being acknowledged
        owner_id: Authenticated caller, must be the task owner
        message: Thank-you text (trimmed, must not be empty)

    Returns:
        The stored card
    """
    message = require_text(message, 'message')

    task = task_repository.get_task(task_id)
    if task is None:
        raise TaskNotFound(f'Task {task_id} not found')
    if task.get('ownerId') != owner_id:
        raise NotOwner('Only the task owner can send thanks')
    if task.get('status') != TaskStatus.COMPLETED or not task.get('helperId'):
        raise TaskNotCompleted('Thanks can only be sent for completed tasks')

    card = {
        'taskId': task_id,
        'senderId': owner_id,
        'receiverId': task['helperId'],
        'message': message,
        'isRead': False,
        'createdAt': utc_timestamp()
    }

    try:
        _cards().put_item(
            Item=card,
            ConditionExpression=Attr('taskId').not_exists()
        )
    except ClientError as e:
        if dynamo.is_conditional_failure(e):
            raise GratitudeAlreadySent('Thanks have already been sent for this task')
        logger.error(f"Error storing gratitude card for task {task_id}: {e}")
        raise

    logger.info(f"Gratitude card sent for task {task_id} to {card['receiverId']}")
    return card


def mark_read(task_id: str, receiver_id: str) -> Dict[str, Any]:
    """Mark a card read on behalf of its receiver. Repeated calls are harmless."""
    try:
        response = _cards().update_item(
            Key={'taskId': task_id},
            UpdateExpression='SET isRead = :true',
            ConditionExpression=Attr('taskId').exists() & Attr('receiverId').eq(receiver_id),
            ExpressionAttributeValues={':true': True},
            ReturnValues='ALL_NEW'
        )
        return response['Attributes']
    except ClientError as e:
        if not dynamo.is_conditional_failure(e):
            logger.error(f"Error marking gratitude card {task_id} read: {e}")
            raise

    if get_card(task_id) is None:
        raise GratitudeNotFound(f'No gratitude card for task {task_id}')
    raise NotReceiver('Only the receiver can mark this card read')


def list_received(receiver_id: str) -> List[Dict[str, Any]]:
    """All cards a member received, newest first."""
    return dynamo.query(
        config.GRATITUDE_TABLE,
        index_name=RECEIVER_INDEX,
        key_condition=Key('receiverId').eq(receiver_id),
        scan_forward=False
    )


def list_unread(receiver_id: str) -> List[Dict[str, Any]]:
    """Notification inbox: unread cards, newest first."""
    return dynamo.query(
        config.GRATITUDE_TABLE,
        index_name=RECEIVER_INDEX,
        key_condition=Key('receiverId').eq(receiver_id),
        filter_expression=Attr('isRead').eq(False),
        scan_forward=False
    )


def mark_all_read(receiver_id: str) -> int:
    """
    Mark every unread card of a member read.

    Returns:
        Number of cards marked
    """
    marked = 0
    for card in list_unread(receiver_id):
        mark_read(card['taskId'], receiver_id)
        marked += 1
    if marked:
        logger.info(f"Marked {marked} gratitude cards read for {receiver_id}")
    return marked


def list_sent(sender_id: str) -> List[Dict[str, Any]]:
    """All cards a member sent, newest first."""
    return dynamo.query(
        config.GRATITUDE_TABLE,
        index_name=SENDER_INDEX,
        key_condition=Key('senderId').eq(sender_id),
        scan_forward=False
    )
