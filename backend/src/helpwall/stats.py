"""
Profile statistics and history views built on the task, ledger and gratitude tables.
"""
from typing import Any, Dict, List
from .models import TaskStatus, task_phase
from . import gratitude, ledger, task_repository


def user_stats(user_id: str) -> Dict[str, Any]:
    """
    Counts shown on a member's profile.

    Returns:
        requests: tasks the member posted
        helpGiven: tasks the member helped with and that were completed
        helpReceived: the member's own tasks that were completed
        thanksReceived: gratitude cards received
        balance: cached time-credit balance
    """
    return {
        'userId': user_id,
        'requests': task_repository.count_owned(user_id),
        'helpGiven': task_repository.count_helped(user_id, TaskStatus.COMPLETED),
        'helpReceived': task_repository.count_owned(user_id, TaskStatus.COMPLETED),
        'thanksReceived': len(gratitude.list_received(user_id)),
        'balance': ledger.get_balance(user_id)
    }


def requests_with_thanks(user_id: str) -> List[Dict[str, Any]]:
    """The member's own tasks, newest first, flagged when thanks were sent."""
    thanked = {card['taskId'] for card in gratitude.list_sent(user_id)}
    return [
        dict(task, phase=task_phase(task), hasThanks=task['taskId'] in thanked)
        for task in task_repository.list_by_owner(user_id)
    ]


def help_history(user_id: str) -> List[Dict[str, Any]]:
    """Tasks the member was assigned to, newest first, flagged when thanks were received."""
    received = {card['taskId'] for card in gratitude.list_received(user_id)}
    return [
        {
            'taskId': task['taskId'],
            'title': task.get('title'),
            'status': task.get('status'),
            'createdAt': task.get('createdAt'),
            'hasReceivedThanks': task['taskId'] in received
        }
        for task in task_repository.list_by_helper(user_id)
    ]


def credit_history(user_id: str) -> List[Dict[str, Any]]:
    """Ledger entries of a member, newest first, with the related task title when it still exists."""
    history = []
    for entry in ledger.entries_for_user(user_id):
        task = task_repository.get_task(entry['taskId'])
        history.append(dict(entry, taskTitle=task.get('title') if task else None))
    return history
