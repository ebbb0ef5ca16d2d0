"""
Notification dispatch.
Forwards new-task notifications to the external dispatch Lambda, which decides
who to notify (everyone, members nearby, or a group) and reports how many it reached.
Dispatch is best effort: any failure is logged and reported as zero recipients.
"""
import boto3
import json
from typing import Any, Dict
from .config import config
from .logging import logger

_lambda_client = None


def get_lambda_client():
    global _lambda_client
    if _lambda_client is None:
        _lambda_client = boto3.client('lambda', region_name=config.AWS_REGION)
    return _lambda_client


def dispatch_task_created(task_id: str, location: Dict[str, Any], notify_target: str) -> int:
    """
    Ask the dispatch function to notify members about a new task.

    Args:
        task_id: The created task
        location: {lat, lng} of the task
        notify_target: NotifyTarget value

    Returns:
        Number of members notified (informational only), 0 on any failure
    """
    if not config.NOTIFY_FUNCTION_NAME:
        logger.info(f"Notification dispatch not configured, skipping task {task_id}")
        return 0

    payload = {
        'taskId': task_id,
        'lat': float(location['lat']),
        'lng': float(location['lng']),
        'notifyTarget': notify_target
    }

    try:
        response = get_lambda_client().invoke(
            FunctionName=config.NOTIFY_FUNCTION_NAME,
            InvocationType='RequestResponse',
            Payload=json.dumps(payload).encode('utf-8')
        )
        if response.get('FunctionError'):
            logger.warning(f"Notification dispatch for task {task_id} failed: {response['FunctionError']}")
            return 0

        result = json.loads(response['Payload'].read() or b'{}')
        notified = int(result.get('notified', 0))
        logger.info(f"Notified {notified} members about task {task_id} ({notify_target})")
        return notified

    except Exception as e:
        logger.error(f"Error dispatching notification for task {task_id}: {e}")
        return 0
