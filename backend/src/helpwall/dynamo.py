"""
DynamoDB utility functions shared by the repositories.
"""
import boto3
from typing import List, Dict, Any, Optional
from boto3.dynamodb.types import TypeSerializer
from botocore.exceptions import ClientError
from .config import config
from .logging import logger

_serializer = TypeSerializer()
_resource = None
_client = None


def get_resource():
    """DynamoDB service resource, created on first use."""
    global _resource
    if _resource is None:
        _resource = boto3.resource('dynamodb', region_name=config.AWS_REGION)
    return _resource


def get_client():
    """Low-level DynamoDB client used for transactions."""
    global _client
    if _client is None:
        _client = boto3.client('dynamodb', region_name=config.AWS_REGION)
    return _client


def reset_connections() -> None:
    """Drop cached resource and client so the next call builds fresh ones."""
    global _resource, _client
    _resource = None
    _client = None


def table(table_name: str):
    return get_resource().Table(table_name)


def serialize(item: Dict[str, Any]) -> Dict[str, Any]:
    """Convert a plain item into the typed attribute format used by the client API."""
    return {k: _serializer.serialize(v) for k, v in item.items()}


def is_conditional_failure(error: ClientError) -> bool:
    """True when a single-item write was rejected by its ConditionExpression."""
    return error.response.get('Error', {}).get('Code') == 'ConditionalCheckFailedException'


def is_transaction_cancelled(error: ClientError) -> bool:
    return error.response.get('Error', {}).get('Code') == 'TransactionCanceledException'


def cancellation_codes(error: ClientError) -> List[str]:
    """
    Cancellation reason codes of a TransactionCanceledException,
    in the same order as the TransactItems that were sent.
    """
    reasons = error.response.get('CancellationReasons') or []
    return [reason.get('Code', 'None') for reason in reasons]


def get_item(
    table_name: str,
    key: Dict[str, Any],
    consistent_read: bool = True
) -> Optional[Dict[str, Any]]:
    """Get a single item from DynamoDB. Reads are strongly consistent by default."""
    try:
        response = table(table_name).get_item(Key=key, ConsistentRead=consistent_read)
        return response.get('Item')
    except ClientError as e:
        logger.error(f"Error getting item from {table_name}: {e}")
        raise


def query(
    table_name: str,
    index_name: Optional[str] = None,
    key_condition: Optional[Any] = None,
    filter_expression: Optional[Any] = None,
    limit: Optional[int] = None,
    scan_forward: bool = True
) -> List[Dict[str, Any]]:
    """
    Query DynamoDB table or index, following pagination.

    Args:
        table_name: Name of the DynamoDB table
        index_name: Optional GSI name
        key_condition: Key condition expression
        filter_expression: Optional filter expression
        limit: Max items to return
        scan_forward: True for ascending, False for descending

    Returns:
        List of items matching the query
    """
    query_params = {
        'ScanIndexForward': scan_forward
    }

    if index_name:
        query_params['IndexName'] = index_name
    if key_condition is not None:
        query_params['KeyConditionExpression'] = key_condition
    if filter_expression is not None:
        query_params['FilterExpression'] = filter_expression

    items = []
    try:
        target = table(table_name)
        while True:
            response = target.query(**query_params)
            items.extend(response.get('Items', []))
            if limit and len(items) >= limit:
                return items[:limit]
            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                return items
            query_params['ExclusiveStartKey'] = last_key
    except ClientError as e:
        logger.error(f"Error querying {table_name}: {e}")
        raise


def scan(table_name: str, filter_expression: Optional[Any] = None) -> List[Dict[str, Any]]:
    """Scan a whole table, following pagination."""
    scan_params = {}
    if filter_expression is not None:
        scan_params['FilterExpression'] = filter_expression

    items = []
    try:
        target = table(table_name)
        while True:
            response = target.scan(**scan_params)
            items.extend(response.get('Items', []))
            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                return items
            scan_params['ExclusiveStartKey'] = last_key
    except ClientError as e:
        logger.error(f"Error scanning {table_name}: {e}")
        raise


def count(
    table_name: str,
    index_name: str,
    key_condition: Any,
    filter_expression: Optional[Any] = None
) -> int:
    """Count items matching a query without fetching them."""
    query_params = {
        'IndexName': index_name,
        'KeyConditionExpression': key_condition,
        'Select': 'COUNT'
    }
    if filter_expression is not None:
        query_params['FilterExpression'] = filter_expression

    total = 0
    try:
        target = table(table_name)
        while True:
            response = target.query(**query_params)
            total += response.get('Count', 0)
            last_key = response.get('LastEvaluatedKey')
            if not last_key:
                return total
            query_params['ExclusiveStartKey'] = last_key
    except ClientError as e:
        logger.error(f"Error counting {table_name}/{index_name}: {e}")
        raise
