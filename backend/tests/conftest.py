"""
Shared fixtures: an in-process DynamoDB (moto) with the HelpWall tables.
"""
import json
import os
import sys

import pytest

# Fake credentials so boto3 never reaches a real account
os.environ['AWS_ACCESS_KEY_ID'] = 'testing'
os.environ['AWS_SECRET_ACCESS_KEY'] = 'testing'
os.environ['AWS_SECURITY_TOKEN'] = 'testing'
os.environ['AWS_SESSION_TOKEN'] = 'testing'
os.environ['AWS_DEFAULT_REGION'] = 'us-east-1'

# Add src to path for import
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from moto import mock_aws  # noqa: E402

from helpwall import dynamo, notifier  # noqa: E402
from helpwall.config import config  # noqa: E402
from helpwall.task_gateway import create_task  # noqa: E402


def _gsi(name, hash_key, range_key='createdAt'):
    return {
        'IndexName': name,
        'KeySchema': [
            {'AttributeName': hash_key, 'KeyType': 'HASH'},
            {'AttributeName': range_key, 'KeyType': 'RANGE'}
        ],
        'Projection': {'ProjectionType': 'ALL'}
    }


def _create_tables(resource):
    resource.create_table(
        TableName=config.TASKS_TABLE,
        KeySchema=[{'AttributeName': 'taskId', 'KeyType': 'HASH'}],
        AttributeDefinitions=[
            {'AttributeName': 'taskId', 'AttributeType': 'S'},
            {'AttributeName': 'ownerId', 'AttributeType': 'S'},
            {'AttributeName': 'helperId', 'AttributeType': 'S'},
            {'AttributeName': 'createdAt', 'AttributeType': 'S'}
        ],
        GlobalSecondaryIndexes=[_gsi('OwnerIndex', 'ownerId'), _gsi('HelperIndex', 'helperId')],
        BillingMode='PAY_PER_REQUEST'
    )
    resource.create_table(
        TableName=config.LEDGER_TABLE,
        KeySchema=[
            {'AttributeName': 'taskId', 'KeyType': 'HASH'},
            {'AttributeName': 'side', 'KeyType': 'RANGE'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'taskId', 'AttributeType': 'S'},
            {'AttributeName': 'side', 'AttributeType': 'S'},
            {'AttributeName': 'userId', 'AttributeType': 'S'},
            {'AttributeName': 'createdAt', 'AttributeType': 'S'}
        ],
        GlobalSecondaryIndexes=[_gsi('UserIndex', 'userId')],
        BillingMode='PAY_PER_REQUEST'
    )
    resource.create_table(
        TableName=config.USERS_TABLE,
        KeySchema=[{'AttributeName': 'userId', 'KeyType': 'HASH'}],
        AttributeDefinitions=[{'AttributeName': 'userId', 'AttributeType': 'S'}],
        BillingMode='PAY_PER_REQUEST'
    )
    resource.create_table(
        TableName=config.GRATITUDE_TABLE,
        KeySchema=[{'AttributeName': 'taskId', 'KeyType': 'HASH'}],
        AttributeDefinitions=[
            {'AttributeName': 'taskId', 'AttributeType': 'S'},
            {'AttributeName': 'receiverId', 'AttributeType': 'S'},
            {'AttributeName': 'senderId', 'AttributeType': 'S'},
            {'AttributeName': 'createdAt', 'AttributeType': 'S'}
        ],
        GlobalSecondaryIndexes=[_gsi('ReceiverIndex', 'receiverId'), _gsi('SenderIndex', 'senderId')],
        BillingMode='PAY_PER_REQUEST'
    )


@pytest.fixture
def tables():
    """Fresh mocked DynamoDB with all tables for each test."""
    with mock_aws():
        dynamo.reset_connections()
        notifier._lambda_client = None
        _create_tables(dynamo.get_resource())
        yield dynamo.get_resource()
    dynamo.reset_connections()
    notifier._lambda_client = None


@pytest.fixture
def make_task(tables):
    """Create an open task through the gateway and return the stored item."""
    def _make(owner_id='owner-1', expected_minutes=15, requires_review=False, title='Walk my dog'):
        result = create_task(
            owner_id=owner_id,
            title=title,
            description='Around the block, twice',
            location={'lat': 25.033, 'lng': 121.565},
            expected_minutes=expected_minutes,
            requires_review=requires_review,
            notify_target='personal'
        )
        return result['task']
    return _make


@pytest.fixture
def api_event():
    """Builder for minimal API Gateway proxy events with Cognito claims."""
    def _event(user_id=None, path=None, body=None, query=None):
        return {
            'pathParameters': path,
            'queryStringParameters': query,
            'body': json.dumps(body) if body is not None else None,
            'requestContext': {'authorizer': {'claims': {'sub': user_id}}} if user_id else {}
        }
    return _event
