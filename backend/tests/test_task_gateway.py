"""
Tests for task creation and notification dispatch.
"""
import io
import json
import pytest
from decimal import Decimal
from unittest.mock import MagicMock, patch

from helpwall import dynamo, notifier
from helpwall.config import config
from helpwall.errors import ValidationError
from helpwall.models import TaskStatus, TaskPhase, task_phase
from helpwall.task_gateway import create_task
from helpwall.task_repository import get_task


def _create(**overrides):
    params = dict(
        owner_id='owner-1',
        title='Carry groceries',
        description='Third floor, no elevator',
        location={'lat': 25.04, 'lng': 121.53},
        expected_minutes=15,
        requires_review=False,
        notify_target='personal'
    )
    params.update(overrides)
    return create_task(**params)


class TestCreateTask:
    """Tests for create_task validation and persistence."""

    def test_credit_value_is_minutes_over_five(self, tables):
        """15 expected minutes are worth 3 time credits."""
        task = _create(expected_minutes=15)['task']

        assert task['creditValue'] == Decimal('3')
        assert get_task(task['taskId'])['creditValue'] == Decimal('3')

    def test_new_task_is_open_and_unassigned(self, tables):
        """A new task is open, has no applicants and no helper."""
        task = get_task(_create(requires_review=True)['task']['taskId'])

        assert task['status'] == TaskStatus.OPEN
        assert task['applicants'] == []
        assert 'helperId' not in task
        assert task['requiresReview'] is True
        assert task_phase(task) == TaskPhase.OPEN

    def test_location_stored_as_decimals(self, tables):
        task = get_task(_create(location={'lat': 25.5, 'lng': -0.25})['task']['taskId'])

        assert task['lat'] == Decimal('25.5')
        assert task['lng'] == Decimal('-0.25')

    @pytest.mark.parametrize('location, expected_lat', [
        ({'lat': '25.' + '1' * 50, 'lng': 1}, Decimal('25.1111111')),
        ({'lat': 25.123456789123456, 'lng': 1}, Decimal('25.1234568')),
        ({'lat': '-33.86785' + '0' * 40 + '1', 'lng': 1}, Decimal('-33.86785')),
    ])
    def test_overly_precise_coordinates_are_rounded(self, tables, location, expected_lat):
        """Coordinates beyond what the store can hold are rounded instead of failing the write."""
        task = get_task(_create(location=location)['task']['taskId'])

        assert task['lat'] == expected_lat
        assert task['lng'] == Decimal('1')

    @pytest.mark.parametrize('overrides', [
        {'title': ''},
        {'title': '   '},
        {'title': None},
        {'expected_minutes': 7},
        {'expected_minutes': 60},
        {'expected_minutes': '15'},
        {'expected_minutes': True},
        {'location': None},
        {'location': {'lat': 25.0}},
        {'location': {'lat': 91, 'lng': 0}},
        {'location': {'lat': 0, 'lng': 181}},
        {'location': {'lat': 'north', 'lng': 0}},
        {'location': {'lat': 'nan', 'lng': 0}},
        {'notify_target': 'everyone'},
        {'requires_review': 'yes'},
    ])
    def test_invalid_input_rejected_before_write(self, tables, overrides):
        """Validation errors leave the tasks table untouched."""
        with pytest.raises(ValidationError):
            _create(**overrides)

        assert dynamo.scan(config.TASKS_TABLE) == []

    def test_all_supported_durations_accepted(self, tables):
        credits = [_create(expected_minutes=m)['task']['creditValue'] for m in (5, 10, 15, 20, 25, 30)]

        assert credits == [Decimal(n) for n in range(1, 7)]


class TestNotificationDispatch:
    """Tests for forwarding the new-task notification."""

    def test_notified_count_returned(self, tables):
        with patch('helpwall.task_gateway.notifier.dispatch_task_created', return_value=12) as mock:
            result = _create(notify_target='group')

        assert result['notified'] == 12
        task_id, location, target = mock.call_args[0]
        assert task_id == result['task']['taskId']
        assert location == {'lat': Decimal('25.04'), 'lng': Decimal('121.53')}
        assert target == 'group'

    def test_unconfigured_dispatch_is_skipped(self, tables):
        """No dispatch function configured means nobody is notified."""
        with patch('helpwall.notifier.get_lambda_client') as mock_client:
            result = _create()

        mock_client.assert_not_called()
        assert result['notified'] == 0

    def test_dispatch_failure_keeps_task(self, tables):
        """A failing dispatcher never rolls back the created task."""
        client = MagicMock()
        client.invoke.side_effect = RuntimeError('dispatcher unavailable')

        with patch.object(config, 'NOTIFY_FUNCTION_NAME', 'helpwall-notify'):
            with patch('helpwall.notifier.get_lambda_client', return_value=client):
                result = _create()

        assert result['notified'] == 0
        assert get_task(result['task']['taskId'])['status'] == TaskStatus.OPEN

    def test_dispatch_reads_count_from_payload(self):
        client = MagicMock()
        client.invoke.return_value = {
            'StatusCode': 200,
            'Payload': io.BytesIO(json.dumps({'notified': 4}).encode('utf-8'))
        }

        with patch.object(config, 'NOTIFY_FUNCTION_NAME', 'helpwall-notify'):
            with patch('helpwall.notifier.get_lambda_client', return_value=client):
                notified = notifier.dispatch_task_created(
                    'task-1', {'lat': Decimal('1.5'), 'lng': Decimal('2')}, 'all'
                )

        assert notified == 4
        kwargs = client.invoke.call_args[1]
        assert kwargs['FunctionName'] == 'helpwall-notify'
        assert json.loads(kwargs['Payload']) == {
            'taskId': 'task-1', 'lat': 1.5, 'lng': 2.0, 'notifyTarget': 'all'
        }

    def test_dispatch_function_error_counts_zero(self):
        client = MagicMock()
        client.invoke.return_value = {
            'StatusCode': 200,
            'FunctionError': 'Unhandled',
            'Payload': io.BytesIO(b'{"errorMessage": "boom"}')
        }

        with patch.object(config, 'NOTIFY_FUNCTION_NAME', 'helpwall-notify'):
            with patch('helpwall.notifier.get_lambda_client', return_value=client):
                assert notifier.dispatch_task_created('task-1', {'lat': 0, 'lng': 0}, 'all') == 0
