"""
Tests for request/response helpers and event logging.
"""
import json
import logging
from decimal import Decimal

from helpwall.errors import TaskAlreadyAssigned
from helpwall.logging import log_event
from helpwall.utils import error_response, format_response, get_query_param, parse_body


class TestResponses:
    """Tests for response formatting."""

    def test_numbers_render_as_ints_or_floats(self):
        response = format_response(200, {
            'credit': Decimal('3'),
            'lat': Decimal('25.0330000'),
            'lng': Decimal('121.0000000')
        })

        assert json.loads(response['body']) == {'credit': 3, 'lat': 25.033, 'lng': 121}
        assert response['headers']['Access-Control-Allow-Origin'] == '*'

    def test_error_response_carries_code(self):
        response = error_response(TaskAlreadyAssigned('Task has already been assigned'))

        assert response['statusCode'] == 409
        assert json.loads(response['body']) == {
            'error': 'TaskAlreadyAssigned',
            'message': 'Task has already been assigned'
        }


class TestRequestParsing:
    """Tests for reading API Gateway events."""

    def test_non_object_bodies_read_as_empty(self):
        assert parse_body({'body': '[1, 2]'}) == {}
        assert parse_body({'body': 'not json'}) == {}
        assert parse_body({'body': None}) == {}
        assert parse_body({'body': '{"message": "hi"}'}) == {'message': 'hi'}

    def test_missing_query_uses_default(self):
        assert get_query_param({'queryStringParameters': None}, 'scope', 'wall') == 'wall'


class TestLogEvent:
    """log_event keeps message bodies and identity claims out of the logs."""

    def test_logs_route_and_caller_only(self, caplog):
        event = {
            'httpMethod': 'POST',
            'resource': '/tasks/{taskId}/thanks',
            'pathParameters': {'taskId': 'task-1'},
            'body': '{"message": "Thank you for walking Biscuit"}',
            'headers': {'Authorization': 'Bearer secret-token'},
            'requestContext': {'authorizer': {'claims': {'sub': 'owner-1', 'email': 'owner@example.com'}}}
        }

        with caplog.at_level(logging.INFO, logger='helpwall'):
            log_event(event)

        assert '/tasks/{taskId}/thanks' in caplog.text
        assert 'owner-1' in caplog.text
        assert 'Biscuit' not in caplog.text
        assert 'secret-token' not in caplog.text
        assert 'owner@example.com' not in caplog.text
