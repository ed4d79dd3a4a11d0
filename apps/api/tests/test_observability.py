"""
Tests for observability layer.

Validates that metrics, logs, and events are emitted correctly
without logging PII.
"""
import json
import logging

import pytest
from unittest.mock import Mock, patch
from django.http import HttpResponse
from django.test import RequestFactory

from apps.core.observability.correlation import (
    RequestCorrelationMiddleware,
    bind_user,
    clear_request_context,
    get_request_id,
    get_user_id,
    get_user_role,
)
from apps.core.observability.logging import (
    SENSITIVE_FIELDS,
    CorrelationFilter,
    SanitizedJSONFormatter,
    sanitize_dict,
)
from apps.core.observability.metrics import metrics
from apps.core.observability.events import log_domain_event


@pytest.fixture(autouse=True)
def _clean_context():
    clear_request_context()
    yield
    clear_request_context()


class TestRequestCorrelation:
    """Test request correlation middleware."""

    def test_generates_request_id_if_missing(self):
        middleware = RequestCorrelationMiddleware(lambda r: HttpResponse())
        request = RequestFactory().get('/api/v1/requests/')

        middleware.process_request(request)

        assert request.request_id
        assert get_request_id() == request.request_id

    def test_propagates_existing_request_id(self):
        middleware = RequestCorrelationMiddleware(lambda r: HttpResponse())
        request = RequestFactory().get('/api/v1/requests/', HTTP_X_REQUEST_ID='test-request-123')

        middleware.process_request(request)

        assert request.request_id == 'test-request-123'

    def test_adds_correlation_headers_to_response(self):
        middleware = RequestCorrelationMiddleware(lambda r: HttpResponse())
        request = RequestFactory().get(
            '/api/v1/requests/', HTTP_X_REQUEST_ID='req-1', HTTP_X_TRACE_ID='trace-1'
        )

        middleware.process_request(request)
        response = middleware.process_response(request, HttpResponse())

        assert response['X-Request-ID'] == 'req-1'
        assert response['X-Trace-ID'] == 'trace-1'

    def test_counts_completed_requests(self):
        middleware = RequestCorrelationMiddleware(lambda r: HttpResponse())
        request = RequestFactory().get('/api/v1/dashboard/')
        counter = metrics.http_requests_total.labels(method='GET', status='200')
        before = counter._value.get()

        middleware.process_request(request)
        middleware.process_response(request, HttpResponse(status=200))

        assert counter._value.get() == before + 1

    def test_counts_exceptions(self):
        middleware = RequestCorrelationMiddleware(lambda r: HttpResponse())
        request = RequestFactory().get('/api/v1/dashboard/')
        counter = metrics.exceptions_total.labels(exception_type='RuntimeError')
        before = counter._value.get()

        middleware.process_request(request)
        middleware.process_exception(request, RuntimeError('boom'))

        assert counter._value.get() == before + 1

    def test_bind_user(self):
        bind_user(Mock(id=7, role='ADMIN'))

        assert get_user_id() == '7'
        assert get_user_role() == 'ADMIN'


class TestSanitization:

    def test_redacts_pii(self):
        data = {
            'entry_id': 5,
            'email': 'jan@wik.pl',
            'applicant_name': 'PWiK',
            'nested': {'notes': 'Nr wniosku: A1', 'count_small': 3},
            'items': [{'name': 'Jan'}],
        }

        sanitized = sanitize_dict(data)

        assert sanitized['entry_id'] == 5
        assert sanitized['email'] == '[REDACTED]'
        assert sanitized['applicant_name'] == '[REDACTED]'
        assert sanitized['nested'] == {'notes': '[REDACTED]', 'count_small': 3}
        assert sanitized['items'] == [{'name': '[REDACTED]'}]

    def test_sensitive_fields_cover_identity_data(self):
        assert {'email', 'name', 'notes', 'token'} <= SENSITIVE_FIELDS

    def test_json_formatter_redacts_extra_fields(self):
        record = logging.LogRecord('test', logging.INFO, __file__, 1, 'Entry logged', None, None)
        record.event = 'entry_created'
        record.email = 'jan@wik.pl'
        CorrelationFilter().filter(record)

        payload = json.loads(SanitizedJSONFormatter().format(record))

        assert payload['event'] == 'entry_created'
        assert payload['email'] == '[REDACTED]'
        assert payload['request_id'] == '-'
        assert payload['level'] == 'INFO'


class TestDomainEvents:

    def test_blocked_events_log_as_warning(self):
        with patch('apps.core.observability.events.logger') as logger:
            log_domain_event('request_delete_blocked', entity_type='Request', entity_id='1', result='blocked')

        logger.warning.assert_called_once()
        extra = logger.warning.call_args.kwargs['extra']
        assert extra['event'] == 'request_delete_blocked'
        assert extra['entity_id'] == '1'

    def test_extra_fields_are_sanitized(self):
        with patch('apps.core.observability.events.logger') as logger:
            log_domain_event('user_provisioned', entity_type='User', entity_id='3', email='jan@wik.pl')

        extra = logger.info.call_args.kwargs['extra']
        assert extra['email'] == '[REDACTED]'


@pytest.mark.django_db
class TestHealthEndpoints:

    def test_healthz(self, api_client):
        response = api_client.get('/healthz')

        assert response.status_code == 200
        assert response.json()['status'] == 'ok'

    def test_readyz(self, api_client):
        response = api_client.get('/readyz')

        assert response.status_code == 200
        assert response.json()['checks'] == {'database': True, 'migrations': True}
