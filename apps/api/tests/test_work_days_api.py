"""
Tests for /api/v1/work-days/.
"""
import datetime

import pytest

from apps.legalization.models import WorkDay


@pytest.mark.django_db
class TestWorkDays:

    def test_admin_creates_open_day_by_default(self, admin_client):
        response = admin_client.post('/api/v1/work-days/', {
            'date': '2025-01-20',
            'notes': 'Start legalizacji',
        }, format='json')

        assert response.status_code == 201
        data = response.json()
        assert data['date'] == '2025-01-20'
        assert data['is_open'] is True
        assert data['notes'] == 'Start legalizacji'

    def test_closed_day(self, admin_client):
        response = admin_client.post('/api/v1/work-days/', {
            'date': '2025-01-21',
            'is_open': False,
        }, format='json')

        assert response.status_code == 201
        assert WorkDay.objects.get(date=datetime.date(2025, 1, 21)).is_open is False

    def test_duplicate_date_rejected(self, admin_client, work_day):
        response = admin_client.post('/api/v1/work-days/', {
            'date': work_day.date.isoformat(),
        }, format='json')

        assert response.status_code == 400
        assert response.json()['error_type'] == 'validation_error'
        assert WorkDay.objects.count() == 1

    def test_invalid_date_rejected(self, admin_client):
        response = admin_client.post('/api/v1/work-days/', {'date': '20.01.2025'}, format='json')

        assert response.status_code == 400
        assert WorkDay.objects.count() == 0

    def test_inspector_cannot_create(self, inspector_client):
        response = inspector_client.post('/api/v1/work-days/', {'date': '2025-01-20'}, format='json')

        assert response.status_code == 403
        assert WorkDay.objects.count() == 0

    def test_list_latest_first(self, inspector_client):
        WorkDay.objects.create(date=datetime.date(2025, 1, 10))
        WorkDay.objects.create(date=datetime.date(2025, 1, 12))
        WorkDay.objects.create(date=datetime.date(2025, 1, 11))

        response = inspector_client.get('/api/v1/work-days/')

        assert response.status_code == 200
        dates = [d['date'] for d in response.json()['results']]
        assert dates == ['2025-01-12', '2025-01-11', '2025-01-10']
