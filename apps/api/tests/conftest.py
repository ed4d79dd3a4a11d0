"""
Global test fixtures for pytest.

Provides reusable fixtures for API testing:
- Authenticated API clients by role
- Model instances (Request, WorkDay, Entry)
- Token minting for the external identity provider
"""
import datetime

import jwt
import pytest
from django.conf import settings
from rest_framework.test import APIClient

from apps.authz.models import User, RoleChoices
from apps.legalization.models import Entry, Request, WorkDay


# ============================================================================
# Users
# ============================================================================

@pytest.fixture
def admin_user(db):
    return User.objects.create_user(
        external_id='user_admin',
        email='admin@test.com',
        name='Anna Admin',
        role=RoleChoices.ADMIN,
    )


@pytest.fixture
def inspector_user(db):
    return User.objects.create_user(
        external_id='user_inspector',
        email='inspector@test.com',
        name='Jan Kowalski',
    )


@pytest.fixture
def other_inspector(db):
    return User.objects.create_user(
        external_id='user_inspector_2',
        email='inspector2@test.com',
        name='Piotr Nowak',
    )


# ============================================================================
# API Clients
# ============================================================================

@pytest.fixture
def api_client():
    """Unauthenticated DRF API client."""
    return APIClient()


@pytest.fixture
def admin_client(admin_user):
    """Authenticated API client with ADMIN role."""
    client = APIClient()
    client.force_authenticate(user=admin_user)
    return client


@pytest.fixture
def inspector_client(inspector_user):
    """Authenticated API client with INSPECTOR role (read + log entries)."""
    client = APIClient()
    client.force_authenticate(user=inspector_user)
    return client


@pytest.fixture
def make_token():
    """
    Mint a bearer token the way the identity provider would.

    Usage:
        token = make_token(sub='user_123', email='a@b.pl')
    """
    def _make_token(**claims):
        payload = {
            'exp': datetime.datetime.now(datetime.timezone.utc) + datetime.timedelta(minutes=5),
            **claims,
        }
        return jwt.encode(
            payload,
            settings.SIMPLE_JWT['SIGNING_KEY'],
            algorithm=settings.SIMPLE_JWT['ALGORITHM'],
        )
    return _make_token


# ============================================================================
# Domain objects
# ============================================================================

@pytest.fixture
def legalization_request(db):
    """Request planned 340 = 320 small + 18 large + 2 coupled."""
    return Request.objects.create(
        applicant_name='Wodociągi i Kanalizacja Opole',
        month='2025-01',
        planned_count=340,
        planned_small=320,
        planned_large=18,
        planned_coupled=2,
        application_number='OUM03.WZ7.45.850.2025',
        notes='Nr wniosku: OUM03.WZ7.45.850.2025; Qn≤15:320, Qn>15:18, sprzężone:2',
    )


@pytest.fixture
def simple_request(db):
    """Request with a total plan only."""
    return Request.objects.create(
        applicant_name='PWiK Brzeg',
        month='2025-02',
        planned_count=10,
    )


@pytest.fixture
def work_day(db):
    return WorkDay.objects.create(date=datetime.date(2025, 1, 15), is_open=True)


@pytest.fixture
def make_entry(work_day):
    def _make_entry(request, inspector, small=0, large=0, coupled=0, day=None):
        return Entry.objects.create(
            request=request,
            work_day=day or work_day,
            inspector=inspector,
            count_small=small,
            count_large=large,
            count_coupled=coupled,
        )
    return _make_entry
