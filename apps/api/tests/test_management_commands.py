"""
Tests for management commands: make_admin, seed_sample, backfill_plan_breakdown.
"""
from io import StringIO

import pytest
from django.core.management import call_command
from django.core.management.base import CommandError
from django.utils import timezone

from apps.authz.models import RoleChoices
from apps.legalization.models import Request, WorkDay


@pytest.mark.django_db
class TestMakeAdmin:

    def test_promotes_user_case_insensitively(self, inspector_user):
        out = StringIO()

        call_command('make_admin', 'INSPECTOR@test.com', stdout=out)

        inspector_user.refresh_from_db()
        assert inspector_user.role == RoleChoices.ADMIN
        assert 'inspector@test.com' in out.getvalue()

    def test_unknown_email(self, db):
        with pytest.raises(CommandError):
            call_command('make_admin', 'nobody@test.com')


@pytest.mark.django_db
class TestSeedSample:

    def test_creates_sample_request_and_work_day(self):
        call_command('seed_sample', stdout=StringIO())

        today = timezone.localdate()
        req = Request.objects.get()
        assert req.month == today.strftime('%Y-%m')
        assert req.planned_count == 340
        assert (req.planned_small, req.planned_large, req.planned_coupled) == (320, 18, 2)
        assert req.application_number == 'OUM03.WZ7.45.850.2025'

        work_day = WorkDay.objects.get()
        assert work_day.date == today
        assert work_day.is_open is True
        assert work_day.notes == 'Start legalizacji'

    def test_is_idempotent(self):
        call_command('seed_sample', stdout=StringIO())
        call_command('seed_sample', stdout=StringIO())

        assert Request.objects.count() == 1
        assert WorkDay.objects.count() == 1


@pytest.mark.django_db
class TestBackfillPlanBreakdown:

    def _legacy_request(self, notes, planned):
        return Request.objects.create(
            applicant_name='PWiK Nysa', month='2024-11', planned_count=planned, notes=notes
        )

    def test_fills_columns_from_notes(self):
        req = self._legacy_request('Nr wniosku: A1; Qn<15:320, Qn>15:18, sprzężone:2', 340)

        call_command('backfill_plan_breakdown', stdout=StringIO())

        req.refresh_from_db()
        assert (req.planned_small, req.planned_large, req.planned_coupled) == (320, 18, 2)

    def test_missing_categories_stay_null(self):
        req = self._legacy_request('Małe: 10; Duże: 2', 12)

        call_command('backfill_plan_breakdown', stdout=StringIO())

        req.refresh_from_db()
        assert (req.planned_small, req.planned_large, req.planned_coupled) == (10, 2, None)

    def test_mismatch_is_reported_and_skipped(self):
        req = self._legacy_request('Małe: 10; Duże: 2', 50)
        out = StringIO()

        call_command('backfill_plan_breakdown', stdout=out)

        req.refresh_from_db()
        assert req.planned_small is None
        assert f'Request #{req.id}' in out.getvalue()

    def test_dry_run_writes_nothing(self):
        req = self._legacy_request('Małe: 10; Duże: 2', 12)

        call_command('backfill_plan_breakdown', '--dry-run', stdout=StringIO())

        req.refresh_from_db()
        assert req.has_plan_breakdown is False

    def test_typed_breakdown_is_left_alone(self, legalization_request):
        legalization_request.notes = 'Małe: 1; Duże: 1'
        legalization_request.save()

        call_command('backfill_plan_breakdown', stdout=StringIO())

        legalization_request.refresh_from_db()
        assert legalization_request.planned_small == 320
