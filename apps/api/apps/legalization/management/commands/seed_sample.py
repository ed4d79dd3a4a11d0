"""
Seed a sample request and an open work day for local development.

Usage:
    python manage.py seed_sample

Idempotent: nothing is created when the sample request for the current
month or today's work day already exists.
"""
from django.core.management.base import BaseCommand
from django.utils import timezone

from apps.legalization.breakdown import PlanBreakdown
from apps.legalization.models import Request, WorkDay
from apps.legalization.services import create_request, create_work_day

SAMPLE_APPLICANT = 'Wodociągi i Kanalizacja Opole'
SAMPLE_APPLICATION_NUMBER = 'OUM03.WZ7.45.850.2025'
SAMPLE_BREAKDOWN = PlanBreakdown(small=320, large=18, coupled=2)


class Command(BaseCommand):
    help = 'Create a sample request for the current month and an open work day for today'

    def handle(self, *args, **options):
        today = timezone.localdate()
        month = today.strftime('%Y-%m')

        if Request.objects.filter(applicant_name=SAMPLE_APPLICANT, month=month).exists():
            self.stdout.write(self.style.WARNING(f'Sample request for {month} already exists'))
        else:
            req = create_request(
                applicant_name=SAMPLE_APPLICANT,
                month=month,
                planned_count=SAMPLE_BREAKDOWN.total,
                breakdown=SAMPLE_BREAKDOWN,
                application_number=SAMPLE_APPLICATION_NUMBER,
                submitted_on=today,
            )
            self.stdout.write(self.style.SUCCESS(f'✓ Request #{req.id} created ({req.planned_count} planned)'))

        if WorkDay.objects.filter(date=today).exists():
            self.stdout.write(self.style.WARNING(f'Work day {today.isoformat()} already exists'))
        else:
            create_work_day(today, is_open=True, notes='Start legalizacji')
            self.stdout.write(self.style.SUCCESS(f'✓ Work day {today.isoformat()} created'))
