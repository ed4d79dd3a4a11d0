"""
Move per-category plans out of request notes into typed columns.

Usage:
    python manage.py backfill_plan_breakdown
    python manage.py backfill_plan_breakdown --dry-run

Only requests without a typed breakdown are considered. Columns are filled
when the parsed breakdown adds up to the planned count; otherwise the
request is reported and left untouched. Categories the notes do not
mention stay NULL, as on requests created without them.
"""
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.legalization.breakdown import parse_plan_breakdown
from apps.legalization.models import Request


class Command(BaseCommand):
    help = 'Fill planned_small/planned_large/planned_coupled from tagged request notes'

    def add_arguments(self, parser):
        parser.add_argument(
            '--dry-run',
            action='store_true',
            help='Report what would change without writing',
        )

    def handle(self, *args, **options):
        dry_run = options['dry_run']
        pending = Request.objects.filter(
            planned_small__isnull=True,
            planned_large__isnull=True,
            planned_coupled__isnull=True,
        ).exclude(notes='')

        updated = 0
        skipped = 0

        for req in pending.iterator():
            breakdown = parse_plan_breakdown(req.notes)
            if breakdown.is_empty:
                continue

            if breakdown.total != req.planned_count:
                skipped += 1
                self.stdout.write(self.style.WARNING(
                    f'  Request #{req.id}: breakdown sums to {breakdown.total}, '
                    f'planned {req.planned_count} - skipped'
                ))
                continue

            updated += 1
            if dry_run:
                self.stdout.write(f'  Request #{req.id}: would set {breakdown}')
                continue

            with transaction.atomic():
                Request.objects.filter(pk=req.pk).update(
                    planned_small=breakdown.small,
                    planned_large=breakdown.large,
                    planned_coupled=breakdown.coupled,
                )

        verb = 'Would update' if dry_run else 'Updated'
        self.stdout.write(self.style.SUCCESS(f'✓ {verb} {updated} request(s), skipped {skipped}'))
