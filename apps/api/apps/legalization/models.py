"""
Legalization models: requests, work_days, entries, audit_logs.
"""
from django.conf import settings
from django.core.validators import MinLengthValidator, RegexValidator
from django.db import models


MONTH_VALIDATOR = RegexValidator(
    regex=r'^\d{4}-(0[1-9]|1[0-2])$',
    message='Month must be in YYYY-MM format',
    code='invalid_month',
)

# PositiveIntegerField upper bound on PostgreSQL
MAX_UNIT_COUNT = 2147483647


class MeterCategoryChoices(models.TextChoices):
    """
    Meter size categories counted separately in plans and entries.

    - SMALL: Qn < 15 m3/h
    - LARGE: Qn > 15 m3/h
    - COUPLED: coupled (combination) meters
    """
    SMALL = 'small', 'Qn < 15'
    LARGE = 'large', 'Qn > 15'
    COUPLED = 'coupled', 'Sprzężone'


class Request(models.Model):
    """
    A work order: planned number of meters to legalize for one applicant
    in one month.

    The plan breakdown (``planned_small``/``planned_large``/``planned_coupled``)
    is optional; when present its sum equals ``planned_count``. ``notes``
    holds the composed human-readable summary written at creation time.

    BUSINESS RULES:
    - planned_count > 0
    - Cannot be deleted while entries reference it
    """
    applicant_name = models.CharField(max_length=191, validators=[MinLengthValidator(2)])
    month = models.CharField(max_length=7, validators=[MONTH_VALIDATOR], help_text='YYYY-MM')
    planned_count = models.PositiveIntegerField()
    application_number = models.CharField(max_length=100, blank=True, default='')
    submitted_on = models.DateField(null=True, blank=True)
    planned_small = models.PositiveIntegerField(null=True, blank=True)
    planned_large = models.PositiveIntegerField(null=True, blank=True)
    planned_coupled = models.PositiveIntegerField(null=True, blank=True)
    notes = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'requests'
        verbose_name = 'Request'
        verbose_name_plural = 'Requests'
        ordering = ['-id']
        indexes = [
            models.Index(fields=['month'], name='idx_request_month'),
        ]

    def __str__(self):
        return f"{self.applicant_name} ({self.month})"

    @property
    def has_plan_breakdown(self):
        return any(
            value is not None
            for value in (self.planned_small, self.planned_large, self.planned_coupled)
        )

    def planned_for(self, category):
        return getattr(self, f'planned_{category}')


class WorkDay(models.Model):
    """A calendar day on which field work may take place."""
    date = models.DateField(unique=True)
    is_open = models.BooleanField(default=True)
    notes = models.TextField(blank=True, default='')

    class Meta:
        db_table = 'work_days'
        verbose_name = 'Work Day'
        verbose_name_plural = 'Work Days'
        ordering = ['-date']

    def __str__(self):
        return f"{self.date.isoformat()} ({'open' if self.is_open else 'closed'})"


class Entry(models.Model):
    """
    Units completed by one inspector against a request on a work day.

    Immutable once written: there is no update or delete path.
    """
    request = models.ForeignKey(
        Request,
        on_delete=models.PROTECT,
        related_name='entries'
    )
    work_day = models.ForeignKey(
        WorkDay,
        on_delete=models.PROTECT,
        related_name='entries'
    )
    inspector = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='entries'
    )
    count_small = models.PositiveIntegerField(default=0)
    count_large = models.PositiveIntegerField(default=0)
    count_coupled = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'entries'
        verbose_name = 'Entry'
        verbose_name_plural = 'Entries'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['request', 'inspector'], name='idx_entry_request_inspector'),
            models.Index(fields=['created_at'], name='idx_entry_created'),
        ]

    def __str__(self):
        return f"Entry #{self.pk}: {self.total} units for request {self.request_id}"

    @property
    def total(self):
        return self.count_small + self.count_large + self.count_coupled


class AuditLog(models.Model):
    """
    Generic change record (actor, entity, previous/next serialized state).

    Reserved for future use: no write path populates it yet.
    """
    actor = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='audit_logs'
    )
    entity_type = models.CharField(max_length=50)
    entity_id = models.IntegerField()
    prev = models.TextField(null=True, blank=True)
    next = models.TextField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'audit_logs'
        verbose_name = 'Audit Log'
        verbose_name_plural = 'Audit Logs'
        ordering = ['-created_at']

    def __str__(self):
        return f"{self.entity_type}#{self.entity_id} by {self.actor_id}"
