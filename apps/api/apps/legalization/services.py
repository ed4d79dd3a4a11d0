"""
Legalization services - write operations for requests, work days and entries.

Each write is a single insert or delete inside ``transaction.atomic``;
validation happens before the store is touched.
"""
import math
from typing import Dict, Optional

from django.core.exceptions import ValidationError
from django.db import DatabaseError, IntegrityError, transaction
from django.db.models import ProtectedError

from apps.core.observability import metrics
from apps.core.observability.events import (
    log_entry_created,
    log_request_created,
    log_request_delete_blocked,
    log_request_deleted,
    log_work_day_created,
)
from .breakdown import PlanBreakdown, compose_notes
from .models import MAX_UNIT_COUNT, Entry, MeterCategoryChoices, Request, WorkDay


# ============================================================================
# Errors
# ============================================================================

class LegalizationError(ValidationError):
    """Base for errors reported to the caller as ``{error, error_type}``."""
    error_type = 'validation_error'
    http_status = 400
    default_message = 'Invalid input.'

    def __init__(self, message=None):
        super().__init__(message or self.default_message, code=self.error_type)


class ConfirmationRequiredError(LegalizationError):
    """Raised when a destructive operation lacks explicit confirmation."""
    error_type = 'confirmation_required'
    default_message = 'Deletion requires explicit confirmation (confirm=true).'


class BadIdError(LegalizationError):
    """Raised when an id is not a positive integer."""
    error_type = 'bad_id'
    default_message = 'Id must be a positive integer.'


class RequestNotFoundError(LegalizationError):
    error_type = 'not_found'
    http_status = 404
    default_message = 'Request not found.'


class RequestHasEntriesError(LegalizationError):
    """Raised when deleting a request that entries still reference."""
    error_type = 'has_entries'
    http_status = 409
    default_message = 'Request has dependent entries and cannot be deleted.'


class DeleteFailedError(LegalizationError):
    error_type = 'delete_failed'
    http_status = 409
    default_message = 'Delete failed.'


class CreateFailedError(LegalizationError):
    error_type = 'create_failed'
    http_status = 409
    default_message = 'Create failed.'


# ============================================================================
# Input helpers
# ============================================================================

TRUTHY = {'1', 'true', 'on', 'yes', 'y'}


def parse_flag(value) -> bool:
    """Interpret a form/query flag ("on", "true", "1", True) as a boolean."""
    if isinstance(value, bool):
        return value
    if value is None:
        return False
    return str(value).strip().lower() in TRUTHY


def parse_positive_id(value) -> int:
    try:
        parsed = int(str(value).strip())
    except (TypeError, ValueError):
        raise BadIdError()
    if parsed <= 0:
        raise BadIdError()
    return parsed


def sanitize_entry_count(raw) -> int:
    """
    Normalize a typed-in unit count.

    Whitespace is stripped, a comma is read as the decimal separator, the
    value is floored and clamped to at least 1.

    Raises:
        LegalizationError: value is not a finite number, or exceeds
            ``MAX_UNIT_COUNT``
    """
    text = str(raw if raw is not None else '').strip().replace(' ', '').replace(',', '.')
    try:
        value = float(text)
    except ValueError:
        raise LegalizationError('Count must be a number.')
    if not math.isfinite(value):
        raise LegalizationError('Count must be a finite number.')
    count = max(1, math.floor(value))
    if count > MAX_UNIT_COUNT:
        raise LegalizationError(f'Count cannot exceed {MAX_UNIT_COUNT}.')
    return count


# ============================================================================
# Requests
# ============================================================================

def create_request(
    applicant_name: str,
    month: str,
    planned_count: int,
    breakdown: Optional[PlanBreakdown] = None,
    application_number: str = '',
    submitted_on=None,
    notes: str = '',
) -> Request:
    """
    Create a request (work order).

    Args:
        applicant_name: at least 2 characters (validated by the serializer)
        month: YYYY-MM
        planned_count: positive total; equals ``breakdown.total`` when a
            breakdown is given
        breakdown: optional per-category plan
        application_number: optional application number
        submitted_on: optional submission date
        notes: free text appended after the structured fragments

    Returns:
        Created Request

    Raises:
        LegalizationError: planned count not positive or inconsistent
        CreateFailedError: the store rejected the insert
    """
    if breakdown is not None and breakdown.is_empty:
        breakdown = None

    if planned_count is None or planned_count <= 0:
        raise LegalizationError('Planned count must be a positive integer.')

    if breakdown is not None and breakdown.total != planned_count:
        raise LegalizationError(
            f'Planned count {planned_count} does not match the category sum {breakdown.total}.'
        )

    req = Request(
        applicant_name=applicant_name.strip(),
        month=month,
        planned_count=planned_count,
        application_number=(application_number or '').strip(),
        submitted_on=submitted_on,
        planned_small=breakdown.small if breakdown else None,
        planned_large=breakdown.large if breakdown else None,
        planned_coupled=breakdown.coupled if breakdown else None,
        notes=compose_notes(application_number, submitted_on, breakdown, notes),
    )
    req.full_clean()

    try:
        with transaction.atomic():
            req.save()
    except DatabaseError as e:
        raise CreateFailedError(f'Create failed: {e.__class__.__name__}')

    metrics.requests_created_total.inc()
    log_request_created(req)
    return req


def delete_request(actor, request_id, confirmed) -> None:
    """
    Delete a request after explicit confirmation.

    Deletion never cascades: a request referenced by entries stays intact.

    Raises:
        ConfirmationRequiredError: ``confirmed`` is not set
        BadIdError: ``request_id`` is not a positive integer
        RequestNotFoundError: no such request
        RequestHasEntriesError: entries reference the request
        DeleteFailedError: any other store failure
    """
    if not parse_flag(confirmed):
        raise ConfirmationRequiredError()

    pk = parse_positive_id(request_id)

    try:
        req = Request.objects.get(pk=pk)
    except Request.DoesNotExist:
        raise RequestNotFoundError()

    try:
        with transaction.atomic():
            req.delete()
    except ProtectedError:
        metrics.requests_deleted_total.labels(result='has_entries').inc()
        log_request_delete_blocked(pk, actor.id, reason='has_entries')
        raise RequestHasEntriesError()
    except DatabaseError as e:
        metrics.requests_deleted_total.labels(result='failed').inc()
        log_request_delete_blocked(pk, actor.id, reason=e.__class__.__name__)
        raise DeleteFailedError()

    metrics.requests_deleted_total.labels(result='deleted').inc()
    log_request_deleted(pk, actor.id)


# ============================================================================
# Work days
# ============================================================================

def create_work_day(date, is_open: bool = True, notes: str = '') -> WorkDay:
    """
    Register a calendar day for field work.

    Raises:
        CreateFailedError: the day already exists or the insert failed
    """
    work_day = WorkDay(date=date, is_open=is_open, notes=(notes or '').strip())

    try:
        with transaction.atomic():
            work_day.save()
    except IntegrityError:
        raise CreateFailedError(f'Work day {date.isoformat()} already exists.')
    except DatabaseError as e:
        raise CreateFailedError(f'Create failed: {e.__class__.__name__}')

    metrics.work_days_created_total.inc()
    log_work_day_created(work_day)
    return work_day


# ============================================================================
# Entries
# ============================================================================

def create_entry(inspector, request: Request, work_day: WorkDay, counts: Dict[str, int]) -> Entry:
    """
    Record units completed by ``inspector``.

    Args:
        inspector: provisioned User (authorship is always attributed)
        request: Request the work counts against
        work_day: WorkDay the work was done on
        counts: mapping of category (small/large/coupled) to units

    Raises:
        LegalizationError: negative counts, counts above ``MAX_UNIT_COUNT``,
            or no unit recorded at all
        CreateFailedError: the store rejected the insert
    """
    values = {category: int(counts.get(category) or 0) for category in MeterCategoryChoices.values}

    if any(v < 0 for v in values.values()):
        raise LegalizationError('Counts cannot be negative.')
    if any(v > MAX_UNIT_COUNT for v in values.values()):
        raise LegalizationError(f'Counts cannot exceed {MAX_UNIT_COUNT}.')
    if not any(values.values()):
        raise LegalizationError('At least one category count must be positive.')

    try:
        with transaction.atomic():
            entry = Entry.objects.create(
                request=request,
                work_day=work_day,
                inspector=inspector,
                count_small=values[MeterCategoryChoices.SMALL.value],
                count_large=values[MeterCategoryChoices.LARGE.value],
                count_coupled=values[MeterCategoryChoices.COUPLED.value],
            )
    except DatabaseError as e:
        raise CreateFailedError(f'Create failed: {e.__class__.__name__}')

    metrics.entries_created_total.inc()
    for category, value in values.items():
        if value:
            metrics.units_logged_total.labels(category=category).inc(value)
    log_entry_created(entry)
    return entry
