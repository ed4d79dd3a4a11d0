"""
Domain events logging helpers.

Provides structured event logging for business operations.
"""
from typing import Dict, Optional
from .logging import get_sanitized_logger, sanitize_dict

logger = get_sanitized_logger(__name__)


def log_domain_event(
    event_name: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    entity_ids: Optional[Dict[str, str]] = None,
    result: str = 'success',
    **extra_fields
):
    """
    Log a domain event with structured data.

    Args:
        event_name: Name of the event (e.g., 'entry_created', 'request_deleted')
        entity_type: Type of entity (e.g., 'Request', 'Entry')
        entity_id: ID of primary entity
        entity_ids: Dictionary of related entity IDs
        result: Result of operation (success, failure, blocked, ...)
        **extra_fields: Additional fields to log (will be sanitized)

    Example:
        log_domain_event(
            'entry_created',
            entity_type='Entry',
            entity_id=str(entry.id),
            entity_ids={'request_id': str(entry.request_id)},
            count_small=3,
        )
    """
    event_data = {
        'event': event_name,
        'result': result,
    }

    if entity_type:
        event_data['entity_type'] = entity_type

    if entity_id:
        event_data['entity_id'] = entity_id

    if entity_ids:
        event_data.update(entity_ids)

    event_data.update(sanitize_dict(extra_fields))

    if result in ['failure', 'error']:
        logger.error(f'Domain event: {event_name}', extra=event_data)
    elif result in ['warning', 'blocked']:
        logger.warning(f'Domain event: {event_name}', extra=event_data)
    else:
        logger.info(f'Domain event: {event_name}', extra=event_data)


def log_user_provisioned(user, result='success'):
    log_domain_event(
        'user_provisioned',
        entity_type='User',
        entity_id=str(user.id),
        result=result,
        role=user.role,
    )


def log_request_created(req):
    log_domain_event(
        'request_created',
        entity_type='Request',
        entity_id=str(req.id),
        month=req.month,
        planned_count=req.planned_count,
        has_breakdown=req.has_plan_breakdown,
    )


def log_request_deleted(request_id, actor_id):
    log_domain_event(
        'request_deleted',
        entity_type='Request',
        entity_id=str(request_id),
        entity_ids={'actor_id': str(actor_id)},
    )


def log_request_delete_blocked(request_id, actor_id, reason):
    """Deletion refused by the store (dependent entries, constraint)."""
    log_domain_event(
        'request_delete_blocked',
        entity_type='Request',
        entity_id=str(request_id),
        entity_ids={'actor_id': str(actor_id)},
        result='blocked',
        reason=reason,
    )


def log_work_day_created(work_day):
    log_domain_event(
        'work_day_created',
        entity_type='WorkDay',
        entity_id=str(work_day.id),
        date=work_day.date.isoformat(),
        is_open=work_day.is_open,
    )


def log_entry_created(entry):
    log_domain_event(
        'entry_created',
        entity_type='Entry',
        entity_id=str(entry.id),
        entity_ids={
            'request_id': str(entry.request_id),
            'work_day_id': str(entry.work_day_id),
            'inspector_id': str(entry.inspector_id),
        },
        count_small=entry.count_small,
        count_large=entry.count_large,
        count_coupled=entry.count_coupled,
    )
