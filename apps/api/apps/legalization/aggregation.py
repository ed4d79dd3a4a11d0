"""
Read-side aggregation for the dashboard.

Recomputed on every view; there is no cache. Concurrent entry inserts may
be observed mid-flight, the client simply refreshes.
"""
from typing import Dict, List, Optional

from django.conf import settings
from django.db.models import F, IntegerField, Sum, Value
from django.db.models.functions import Coalesce

from apps.core.observability import metrics
from .models import Entry, MeterCategoryChoices, Request
from .progress import compute_progress

CATEGORY_FIELDS = {
    MeterCategoryChoices.SMALL.value: 'count_small',
    MeterCategoryChoices.LARGE.value: 'count_large',
    MeterCategoryChoices.COUPLED.value: 'count_coupled',
}

_ENTRY_TOTAL = F('count_small') + F('count_large') + F('count_coupled')


def _category_sums():
    return {
        category: Coalesce(Sum(field), Value(0), output_field=IntegerField())
        for category, field in CATEGORY_FIELDS.items()
    }


def request_totals(request_id) -> Dict[str, int]:
    """Sum of each category (and their total) over all entries of a request."""
    sums = Entry.objects.filter(request_id=request_id).aggregate(**_category_sums())
    totals = {category: int(value) for category, value in sums.items()}
    totals['total'] = sum(totals.values())
    return totals


def inspector_totals(request_id) -> List[Dict]:
    """
    Per-inspector category sums for a request, largest total first.

    Ties are broken by inspector name so the ranking is stable.
    """
    rows = (
        Entry.objects
        .filter(request_id=request_id)
        .values('inspector_id', inspector_name=F('inspector__name'))
        .annotate(**_category_sums())
        .annotate(total=F('small') + F('large') + F('coupled'))
        .order_by('-total', 'inspector_name')
    )
    return [
        {
            'inspector_id': row['inspector_id'],
            'inspector_name': row['inspector_name'],
            'small': row['small'],
            'large': row['large'],
            'coupled': row['coupled'],
            'total': row['total'],
        }
        for row in rows
    ]


def recent_entries(limit: Optional[int] = None, request_id=None):
    """
    Newest entries, each annotated with ``entry_total`` (sum of its categories).

    System-wide unless ``request_id`` is given.
    """
    if limit is None:
        limit = settings.LEGALIZATION['RECENT_ENTRIES_LIMIT']

    queryset = Entry.objects.select_related('inspector', 'request', 'work_day')
    if request_id is not None:
        queryset = queryset.filter(request_id=request_id)

    return list(
        queryset
        .annotate(entry_total=_ENTRY_TOTAL)
        .order_by('-created_at', '-id')[:limit]
    )


def request_progress(req: Request, totals: Optional[Dict[str, int]] = None) -> Dict:
    """
    Progress of a request: overall, and per category when the request has
    a plan breakdown. Categories without a planned value are omitted.
    """
    if totals is None:
        totals = request_totals(req.id)

    result = {
        'total': compute_progress(req.planned_count, [totals['total']]).as_dict(),
        'categories': {},
    }

    if req.has_plan_breakdown:
        for category in CATEGORY_FIELDS:
            planned = req.planned_for(category)
            if planned is None:
                continue
            result['categories'][category] = compute_progress(
                planned, [totals[category]]
            ).as_dict()

    return result


@metrics.track_duration(metrics.dashboard_build_duration_seconds)
def build_request_dashboard(req: Request, recent_limit: Optional[int] = None) -> Dict:
    totals = request_totals(req.id)
    return {
        'request': req,
        'totals': totals,
        'progress': request_progress(req, totals),
        'inspectors': inspector_totals(req.id),
        'recent_entries': recent_entries(recent_limit, request_id=req.id),
    }


@metrics.track_duration(metrics.dashboard_build_duration_seconds)
def build_dashboard(month: Optional[str] = None, recent_limit: Optional[int] = None) -> Dict:
    """All requests (optionally for one month) with their progress."""
    requests = Request.objects.all()
    if month:
        requests = requests.filter(month=month)

    items = []
    for req in requests:
        totals = request_totals(req.id)
        items.append({
            'request': req,
            'totals': totals,
            'progress': request_progress(req, totals),
        })

    return {
        'month': month,
        'requests': items,
        'recent_entries': recent_entries(recent_limit),
    }
