"""Legalization serializers: input validation and dashboard output."""
from rest_framework import serializers

from apps.authz.serializers import InspectorSerializer
from .breakdown import PlanBreakdown
from .models import MAX_UNIT_COUNT, Entry, MeterCategoryChoices, Request, WorkDay
from .services import LegalizationError, sanitize_entry_count

MONTH_PATTERN = r'^\d{4}-(0[1-9]|1[0-2])$'


# ============================================================================
# Requests
# ============================================================================

class RequestSerializer(serializers.ModelSerializer):
    """Read representation of a request."""

    plan_breakdown = serializers.SerializerMethodField()

    class Meta:
        model = Request
        fields = [
            'id', 'applicant_name', 'month', 'planned_count',
            'application_number', 'submitted_on', 'plan_breakdown',
            'notes', 'created_at'
        ]
        read_only_fields = fields

    def get_plan_breakdown(self, obj):
        if not obj.has_plan_breakdown:
            return None
        return {
            'small': obj.planned_small,
            'large': obj.planned_large,
            'coupled': obj.planned_coupled,
        }


class RequestCreateSerializer(serializers.Serializer):
    """
    Create-Request input.

    The plan is given either as ``planned_count`` or as category sub-counts
    (``planned_small``/``planned_large``/``planned_coupled``), whose sum
    becomes the planned count. Supplying both requires them to agree.
    """
    applicant_name = serializers.CharField(min_length=2, max_length=191)
    month = serializers.RegexField(
        MONTH_PATTERN,
        max_length=7,
        error_messages={'invalid': 'Month must be in YYYY-MM format.'}
    )
    planned_count = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    planned_small = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    planned_large = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    planned_coupled = serializers.IntegerField(required=False, allow_null=True, min_value=0)
    application_number = serializers.CharField(required=False, allow_blank=True, max_length=100, default='')
    submitted_on = serializers.DateField(required=False, allow_null=True, input_formats=['%Y-%m-%d'])
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate(self, attrs):
        breakdown = PlanBreakdown(
            small=attrs.pop('planned_small', None),
            large=attrs.pop('planned_large', None),
            coupled=attrs.pop('planned_coupled', None),
        )
        planned = attrs.get('planned_count')

        if breakdown.is_empty:
            if planned is None:
                raise serializers.ValidationError({
                    'planned_count': 'Provide planned_count or the category sub-counts.'
                })
            attrs['breakdown'] = None
            return attrs

        if planned is not None and planned != breakdown.total:
            raise serializers.ValidationError({
                'planned_count': f'Planned count {planned} does not match the category sum {breakdown.total}.'
            })
        if breakdown.total <= 0:
            raise serializers.ValidationError({
                'planned_count': 'Planned count must be a positive integer.'
            })

        attrs['planned_count'] = breakdown.total
        attrs['breakdown'] = breakdown
        return attrs


# ============================================================================
# Work days
# ============================================================================

class WorkDaySerializer(serializers.ModelSerializer):
    """Read representation of a work day."""

    class Meta:
        model = WorkDay
        fields = ['id', 'date', 'is_open', 'notes']
        read_only_fields = fields


class WorkDayCreateSerializer(serializers.Serializer):
    """Create-WorkDay input. ``is_open`` defaults to open."""
    date = serializers.DateField(input_formats=['%Y-%m-%d'])
    is_open = serializers.BooleanField(required=False, default=True)
    notes = serializers.CharField(required=False, allow_blank=True, default='')

    def validate_date(self, value):
        if WorkDay.objects.filter(date=value).exists():
            raise serializers.ValidationError(f'Work day {value.isoformat()} already exists.')
        return value


# ============================================================================
# Entries
# ============================================================================

class EntrySerializer(serializers.ModelSerializer):
    """Read representation of an entry with its derived total."""

    inspector = InspectorSerializer(read_only=True)
    applicant_name = serializers.CharField(source='request.applicant_name', read_only=True)
    work_day_date = serializers.DateField(source='work_day.date', read_only=True)
    total = serializers.SerializerMethodField()

    class Meta:
        model = Entry
        fields = [
            'id', 'request', 'applicant_name', 'work_day', 'work_day_date',
            'inspector', 'count_small', 'count_large', 'count_coupled',
            'total', 'created_at'
        ]
        read_only_fields = fields

    def get_total(self, obj):
        return getattr(obj, 'entry_total', obj.total)


class EntryCreateSerializer(serializers.Serializer):
    """
    Create-Entry input.

    Either one ``category`` with a typed-in ``count`` (sanitized: comma as
    decimal separator, floored, at least 1; category defaults to small for
    single-count clients), or explicit ``count_small``/``count_large``/
    ``count_coupled`` values.
    """
    request = serializers.PrimaryKeyRelatedField(queryset=Request.objects.all())
    work_day = serializers.PrimaryKeyRelatedField(queryset=WorkDay.objects.all())
    category = serializers.ChoiceField(choices=MeterCategoryChoices.choices, required=False)
    count = serializers.CharField(required=False, allow_blank=False, trim_whitespace=True)
    count_small = serializers.IntegerField(required=False, min_value=0, max_value=MAX_UNIT_COUNT)
    count_large = serializers.IntegerField(required=False, min_value=0, max_value=MAX_UNIT_COUNT)
    count_coupled = serializers.IntegerField(required=False, min_value=0, max_value=MAX_UNIT_COUNT)

    def validate(self, attrs):
        per_category = {
            category: attrs.pop(f'count_{category}')
            for category in MeterCategoryChoices.values
            if f'count_{category}' in attrs
        }
        raw_count = attrs.pop('count', None)
        category = attrs.pop('category', None)

        if raw_count is not None:
            if per_category:
                raise serializers.ValidationError(
                    'Send either category + count or per-category counts, not both.'
                )
            try:
                value = sanitize_entry_count(raw_count)
            except LegalizationError as e:
                raise serializers.ValidationError({'count': e.message})
            attrs['counts'] = {category or MeterCategoryChoices.SMALL.value: value}
            return attrs

        if not any(per_category.values()):
            raise serializers.ValidationError(
                'At least one category count must be positive.'
            )

        attrs['counts'] = per_category
        return attrs


# ============================================================================
# Dashboard
# ============================================================================

class ProgressSerializer(serializers.Serializer):
    planned = serializers.IntegerField()
    done = serializers.IntegerField()
    remaining = serializers.IntegerField()
    overflow = serializers.IntegerField()
    percent = serializers.IntegerField()


class RequestProgressSerializer(serializers.Serializer):
    """Overall progress plus per-category progress for planned categories."""
    total = ProgressSerializer()
    categories = serializers.DictField(child=ProgressSerializer())


class CategoryTotalsSerializer(serializers.Serializer):
    small = serializers.IntegerField()
    large = serializers.IntegerField()
    coupled = serializers.IntegerField()
    total = serializers.IntegerField()


class InspectorTotalsSerializer(CategoryTotalsSerializer):
    inspector_id = serializers.IntegerField()
    inspector_name = serializers.CharField()


class RequestSummarySerializer(serializers.Serializer):
    request = RequestSerializer()
    totals = CategoryTotalsSerializer()
    progress = RequestProgressSerializer()


class RequestDashboardSerializer(RequestSummarySerializer):
    inspectors = InspectorTotalsSerializer(many=True)
    recent_entries = EntrySerializer(many=True)


class DashboardSerializer(serializers.Serializer):
    month = serializers.CharField(allow_null=True)
    requests = RequestSummarySerializer(many=True)
    recent_entries = EntrySerializer(many=True)


class DiagnosticsSerializer(serializers.Serializer):
    """Self-check for the administration screen."""
    external_id = serializers.CharField()
    email = serializers.CharField()
    user_id = serializers.IntegerField()
    role = serializers.CharField()
    is_admin = serializers.BooleanField()
    requests_count = serializers.IntegerField()
    work_days_count = serializers.IntegerField()
    issues = serializers.ListField(child=serializers.CharField())
