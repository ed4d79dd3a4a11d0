"""Legalization views: requests, work days, entries, dashboard."""
from django.conf import settings
from django.core.exceptions import ValidationError
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import mixins, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.models import RoleChoices
from apps.authz.permissions import IsAdminOrReadOnly, is_admin
from .aggregation import build_dashboard, build_request_dashboard, recent_entries
from .models import Request, WorkDay
from .serializers import (
    DashboardSerializer,
    DiagnosticsSerializer,
    EntryCreateSerializer,
    EntrySerializer,
    RequestCreateSerializer,
    RequestDashboardSerializer,
    RequestSerializer,
    WorkDayCreateSerializer,
    WorkDaySerializer,
)
from .services import (
    LegalizationError,
    RequestNotFoundError,
    create_entry,
    create_request,
    create_work_day,
    delete_request,
    parse_positive_id,
)

MAX_RECENT_LIMIT = 100


def error_response(exc):
    """Translate a service error into ``{error, error_type}``."""
    if isinstance(exc, LegalizationError):
        return Response(
            {'error': exc.message, 'error_type': exc.error_type},
            status=exc.http_status
        )
    # Model-level full_clean() failures
    detail = exc.message_dict if hasattr(exc, 'error_dict') else exc.messages
    return Response(
        {'error': detail, 'error_type': 'validation_error'},
        status=status.HTTP_400_BAD_REQUEST
    )


def invalid_input_response(serializer):
    return Response(
        {'error': serializer.errors, 'error_type': 'validation_error'},
        status=status.HTTP_400_BAD_REQUEST
    )


def collect_setup_issues(user, requests_count, work_days_count):
    """Human-readable reasons why the administration screen may look empty."""
    issues = []
    placeholder_domain = settings.LEGALIZATION['PLACEHOLDER_EMAIL_DOMAIN']
    if user.email.endswith(f'@{placeholder_domain}'):
        issues.append('Identity provider supplied no e-mail address.')
    if user.role != RoleChoices.ADMIN:
        issues.append(f'Your role is "{user.role}", expected "{RoleChoices.ADMIN}".')
    if requests_count == 0:
        issues.append('No requests registered yet.')
    if work_days_count == 0:
        issues.append('No work days registered yet.')
    return issues


def _recent_limit(request):
    default = settings.LEGALIZATION['RECENT_ENTRIES_LIMIT']
    try:
        limit = int(request.query_params.get('limit', default))
    except (TypeError, ValueError):
        return default
    return min(max(limit, 1), MAX_RECENT_LIMIT)


class RequestViewSet(
    mixins.ListModelMixin,
    mixins.RetrieveModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for requests (work orders).

    Endpoints:
    - GET /api/v1/requests/ - List requests, newest first (?month=YYYY-MM)
    - GET /api/v1/requests/{id}/ - Request detail
    - POST /api/v1/requests/ - Create request (Admin only)
    - DELETE /api/v1/requests/{id}/?confirm=true - Delete request (Admin only)
    - GET /api/v1/requests/{id}/progress/ - Totals, progress, inspector ranking

    RBAC:
    - Inspector: read-only
    - Admin: create / delete
    """
    serializer_class = RequestSerializer
    permission_classes = [IsAdminOrReadOnly]

    def get_queryset(self):
        queryset = Request.objects.all()

        month = self.request.query_params.get('month')
        if month:
            queryset = queryset.filter(month=month)

        return queryset.order_by('-id')

    @extend_schema(request=RequestCreateSerializer, responses={201: RequestSerializer})
    def create(self, request, *args, **kwargs):
        serializer = RequestCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer)

        try:
            req = create_request(**serializer.validated_data)
        except ValidationError as e:
            return error_response(e)

        return Response(RequestSerializer(req).data, status=status.HTTP_201_CREATED)

    @extend_schema(parameters=[OpenApiParameter('confirm', bool, required=True)])
    def destroy(self, request, pk=None, *args, **kwargs):
        """
        Delete a request. Requires ``confirm=true`` (query string or body).

        Blocked while entries reference the request.
        """
        confirmed = request.query_params.get('confirm')
        if confirmed is None and hasattr(request.data, 'get'):
            confirmed = request.data.get('confirm')

        try:
            delete_request(request.user, pk, confirmed)
        except LegalizationError as e:
            return error_response(e)

        return Response(status=status.HTTP_204_NO_CONTENT)

    @extend_schema(responses={200: RequestDashboardSerializer})
    @action(detail=True, methods=['get'], url_path='progress')
    def progress(self, request, pk=None):
        """
        Per-request dashboard.

        GET /api/v1/requests/{id}/progress/?limit=12
        """
        try:
            req = Request.objects.filter(pk=parse_positive_id(pk)).first()
            if req is None:
                raise RequestNotFoundError()
        except LegalizationError as e:
            return error_response(e)

        data = build_request_dashboard(req, recent_limit=_recent_limit(request))
        return Response(RequestDashboardSerializer(data).data)


class WorkDayViewSet(
    mixins.ListModelMixin,
    viewsets.GenericViewSet
):
    """
    ViewSet for work days.

    Endpoints:
    - GET /api/v1/work-days/ - List work days, latest date first
    - POST /api/v1/work-days/ - Create work day (Admin only)
    """
    queryset = WorkDay.objects.all().order_by('-date')
    serializer_class = WorkDaySerializer
    permission_classes = [IsAdminOrReadOnly]

    @extend_schema(request=WorkDayCreateSerializer, responses={201: WorkDaySerializer})
    def create(self, request, *args, **kwargs):
        serializer = WorkDayCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer)

        try:
            work_day = create_work_day(**serializer.validated_data)
        except LegalizationError as e:
            return error_response(e)

        return Response(WorkDaySerializer(work_day).data, status=status.HTTP_201_CREATED)


class EntryViewSet(viewsets.GenericViewSet):
    """
    ViewSet for inspector entries (immutable).

    Endpoints:
    - GET /api/v1/entries/ - Most recent entries (?request=<id>, ?limit=12)
    - POST /api/v1/entries/ - Log completed units as the current user
    """
    serializer_class = EntrySerializer
    permission_classes = [IsAuthenticated]

    def list(self, request):
        request_id = request.query_params.get('request')
        if request_id is not None:
            try:
                request_id = parse_positive_id(request_id)
            except LegalizationError as e:
                return error_response(e)

        entries = recent_entries(_recent_limit(request), request_id=request_id)
        return Response(EntrySerializer(entries, many=True).data)

    @extend_schema(request=EntryCreateSerializer, responses={201: EntrySerializer})
    def create(self, request):
        serializer = EntryCreateSerializer(data=request.data)
        if not serializer.is_valid():
            return invalid_input_response(serializer)

        try:
            entry = create_entry(
                inspector=request.user,
                request=serializer.validated_data['request'],
                work_day=serializer.validated_data['work_day'],
                counts=serializer.validated_data['counts'],
            )
        except LegalizationError as e:
            return error_response(e)

        return Response(EntrySerializer(entry).data, status=status.HTTP_201_CREATED)


class DashboardView(APIView):
    """
    Progress of every request plus the latest entries system-wide.

    GET /api/v1/dashboard/?month=YYYY-MM&limit=12
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: DashboardSerializer})
    def get(self, request):
        month = request.query_params.get('month') or None
        data = build_dashboard(month=month, recent_limit=_recent_limit(request))
        return Response(DashboardSerializer(data).data)


class AdminDiagnosticsView(APIView):
    """
    Self-check for the administration screen.

    GET /api/v1/admin/diagnostics/

    Open to every authenticated user so that someone who cannot see the
    administration screen can find out why (wrong role, missing e-mail).
    """
    permission_classes = [IsAuthenticated]

    @extend_schema(responses={200: DiagnosticsSerializer})
    def get(self, request):
        user = request.user
        requests_count = Request.objects.count()
        work_days_count = WorkDay.objects.count()

        data = {
            'external_id': user.external_id,
            'email': user.email,
            'user_id': user.id,
            'role': user.role,
            'is_admin': is_admin(user),
            'requests_count': requests_count,
            'work_days_count': work_days_count,
            'issues': collect_setup_issues(user, requests_count, work_days_count),
        }
        return Response(DiagnosticsSerializer(data).data)
