"""
Metrics instrumentation (Prometheus client).
"""
import time
from functools import wraps

from prometheus_client import Counter, Histogram


class MetricsRegistry:
    """
    Central metrics registry.

    Provides typed access to all application metrics.
    """

    def __init__(self):
        self._setup_metrics()

    def _setup_metrics(self):

        # ===================================================================
        # HTTP Metrics
        # ===================================================================
        self.http_requests_total = Counter(
            'http_requests_total',
            'Total HTTP requests',
            ['method', 'status']
        )

        self.http_request_duration_seconds = Histogram(
            'http_request_duration_seconds',
            'HTTP request duration in seconds',
            ['method'],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
        )

        self.exceptions_total = Counter(
            'exceptions_total',
            'Total unhandled exceptions',
            ['exception_type']
        )

        # ===================================================================
        # Identity Metrics
        # ===================================================================
        self.users_provisioned_total = Counter(
            'authz_users_provisioned_total',
            'Local user rows provisioned from the identity provider',
            ['result']  # created, race_recovered
        )

        # ===================================================================
        # Legalization Metrics
        # ===================================================================
        self.requests_created_total = Counter(
            'legalization_requests_created_total',
            'Requests (work orders) created'
        )

        self.requests_deleted_total = Counter(
            'legalization_requests_deleted_total',
            'Request delete attempts',
            ['result']  # deleted, has_entries, failed
        )

        self.work_days_created_total = Counter(
            'legalization_work_days_created_total',
            'Work days created'
        )

        self.entries_created_total = Counter(
            'legalization_entries_created_total',
            'Inspector entries logged'
        )

        self.units_logged_total = Counter(
            'legalization_units_logged_total',
            'Meter units reported by inspectors',
            ['category']  # small, large, coupled
        )

        self.dashboard_build_duration_seconds = Histogram(
            'legalization_dashboard_build_duration_seconds',
            'Time spent aggregating a dashboard view',
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0]
        )

    def track_duration(self, histogram_metric):
        """
        Decorator to track function duration.

        Usage:
            @metrics.track_duration(metrics.dashboard_build_duration_seconds)
            def build_dashboard(month=None):
                ...
        """
        def decorator(func):
            @wraps(func)
            def wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return func(*args, **kwargs)
                finally:
                    histogram_metric.observe(time.time() - start_time)
            return wrapper
        return decorator


# Global metrics instance
metrics = MetricsRegistry()
