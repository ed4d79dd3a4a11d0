"""Legalization URLs."""
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from .views import (
    AdminDiagnosticsView,
    DashboardView,
    EntryViewSet,
    RequestViewSet,
    WorkDayViewSet,
)

router = DefaultRouter()
router.register(r'requests', RequestViewSet, basename='request')
router.register(r'work-days', WorkDayViewSet, basename='work-day')
router.register(r'entries', EntryViewSet, basename='entry')

urlpatterns = [
    path('dashboard/', DashboardView.as_view(), name='dashboard'),
    path('admin/diagnostics/', AdminDiagnosticsView.as_view(), name='admin-diagnostics'),
    path('', include(router.urls)),
]
