from django.contrib import admin
from .models import AuditLog, Entry, Request, WorkDay


@admin.register(Request)
class RequestAdmin(admin.ModelAdmin):
    list_display = ['applicant_name', 'month', 'planned_count', 'application_number', 'submitted_on', 'created_at']
    list_filter = ['month']
    search_fields = ['applicant_name', 'application_number']
    readonly_fields = ['id', 'created_at']


@admin.register(WorkDay)
class WorkDayAdmin(admin.ModelAdmin):
    list_display = ['date', 'is_open', 'notes']
    list_filter = ['is_open']
    ordering = ['-date']


@admin.register(Entry)
class EntryAdmin(admin.ModelAdmin):
    list_display = ['id', 'request', 'work_day', 'inspector', 'count_small', 'count_large', 'count_coupled', 'created_at']
    list_filter = ['work_day__date']
    search_fields = ['request__applicant_name', 'inspector__name']
    readonly_fields = ['request', 'work_day', 'inspector', 'count_small', 'count_large', 'count_coupled', 'created_at']

    def has_change_permission(self, request, obj=None):
        # Entries are immutable
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ['created_at', 'entity_type', 'entity_id', 'actor']
    list_filter = ['entity_type', 'created_at']
    readonly_fields = ['id', 'created_at', 'actor', 'entity_type', 'entity_id', 'prev', 'next']

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
