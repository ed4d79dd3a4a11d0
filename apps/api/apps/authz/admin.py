from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin
from .models import User


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    list_display = ['name', 'email', 'external_id', 'role', 'is_active', 'is_staff', 'created_at']
    list_filter = ['role', 'is_active', 'is_staff']
    search_fields = ['name', 'email', 'external_id']
    readonly_fields = ['id', 'external_id', 'created_at', 'last_login']

    fieldsets = (
        (None, {'fields': ('id', 'external_id', 'password')}),
        ('Profile', {'fields': ('name', 'email', 'role')}),
        ('Permissions', {'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions')}),
        ('Important dates', {'fields': ('last_login', 'created_at')}),
    )

    ordering = ['name']

    def has_add_permission(self, request):
        # Users are provisioned on first sign-in
        return False
