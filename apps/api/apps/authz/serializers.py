"""
Authz serializers.
"""
from rest_framework import serializers
from apps.authz.models import User
from apps.authz.permissions import is_admin


class UserProfileSerializer(serializers.ModelSerializer):
    """
    Current user profile.

    Used for:
    - GET /api/v1/me/
    """
    is_admin = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = ['id', 'external_id', 'name', 'email', 'role', 'is_admin', 'created_at']
        read_only_fields = fields

    def get_is_admin(self, obj):
        return is_admin(obj)


class InspectorSerializer(serializers.ModelSerializer):
    """Compact user representation embedded in entries."""

    class Meta:
        model = User
        fields = ['id', 'name']
        read_only_fields = fields
