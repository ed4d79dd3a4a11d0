"""
Authz views.
"""
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from apps.authz.serializers import UserProfileSerializer


class CurrentUserView(APIView):
    """
    Current authenticated user profile.

    GET /api/v1/me/ - Returns the provisioned User row of the caller.

    The frontend uses ``is_admin`` only to decide which screens to show;
    every administration endpoint re-checks the role server-side.
    """
    permission_classes = [IsAuthenticated]

    def get(self, request):
        serializer = UserProfileSerializer(request.user)
        return Response(serializer.data, status=status.HTTP_200_OK)
