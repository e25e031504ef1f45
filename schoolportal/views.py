from django.conf import settings
from django.utils import timezone
from rest_framework import permissions
from rest_framework.response import Response
from rest_framework.views import APIView


class HealthView(APIView):
    """Liveness probe for load balancers and uptime checks."""

    authentication_classes = []
    permission_classes = [permissions.AllowAny]

    def get(self, request, *args, **kwargs):
        return Response(
            {
                "status": "healthy",
                "timestamp": timezone.now().isoformat(),
                "version": settings.APP_VERSION,
                "debug": settings.DEBUG,
            }
        )
