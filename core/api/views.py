import logging

from rest_framework import status
from rest_framework.generics import RetrieveAPIView
from rest_framework.permissions import BasePermission, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from ..services.maintenance import MaintenanceService
from .client import ApiClient, ApiError
from .serializers import MaintenanceStatusSerializer, SessionUserSerializer

logger = logging.getLogger(__name__)


class IsLandlord(BasePermission):
    message = "Only landlord accounts can update maintenance requests."

    def has_permission(self, request, view):
        return getattr(request.user, "role", None) == "landlord"


class CurrentUserView(RetrieveAPIView):
    """Return the signed-in user's profile information."""

    serializer_class = SessionUserSerializer
    permission_classes = [IsAuthenticated]

    def get_object(self):
        return self.request.user.data


class MaintenanceStatusView(APIView):
    """Change the status of a maintenance request from the landlord dashboard."""

    permission_classes = [IsAuthenticated, IsLandlord]
    service_class = MaintenanceService

    def post(self, request, request_id):
        serializer = MaintenanceStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = self.service_class(ApiClient(token=request.user.token))
        try:
            record = service.update_status(
                request_id,
                serializer.validated_data["status"],
                serializer.validated_data.get("response_notes", ""),
            )
        except ApiError as exc:
            logger.warning("Maintenance status update for %s failed: %s", request_id, exc)
            return Response(
                {"success": False, "message": exc.message},
                status=exc.status_code if (exc.status_code or 0) >= 400 else status.HTTP_502_BAD_GATEWAY,
            )
        return Response(
            {
                "success": True,
                "message": "Maintenance status updated successfully",
                "data": {"maintenanceRequest": record},
            }
        )
