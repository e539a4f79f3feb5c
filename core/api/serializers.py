from rest_framework import serializers

from ..services.maintenance import STATUS_CHOICES
from ..utils.data_helpers import full_name


class SessionUserSerializer(serializers.Serializer):
    """Serializer exposing the signed-in user's public profile information."""

    id = serializers.CharField(read_only=True)
    email = serializers.EmailField(read_only=True)
    first_name = serializers.CharField(source="firstName", read_only=True)
    last_name = serializers.CharField(source="lastName", read_only=True)
    full_name = serializers.SerializerMethodField()
    role = serializers.CharField(read_only=True)
    phone = serializers.CharField(read_only=True)
    status = serializers.CharField(read_only=True)
    unit_id = serializers.CharField(source="unitId", read_only=True, allow_null=True)
    property_id = serializers.CharField(source="propertyId", read_only=True, allow_null=True)

    def get_full_name(self, obj):
        return full_name(obj)


class MaintenanceStatusSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=STATUS_CHOICES)
    response_notes = serializers.CharField(required=False, allow_blank=True, max_length=1000)
