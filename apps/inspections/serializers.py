from rest_framework import serializers
from .models import Product, Workstation, DefectType, LocalSession, LocalItem, LocalDefect


class ProductSerializer(serializers.ModelSerializer):
    class Meta:
        model = Product
        fields = ["id", "code", "name", "template_url", "last_modified"]
        read_only_fields = fields


class WorkstationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Workstation
        fields = ["id", "name", "last_modified"]
        read_only_fields = fields


class DefectTypeSerializer(serializers.ModelSerializer):
    class Meta:
        model = DefectType
        fields = ["id", "code", "name", "color", "last_modified"]
        read_only_fields = fields


class DefectSerializer(serializers.ModelSerializer):
    """Local defect with its sync state"""

    class Meta:
        model = LocalDefect
        fields = [
            "local_id",
            "server_id",
            "item",
            "item_server_id",
            "defect_type_id",
            "position_x",
            "position_y",
            "severity",
            "notes",
            "sync_status",
            "created_at",
            "last_modified",
        ]
        read_only_fields = fields


class ItemSerializer(serializers.ModelSerializer):
    """Local item with its live defects"""

    defects = serializers.SerializerMethodField()

    class Meta:
        model = LocalItem
        fields = [
            "local_id",
            "server_id",
            "session",
            "session_server_id",
            "sequence",
            "status",
            "sync_status",
            "defects",
            "created_at",
            "last_modified",
        ]
        read_only_fields = fields

    def get_defects(self, obj):
        return DefectSerializer(obj.defects.filter(is_deleted=False), many=True).data


class SessionSerializer(serializers.ModelSerializer):
    """Full local session with its items"""

    items = serializers.SerializerMethodField()

    class Meta:
        model = LocalSession
        fields = [
            "local_id",
            "server_id",
            "product_id",
            "workstation_id",
            "user_id",
            "status",
            "active_time",
            "sync_status",
            "items",
            "started_at",
            "ended_at",
            "last_modified",
        ]
        read_only_fields = fields

    def get_items(self, obj):
        return ItemSerializer(obj.items.filter(is_deleted=False), many=True).data


class CreateSessionSerializer(serializers.Serializer):
    """Start a session"""

    product_id = serializers.CharField(max_length=64)
    workstation_id = serializers.CharField(max_length=64)
    user_id = serializers.CharField(max_length=64)


class UpdateSessionSerializer(serializers.Serializer):
    """Status change and/or active-time update"""

    status = serializers.ChoiceField(choices=LocalSession.Status.choices, required=False)
    active_time = serializers.IntegerField(min_value=0, required=False)

    def validate(self, attrs):
        if not attrs:
            raise serializers.ValidationError("Provide status or active_time.")
        return attrs


class UpdateItemSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=LocalItem.Status.choices)


class CreateDefectSerializer(serializers.Serializer):
    """Canvas click + defect type selection"""

    defect_type_id = serializers.CharField(max_length=64)
    position_x = serializers.FloatField(min_value=0.0, max_value=1.0)
    position_y = serializers.FloatField(min_value=0.0, max_value=1.0)
    severity = serializers.CharField(max_length=20, required=False, allow_null=True)
    notes = serializers.CharField(required=False, allow_null=True, allow_blank=True)
