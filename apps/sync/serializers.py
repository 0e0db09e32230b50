from rest_framework import serializers
from .models import SyncOperation


class SyncOperationSerializer(serializers.ModelSerializer):
    """
    Serializer for pending queue entries (listing)
    """

    class Meta:
        model = SyncOperation
        fields = [
            "id",
            "kind",
            "entity_kind",
            "local_id",
            "server_id",
            "payload",
            "created_at",
            "attempts",
            "last_error",
        ]
        read_only_fields = fields


class ConnectivityReportSerializer(serializers.Serializer):
    """
    Platform online/offline transition forwarded by the browser
    """

    online = serializers.BooleanField(required=True)
    source = serializers.CharField(required=False, max_length=50, default="browser")


class DrainReportSerializer(serializers.Serializer):
    started = serializers.BooleanField()
    reason = serializers.CharField(allow_blank=True)
    attempted = serializers.IntegerField()
    synced = serializers.IntegerField()
    not_ready = serializers.IntegerField()
    failed = serializers.IntegerField()
    dropped = serializers.IntegerField()


class SyncStatusSerializer(serializers.Serializer):
    """
    Aggregate state the UI watches instead of individual operation outcomes
    """

    is_online = serializers.BooleanField()
    is_syncing = serializers.BooleanField()
    pending_count = serializers.IntegerField()
    last_drain_at = serializers.DateTimeField(allow_null=True)
    last_report = DrainReportSerializer(allow_null=True)
