import logging

from rest_framework import viewsets, status
from rest_framework.decorators import api_view
from rest_framework.response import Response
from django_ratelimit.decorators import ratelimit

from .models import SyncOperation
from .serializers import ConnectivityReportSerializer, DrainReportSerializer, SyncOperationSerializer, SyncStatusSerializer
from .services import get_runtime

logger = logging.getLogger(__name__)


class SyncOperationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for viewing the pending queue
    Read-only - operations are created by local mutations
    """

    serializer_class = SyncOperationSerializer

    def get_queryset(self):
        queryset = SyncOperation.objects.order_by("created_at", "id")
        entity_kind = self.request.query_params.get("entity_kind")
        if entity_kind:
            queryset = queryset.filter(entity_kind=entity_kind)
        return queryset


@api_view(["GET"])
def sync_status(request):
    """
    Online flag, syncing flag and pending count

    GET /api/v1/sync/status/
    """
    runtime = get_runtime()
    runtime.queue.publish_count()
    return Response(SyncStatusSerializer(runtime.status()).data)


@api_view(["POST"])
def report_connectivity(request):
    """
    Forward a platform connectivity transition

    POST /api/v1/sync/connectivity/
    {
        "online": true
    }
    """
    serializer = ConnectivityReportSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)

    runtime = get_runtime()
    changed = runtime.monitor.set_online(serializer.validated_data["online"], source=serializer.validated_data["source"])

    return Response({"changed": changed, **SyncStatusSerializer(runtime.status()).data})


@api_view(["POST"])
@ratelimit(key="ip", rate="20/m", method="POST", block=False)
def trigger_sync(request):
    """
    Drain the queue now and report what happened
    Rate limited to 20 requests per minute per client

    POST /api/v1/sync/trigger/
    """

    if getattr(request, "limited", False):
        return Response(
            {"error": "Rate limited exceeded", "detail": "Maximum 20 sync triggers per minute. Please try again later."},
            status=status.HTTP_429_TOO_MANY_REQUESTS,
        )

    runtime = get_runtime()
    if not runtime.monitor.is_online:
        return Response({"error": "Station is offline", "detail": "Queued operations will sync when connectivity returns."}, status=status.HTTP_409_CONFLICT)

    report = runtime.engine.drain()
    logger.info(f"Manual sync trigger: {report.as_dict()}")
    return Response(DrainReportSerializer(report.as_dict()).data)
