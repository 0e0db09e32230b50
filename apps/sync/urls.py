from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import SyncOperationViewSet, report_connectivity, sync_status, trigger_sync

router = DefaultRouter()
router.register(r"operations", SyncOperationViewSet, basename="sync-operation")

urlpatterns = [
    path("", include(router.urls)),
    path("status/", sync_status, name="sync-status"),
    path("connectivity/", report_connectivity, name="sync-connectivity"),
    path("trigger/", trigger_sync, name="sync-trigger"),
]
