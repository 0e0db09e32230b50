from django.urls import path, include
from rest_framework.routers import DefaultRouter
from .views import SessionViewSet, ItemViewSet, DefectViewSet, catalog

router = DefaultRouter()
router.register(r"sessions", SessionViewSet, basename="session")
router.register(r"items", ItemViewSet, basename="item")
router.register(r"defects", DefectViewSet, basename="defect")

urlpatterns = [
    path("catalog/", catalog, name="catalog"),
    path("", include(router.urls)),
]
