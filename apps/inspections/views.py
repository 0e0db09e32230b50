from rest_framework import viewsets, status
from rest_framework.decorators import action, api_view
from rest_framework.response import Response

from .models import LocalSession, LocalItem, LocalDefect, Product, Workstation, DefectType
from .serializers import (
    SessionSerializer,
    ItemSerializer,
    DefectSerializer,
    CreateSessionSerializer,
    UpdateSessionSerializer,
    UpdateItemSerializer,
    CreateDefectSerializer,
    ProductSerializer,
    WorkstationSerializer,
    DefectTypeSerializer,
)
from .services import InspectionService


class SessionViewSet(viewsets.GenericViewSet):
    """
    Local inspection sessions

    Every write lands in the station database first and is queued for the
    central API; responses reflect the local copy and its sync status
    """

    serializer_class = SessionSerializer
    lookup_field = "local_id"

    def get_queryset(self):
        queryset = LocalSession.objects.filter(is_deleted=False)
        status_filter = self.request.query_params.get("status")
        if status_filter:
            queryset = queryset.filter(status=status_filter)
        return queryset

    def list(self, request):
        page = self.paginate_queryset(self.get_queryset())
        serializer = SessionSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request, local_id=None):
        session = self.get_object()
        return Response(SessionSerializer(session).data)

    def create(self, request):
        """
        Start a session

        POST /api/v1/sessions/
        {
            "product_id": "...",
            "workstation_id": "...",
            "user_id": "..."
        }
        """
        serializer = CreateSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        session = InspectionService().start_session(**serializer.validated_data)
        return Response(SessionSerializer(session).data, status=status.HTTP_201_CREATED)

    def partial_update(self, request, local_id=None):
        serializer = UpdateSessionSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        session = InspectionService().update_session(local_id, **serializer.validated_data)
        return Response(SessionSerializer(session).data)

    def destroy(self, request, local_id=None):
        InspectionService().delete_session(local_id)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=True, methods=["post"])
    def items(self, request, local_id=None):
        """Advance to the next unit"""
        item = InspectionService().add_item(local_id)
        return Response(ItemSerializer(item).data, status=status.HTTP_201_CREATED)


class ItemViewSet(viewsets.GenericViewSet):
    serializer_class = ItemSerializer
    lookup_field = "local_id"
    queryset = LocalItem.objects.filter(is_deleted=False)

    def partial_update(self, request, local_id=None):
        serializer = UpdateItemSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        item = InspectionService().update_item(local_id, serializer.validated_data["status"])
        return Response(ItemSerializer(item).data)

    @action(detail=True, methods=["post"])
    def defects(self, request, local_id=None):
        """
        Mark a defect on the item

        POST /api/v1/items/{local_id}/defects/
        {
            "defect_type_id": "...",
            "position_x": 0.42,
            "position_y": 0.17
        }
        """
        serializer = CreateDefectSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        defect = InspectionService().add_defect(local_id, **serializer.validated_data)
        return Response(DefectSerializer(defect).data, status=status.HTTP_201_CREATED)


class DefectViewSet(viewsets.GenericViewSet):
    serializer_class = DefectSerializer
    lookup_field = "local_id"
    queryset = LocalDefect.objects.filter(is_deleted=False)

    def destroy(self, request, local_id=None):
        InspectionService().delete_defect(local_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(["GET"])
def catalog(request):
    """
    Cached reference data for offline use

    GET /api/v1/catalog/
    """
    return Response(
        {
            "products": ProductSerializer(Product.objects.all(), many=True).data,
            "workstations": WorkstationSerializer(Workstation.objects.all(), many=True).data,
            "defect_types": DefectTypeSerializer(DefectType.objects.all(), many=True).data,
        }
    )
