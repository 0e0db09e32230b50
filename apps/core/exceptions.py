from django.core.exceptions import ObjectDoesNotExist, ValidationError as DjangoValidationError
from rest_framework import status
from rest_framework.response import Response
from rest_framework.views import exception_handler


def api_exception_handler(exc, context):
    """
    DRF handler that also maps service-layer errors
    - django ValidationError -> 400
    - Model.DoesNotExist -> 404
    """
    if isinstance(exc, DjangoValidationError):
        return Response({"error": "Validation failed", "detail": exc.messages}, status=status.HTTP_400_BAD_REQUEST)

    if isinstance(exc, ObjectDoesNotExist):
        return Response({"error": "Not found", "detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

    return exception_handler(exc, context)
