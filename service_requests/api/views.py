"""Service requests API views.

Admin endpoints for the request desk: paginated list with search and status
filter, creation from the admin form, status patch, delete of cancelled
requests, confirmed-selection lookup, WhatsApp delivery bookkeeping and the
CSV and bill exports.
"""

import logging
import math

from django.db import DatabaseError
from django.db.models import Q
from django.http import HttpResponse
from django.shortcuts import get_object_or_404
from rest_framework import generics, status
from rest_framework.response import Response
from rest_framework.views import APIView

from catalog.models import get_lacarte_price
from service_requests import services
from service_requests.billing import bill_response
from service_requests.exports import build_requests_csv, export_filename
from service_requests.models import ServiceRequest
from .serializers import (
    CreateRequestSerializer,
    ExportQuerySerializer,
    RequestStatusPatchSerializer,
    ServiceRequestOutputSerializer,
    WhatsAppStatusSerializer,
)

logger = logging.getLogger(__name__)

DEFAULT_LIMIT = 30
MAX_LIMIT = 100
SEARCH_FIELDS = ("order_id", "customer_name", "bike_name", "phone_digits_intl", "short_slug")


# ----------------------------- helpers (module-level) -----------------------------

def _int_param(value, default):
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def _page_window(params):
    """Clamp ``page`` to >= 1 and ``limit`` to 1..100."""
    page = max(1, _int_param(params.get("page"), 1))
    limit = min(max(1, _int_param(params.get("limit"), DEFAULT_LIMIT)), MAX_LIMIT)
    return page, limit


def _pagination_block(page, limit, total):
    offset = (page - 1) * limit
    total_pages = math.ceil(total / limit)
    return {
        "currentPage": page,
        "totalPages": total_pages,
        "totalRequests": total,
        "limit": limit,
        "hasNextPage": page < total_pages,
        "hasPrevPage": page > 1,
        "startIndex": offset + 1,
        "endIndex": min(offset + limit, total),
    }


def _filtered_requests(params):
    qs = ServiceRequest.objects.all()
    status_value = params.get("status")
    if status_value and status_value != "all":
        qs = qs.filter(status=status_value)
    search = (params.get("search") or "").strip()
    if search:
        query = Q()
        for name in SEARCH_FIELDS:
            query |= Q(**{f"{name}__icontains": search})
        qs = qs.filter(query)
    return qs.order_by("-created_at")


def _validate_patch_only_status(data):
    """Allow only 'status' in PATCH; return a 400 response otherwise."""
    extra = set(data.keys()) - {"status"}
    if extra:
        return Response(
            {"detail": f"Only 'status' may be updated. Invalid fields: {', '.join(sorted(extra))}."},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return None


def _output(service_request, lacarte_paise=None):
    return ServiceRequestOutputSerializer(service_request, context={"lacarte_paise": lacarte_paise}).data


# --------------------------------------- views ---------------------------------------

class RequestListCreateAPIView(generics.ListCreateAPIView):
    """GET: paginated requests, newest first.
    POST: create a request with its repair and replacement items.
    """

    queryset = ServiceRequest.objects.all()
    serializer_class = CreateRequestSerializer

    def list(self, request, *args, **kwargs):
        page, limit = _page_window(request.query_params)
        offset = (page - 1) * limit
        try:
            qs = _filtered_requests(request.query_params)
            total = qs.count()
            rows = list(qs.prefetch_related("items")[offset:offset + limit])
            lacarte = get_lacarte_price()
        except DatabaseError:
            logger.exception("Failed to fetch requests")
            return Response({"detail": "Failed to fetch requests"}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)

        serializer = ServiceRequestOutputSerializer(rows, many=True, context={"lacarte_paise": lacarte})
        return Response(
            {"requests": serializer.data, "pagination": _pagination_block(page, limit, total)},
            status=status.HTTP_200_OK,
        )

    def create(self, request, *args, **kwargs):
        serializer = CreateRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service_request = services.create_service_request(
            dict(serializer.validated_data["request"]),
            repair_items=serializer.validated_items("repair_items"),
            replacement_items=serializer.validated_items("replacement_items"),
        )
        return Response(
            {
                "id": str(service_request.id),
                "short_slug": service_request.short_slug,
                "order_id": service_request.order_id,
                "orderUrl": service_request.public_url,
                "whatsappUrl": service_request.whatsapp_share_url(),
                "message": "Request created successfully",
            },
            status=status.HTTP_201_CREATED,
        )


class RequestDetailAPIView(generics.RetrieveUpdateDestroyAPIView):
    """GET: request with items. PATCH: status only. DELETE: cancelled requests only."""

    queryset = ServiceRequest.objects.all().prefetch_related("items")
    serializer_class = ServiceRequestOutputSerializer
    http_method_names = ["get", "patch", "delete", "head", "options"]

    def partial_update(self, request, *args, **kwargs):
        bad = _validate_patch_only_status(request.data)
        if bad is not None:
            return bad
        instance = self.get_object()
        serializer = RequestStatusPatchSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        services.change_status(instance, serializer.validated_data["status"])
        return Response(_output(instance), status=status.HTTP_200_OK)

    def perform_destroy(self, instance):
        services.delete_service_request(instance)


class ConfirmedSelectionAPIView(APIView):
    """GET /api/requests/<id>/confirmed/ -> ids frozen at confirmation."""

    def get(self, request, pk):
        service_request = get_object_or_404(ServiceRequest, pk=pk)
        return Response(
            {
                "selectedItems": [
                    str(v) for v in service_request.confirmed_services.values_list("service_item_id", flat=True)
                ],
                "selectedAddons": [
                    str(v) for v in service_request.confirmed_addons.values_list("addon_id", flat=True)
                ],
                "selectedBundles": [
                    str(v) for v in service_request.confirmed_bundles.values_list("bundle_id", flat=True)
                ],
            },
            status=status.HTTP_200_OK,
        )


class WhatsAppStatusAPIView(APIView):
    """PATCH /api/requests/<id>/update-whatsapp-status/ -> record a delivery outcome."""

    def patch(self, request, pk):
        service_request = get_object_or_404(ServiceRequest, pk=pk)
        serializer = WhatsAppStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data
        services.apply_whatsapp_result(
            service_request,
            success=data["success"],
            message_id=data.get("whatsappMessageId"),
            error=data.get("whatsappError"),
        )
        message = (
            "Request marked as sent with WhatsApp confirmation"
            if data["success"]
            else "Request kept as pending due to WhatsApp failure"
        )
        return Response(
            {"success": True, "data": _output(service_request), "message": message},
            status=status.HTTP_200_OK,
        )


class SendWhatsAppAPIView(APIView):
    """POST /api/requests/<id>/send-whatsapp/ -> (re)send the order link."""

    def post(self, request, pk):
        service_request = get_object_or_404(ServiceRequest, pk=pk)
        result = services.send_whatsapp(service_request)
        body = {
            "success": result.success,
            "message": result.message,
            "whatsappMessageId": result.message_id,
            "whatsappStatus": result.whatsapp_status,
            "request": _output(service_request),
        }
        return Response(body, status=status.HTTP_200_OK if result.success else result.http_status)


class RequestExportAPIView(APIView):
    """GET /api/requests/export/?start_date&end_date[&include_details&include_pricing] -> CSV."""

    def get(self, request):
        query = ExportQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        params = query.validated_data
        requests = (
            ServiceRequest.objects.filter(
                created_at__date__gte=params["start_date"],
                created_at__date__lte=params["end_date"],
            )
            .prefetch_related("items", "confirmed_addons__addon", "confirmed_bundles__bundle")
            .order_by("-created_at")
        )
        content = build_requests_csv(
            requests,
            include_details=params["include_details"],
            include_pricing=params["include_pricing"],
            lacarte_paise=get_lacarte_price(),
        )
        response = HttpResponse(content, content_type="text/csv; charset=utf-8")
        filename = export_filename(params["start_date"], params["end_date"])
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        logger.info("Exported %d requests (%s)", requests.count(), filename)
        return response


class RequestBillAPIView(APIView):
    """GET /api/requests/<id>/bill/ -> printable HTML bill or estimate."""

    def get(self, request, pk):
        return bill_response(get_object_or_404(ServiceRequest, pk=pk))
