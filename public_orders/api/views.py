"""Public order API views.

Anonymous endpoints reached through the order's short slug: the order
itself, first-view and confirmation bookkeeping, the stepwise selection and
the bill of a confirmed order. Selections live in the customer's session.
"""

import logging

from django.conf import settings
from django.db import DatabaseError
from django.shortcuts import get_object_or_404
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from common.utils import generate_whatsapp_url
from public_orders.selection import SessionSelectionStore
from public_orders.workflow import (
    FIRST_STEP,
    OrderNotEditable,
    OrderWorkflow,
    SelectionNotStarted,
    SelectionTooSmall,
)
from service_requests.billing import bill_response
from service_requests.models import ServiceRequest
from .serializers import (
    CustomerOrderSerializer,
    PublicItemSerializer,
    PublicRequestSerializer,
    SelectionUpdateSerializer,
    StepQuerySerializer,
)

logger = logging.getLogger(__name__)

CONFIRM_FAILED = "Failed to confirm order. Please try again."


# ----------------------------- helpers (module-level) -----------------------------

def _order_or_404(slug):
    return get_object_or_404(ServiceRequest.objects.prefetch_related("items"), short_slug=slug)


def _workflow(request, slug):
    return OrderWorkflow(_order_or_404(slug), SessionSelectionStore(request.session))


def _workflow_error(exc):
    """Map workflow exceptions to responses."""
    if isinstance(exc, SelectionNotStarted):
        return Response({"detail": str(exc), "redirect": exc.redirect}, status=status.HTTP_409_CONFLICT)
    if isinstance(exc, SelectionTooSmall):
        return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
    return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)


def _selection_payload(workflow, step):
    return {
        "step": step,
        "status": workflow.request.status,
        "readOnly": workflow.read_only,
        "selection": workflow.state.to_dict(),
        "totals": workflow.totals().to_dict(),
        "canConfirm": workflow.can_confirm(),
    }


def _help_url(service_request):
    message = (
        f"Hi, I need help with my service estimate for {service_request.bike_name} "
        f"(Order {service_request.order_id}). Can you please assist me?"
    )
    return generate_whatsapp_url(settings.SUPPORT_WHATSAPP_NUMBER, message)


class PublicAPIView(APIView):
    authentication_classes = []
    permission_classes = [AllowAny]


# --------------------------------------- views ---------------------------------------

class PublicOrderAPIView(PublicAPIView):
    """GET /api/public/orders/<slug>/ -> {request, items} for the customer."""

    def get(self, request, slug):
        service_request = _order_or_404(slug)
        return Response(
            {
                "request": PublicRequestSerializer(service_request).data,
                "items": PublicItemSerializer(service_request.items.all(), many=True).data,
                "laCartePaise": service_request.effective_lacarte_paise(),
                "helpUrl": _help_url(service_request),
            },
            status=status.HTTP_200_OK,
        )


class OrderViewAPIView(PublicAPIView):
    """POST /api/public/orders/<slug>/view/ -> mark viewed, or confirm with the posted selection."""

    def post(self, request, slug):
        serializer = CustomerOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        workflow = _workflow(request, slug)

        if serializer.validated_data.get("status") == ServiceRequest.Status.CONFIRMED:
            try:
                totals = workflow.confirm(serializer.to_state())
            except (SelectionTooSmall, OrderNotEditable) as exc:
                return _workflow_error(exc)
            except DatabaseError:
                logger.exception("Confirmation failed for order %s", slug)
                return Response({"detail": CONFIRM_FAILED}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
            return Response(
                {"success": True, "status": workflow.request.status, "totals": totals.to_dict()},
                status=status.HTTP_200_OK,
            )

        try:
            changed = workflow.mark_viewed(serializer.validated_data["selected_items"])
        except DatabaseError:
            # the customer can still review the order
            logger.exception("Could not mark order %s as viewed", slug)
            changed = False
        return Response(
            {"success": True, "status": workflow.request.status, "updated": changed},
            status=status.HTTP_200_OK,
        )


class SelectionAPIView(PublicAPIView):
    """GET: selection and totals for a step. POST: replace parts of the selection."""

    def get(self, request, slug):
        query = StepQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        step = query.validated_data["step"]
        workflow = _workflow(request, slug)
        try:
            workflow.load(step)
        except SelectionNotStarted as exc:
            return _workflow_error(exc)
        return Response(_selection_payload(workflow, step), status=status.HTTP_200_OK)

    def post(self, request, slug):
        serializer = SelectionUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        workflow = _workflow(request, slug)
        try:
            state = workflow.load(FIRST_STEP)
            workflow.update(serializer.apply(state))
        except OrderNotEditable as exc:
            return _workflow_error(exc)
        return Response(_selection_payload(workflow, request.query_params.get("step", FIRST_STEP)), status=status.HTTP_200_OK)


class ConfirmOrderAPIView(PublicAPIView):
    """POST /api/public/orders/<slug>/confirm/ -> confirm the session selection."""

    def post(self, request, slug):
        serializer = SelectionUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        workflow = _workflow(request, slug)
        try:
            state = serializer.apply(workflow.load(FIRST_STEP))
            totals = workflow.confirm(state)
        except (SelectionTooSmall, OrderNotEditable) as exc:
            return _workflow_error(exc)
        except DatabaseError:
            logger.exception("Confirmation failed for order %s", slug)
            return Response({"detail": CONFIRM_FAILED}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)
        return Response(
            {
                "success": True,
                "message": "Order confirmed successfully!",
                "request": PublicRequestSerializer(workflow.request).data,
                "selection": workflow.state.to_dict(),
                "totals": totals.to_dict(),
            },
            status=status.HTTP_200_OK,
        )


class PublicBillAPIView(PublicAPIView):
    """GET /api/public/orders/<slug>/bill/ -> bill of a confirmed order."""

    def get(self, request, slug):
        service_request = _order_or_404(slug)
        if service_request.status != ServiceRequest.Status.CONFIRMED:
            return Response({"detail": "The bill is available once the order is confirmed."}, status=status.HTTP_409_CONFLICT)
        return bill_response(service_request)
