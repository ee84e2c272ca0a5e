"""The customer's review-and-confirm journey for one order.

Steps run services -> add-ons -> bundles -> confirm. The selection must be
started on the services step; later steps refuse to invent one. Confirmation
is a single transaction that freezes the selection with price snapshots.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from django.db import transaction
from django.utils import timezone

from catalog.models import Addon, ServiceBundle
from service_requests.models import (
    ConfirmedOrderAddon,
    ConfirmedOrderBundle,
    ConfirmedOrderService,
    ServiceRequest,
)
from .selection import SelectionState, SelectionStore

logger = logging.getLogger(__name__)

Status = ServiceRequest.Status

STEPS = ("services", "addons", "bundles")
FIRST_STEP = STEPS[0]
VIEWABLE_STATUSES = (Status.PENDING, Status.SENT)


class WorkflowError(Exception):
    pass


class SelectionNotStarted(WorkflowError):
    """A later step was opened before services were chosen."""

    redirect = FIRST_STEP


class SelectionTooSmall(WorkflowError):
    pass


class OrderNotEditable(WorkflowError):
    pass


@dataclass(frozen=True)
class SelectionTotals:
    subtotal: int
    addons_total: int
    bundles_total: int
    la_carte_charge: int
    total: int

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "addonsTotal": self.addons_total,
            "bundlesTotal": self.bundles_total,
            "laCarteCharge": self.la_carte_charge,
            "total": self.total,
        }


class OrderWorkflow:
    def __init__(
        self,
        service_request: ServiceRequest,
        store: SelectionStore,
        addons: Optional[Iterable[Addon]] = None,
        bundles: Optional[Iterable[ServiceBundle]] = None,
        lacarte_paise: Optional[int] = None,
    ):
        self.request = service_request
        self.store = store
        self.addons = list(addons) if addons is not None else list(Addon.objects.active())
        self.bundles = list(bundles) if bundles is not None else list(ServiceBundle.objects.active())
        self.lacarte_paise = (
            lacarte_paise if lacarte_paise is not None else service_request.effective_lacarte_paise()
        )
        self.items = list(service_request.items.all())
        self.state = SelectionState()

    @property
    def slug(self) -> str:
        return self.request.short_slug

    @property
    def read_only(self) -> bool:
        return self.request.is_locked

    # ------------------------------------------------------------------ load

    def suggested_state(self) -> SelectionState:
        return SelectionState.of(i.id for i in self.items if i.is_suggested)

    def frozen_state(self) -> SelectionState:
        bundle_ids = list(self.request.confirmed_bundles.values_list("bundle_id", flat=True))
        return SelectionState.of(
            self.request.confirmed_services.values_list("service_item_id", flat=True),
            self.request.confirmed_addons.values_list("addon_id", flat=True),
            bundle_ids[0] if bundle_ids else None,
        )

    def load(self, step: str = FIRST_STEP) -> SelectionState:
        if step not in STEPS:
            raise ValueError(f"unknown step {step!r}")
        if self.request.status == Status.CONFIRMED:
            self.state = self.frozen_state()
        elif self.request.status == Status.CANCELLED:
            self.state = SelectionState()
        else:
            saved = self.store.load(self.slug)
            if saved is None:
                if step != FIRST_STEP:
                    raise SelectionNotStarted(f"select services before {step}")
                saved = self.suggested_state()
            self.state = self._known(saved)
        return self.state

    def _known(self, state: SelectionState) -> SelectionState:
        """Drop ids that are not items of this order or active catalog entries."""
        item_ids = {str(i.id) for i in self.items}
        addon_ids = {str(a.id) for a in self.addons}
        bundle_ids = {str(b.id) for b in self.bundles}
        return SelectionState(
            items=state.items & item_ids,
            addons=state.addons & addon_ids,
            bundle=state.bundle if state.bundle in bundle_ids else None,
        )

    def update(self, state: SelectionState) -> SelectionState:
        if self.read_only:
            raise OrderNotEditable(f"order is {self.request.status}")
        self.state = self._known(state)
        self.store.save(self.slug, self.state)
        return self.state

    # ---------------------------------------------------------------- viewed

    def mark_viewed(self, selected_ids: Optional[Iterable] = None) -> bool:
        """First view: pending|sent -> viewed and record which items were selected.

        Returns False when the order was already past that point.
        """
        if self.request.status not in VIEWABLE_STATUSES:
            return False
        selected = {str(i) for i in selected_ids} if selected_ids is not None else set(self.state.items)
        selected &= {str(i.id) for i in self.items}

        # self.request only changes once the write has committed
        rows = ServiceRequest.objects.filter(pk=self.request.pk)
        with transaction.atomic():
            if not rows.filter(status__in=VIEWABLE_STATUSES).update(status=Status.VIEWED):
                return False
            rows.filter(viewed_at__isnull=True).update(viewed_at=timezone.now())
            self._record_selected_items(self.request, selected)
        self.request.refresh_from_db(fields=["status", "viewed_at"])

        logger.info("Order %s viewed (%d items selected)", self.request.order_id, len(selected))
        return True

    @staticmethod
    def _record_selected_items(service_request, selected):
        service_request.items.filter(pk__in=selected).update(is_selected=True)
        service_request.items.exclude(pk__in=selected).update(is_selected=False)

    # ---------------------------------------------------------------- totals

    def totals(self) -> SelectionTotals:
        if self.request.status == Status.CONFIRMED:
            addons_total = sum(self.request.confirmed_addons.values_list("price_paise", flat=True))
            bundles_total = sum(self.request.confirmed_bundles.values_list("price_paise", flat=True))
        else:
            addons_total = sum(a.price_paise for a in self.addons if str(a.id) in self.state.addons)
            bundles_total = sum(b.price_paise for b in self.bundles if str(b.id) in self.state.bundles)
        subtotal = sum(i.price_paise for i in self.items if str(i.id) in self.state.items)
        total = subtotal + addons_total + bundles_total + self.lacarte_paise
        return SelectionTotals(subtotal, addons_total, bundles_total, self.lacarte_paise, total)

    def can_confirm(self) -> bool:
        if self.read_only or self.state.is_empty():
            return False
        totals = self.totals()
        return totals.total >= totals.la_carte_charge

    # --------------------------------------------------------------- confirm

    def confirm(self, state: Optional[SelectionState] = None) -> SelectionTotals:
        if self.read_only:
            raise OrderNotEditable(f"order is {self.request.status}")
        if state is not None:
            self.state = self._known(state)
        if not self.can_confirm():
            raise SelectionTooSmall("Please select at least one service (La Carte included).")

        addon_prices = {str(a.id): a.price_paise for a in self.addons}
        bundle_prices = {str(b.id): b.price_paise for b in self.bundles}
        now = timezone.now()

        with transaction.atomic():
            current = ServiceRequest.objects.select_for_update().get(pk=self.request.pk)
            if current.is_locked:
                raise OrderNotEditable(f"order is {current.status}")

            current.status = Status.CONFIRMED
            current.confirmed_at = now
            if current.viewed_at is None:
                current.viewed_at = now
            current.lacarte_paise = self.lacarte_paise
            current.save(update_fields=["status", "confirmed_at", "viewed_at", "lacarte_paise"])

            ConfirmedOrderService.objects.bulk_create(
                [ConfirmedOrderService(request=current, service_item_id=i) for i in sorted(self.state.items)]
            )
            ConfirmedOrderAddon.objects.bulk_create(
                [
                    ConfirmedOrderAddon(request=current, addon_id=a, price_paise=addon_prices[a])
                    for a in sorted(self.state.addons)
                ]
            )
            if self.state.bundle:
                ConfirmedOrderBundle.objects.create(
                    request=current,
                    bundle_id=self.state.bundle,
                    price_paise=bundle_prices[self.state.bundle],
                )
            self._record_selected_items(current, self.state.items)
            current.recalculate_totals()

        self.request = current
        self.state = self.frozen_state()
        self.store.save(self.slug, self.state)
        totals = self.totals()
        logger.info("Order %s confirmed, total %s", current.order_id, totals.total)
        return totals
