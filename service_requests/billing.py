"""Printable bills.

``build_bill_data`` collects what a bill shows; ``render_bill_html`` turns it
into a standalone HTML page that opens the print dialog, so the browser's
"Save as PDF" produces the document.
"""

from dataclasses import dataclass, field
from typing import List, Optional

from django.http import HttpResponse
from django.template.loader import render_to_string
from django.utils import timezone

from common.utils import format_currency, format_phone_number
from .models import RequestItem, ServiceRequest
from .totals import calculate_request_totals


@dataclass
class BillLine:
    name: str
    price_paise: int
    description: Optional[str] = None
    bullet_points: List[str] = field(default_factory=list)

    @property
    def price_display(self) -> str:
        return format_currency(self.price_paise)


@dataclass
class BillData:
    order_id: str
    customer_name: str
    customer_phone: str
    bike_name: str
    status: str
    created_at: object
    confirmed_at: object
    repair_items: List[BillLine]
    replacement_items: List[BillLine]
    addons: List[BillLine]
    bundles: List[BillLine]
    subtotal_paise: int
    addons_paise: int
    bundles_paise: int
    lacarte_paise: int
    total_paise: int

    @property
    def is_confirmed(self) -> bool:
        return self.status == ServiceRequest.Status.CONFIRMED

    @property
    def title(self) -> str:
        return "Confirmed Service Order" if self.is_confirmed else "Service Estimate"

    @property
    def filename(self) -> str:
        prefix = "Confirmed_Order" if self.is_confirmed else "Service_Request"
        return f"{prefix}_{self.order_id}.pdf"


def _item_lines(items, section):
    return [BillLine(name=i.label, price_paise=i.price_paise) for i in items if i.section == section]


def build_bill_data(service_request: ServiceRequest) -> BillData:
    lacarte = service_request.effective_lacarte_paise()

    if service_request.status == ServiceRequest.Status.CONFIRMED:
        items = [c.service_item for c in service_request.confirmed_services.select_related("service_item")]
        addons = [
            BillLine(name=c.addon.name, price_paise=c.price_paise, description=c.addon.description)
            for c in service_request.confirmed_addons.select_related("addon")
        ]
        bundles = [
            BillLine(
                name=c.bundle.name,
                price_paise=c.price_paise,
                description=c.bundle.description,
                bullet_points=list(c.bundle.bullet_points or []),
            )
            for c in service_request.confirmed_bundles.select_related("bundle")
        ]
        subtotal = sum(i.price_paise for i in items)
        addons_paise = sum(a.price_paise for a in addons)
        bundles_paise = sum(b.price_paise for b in bundles)
        total = subtotal + addons_paise + bundles_paise + lacarte
    else:
        items = list(service_request.items.all())
        addons, bundles = [], []
        addons_paise = bundles_paise = 0
        totals = calculate_request_totals(service_request, items=items, fallback_lacarte_paise=lacarte)
        subtotal, total = totals.subtotal_paise, totals.total_paise

    return BillData(
        order_id=service_request.order_id,
        customer_name=service_request.customer_name,
        customer_phone=format_phone_number(service_request.phone_digits_intl),
        bike_name=service_request.bike_name,
        status=service_request.status,
        created_at=service_request.created_at,
        confirmed_at=service_request.confirmed_at,
        repair_items=_item_lines(items, RequestItem.Section.REPAIR),
        replacement_items=_item_lines(items, RequestItem.Section.REPLACEMENT),
        addons=addons,
        bundles=bundles,
        subtotal_paise=subtotal,
        addons_paise=addons_paise,
        bundles_paise=bundles_paise,
        lacarte_paise=lacarte,
        total_paise=total,
    )


def render_bill_html(bill: BillData) -> str:
    context = {
        "bill": bill,
        "generated_at": timezone.localtime(),
        "subtotal": format_currency(bill.subtotal_paise),
        "addons_total": format_currency(bill.addons_paise),
        "bundles_total": format_currency(bill.bundles_paise),
        "lacarte": format_currency(bill.lacarte_paise),
        "total": format_currency(bill.total_paise),
    }
    return render_to_string("service_requests/bill.html", context)


def bill_response(service_request: ServiceRequest) -> HttpResponse:
    bill = build_bill_data(service_request)
    response = HttpResponse(render_bill_html(bill), content_type="text/html; charset=utf-8")
    response["Content-Disposition"] = f'inline; filename="{bill.filename}"'
    return response
