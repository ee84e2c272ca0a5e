"""CSV export of service requests.

The file starts with a UTF-8 byte order mark so spreadsheet tools detect the
encoding; amounts are whole rupees labelled INR.
"""

import csv
import io
import math

from django.utils import timezone

from common.utils import paise_to_rupees
from .models import RequestItem, ServiceRequest
from .totals import calculate_request_totals

CSV_BOM = "\ufeff"

BASE_HEADERS = [
    "Order ID",
    "Customer Name",
    "Phone Number",
    "Bike Model",
    "Status",
    "Created Date",
    "Confirmed Date",
    "Total Amount (INR)",
]
DETAIL_HEADERS = ["Repair Services", "Replacement Parts", "Add-ons", "Bundles"]


def _rupees(paise) -> int:
    """Whole rupees, halves rounded up."""
    return math.floor(paise_to_rupees(paise) + 0.5)


def _format_date(value) -> str:
    if value is None:
        return ""
    return timezone.localtime(value).strftime("%d/%m/%Y")


def format_line_items(entries, include_pricing: bool) -> str:
    """``entries`` are (name, price_paise) pairs, joined with '; '."""
    parts = []
    for name, price_paise in entries:
        name = name or "Unknown Item"
        parts.append(f"{name} (INR {_rupees(price_paise)})" if include_pricing else name)
    return "; ".join(parts)


def _detail_columns(service_request, include_pricing):
    items = list(service_request.items.all())
    repairs = [(i.label, i.price_paise) for i in items if i.section == RequestItem.Section.REPAIR]
    replacements = [(i.label, i.price_paise) for i in items if i.section == RequestItem.Section.REPLACEMENT]
    addons = [(c.addon.name, c.price_paise) for c in service_request.confirmed_addons.all()]
    bundles = [(c.bundle.name, c.price_paise) for c in service_request.confirmed_bundles.all()]
    return [
        format_line_items(repairs, include_pricing),
        format_line_items(replacements, include_pricing),
        format_line_items(addons, include_pricing),
        format_line_items(bundles, include_pricing),
    ]


def build_requests_csv(requests, include_details=True, include_pricing=True, lacarte_paise=None) -> str:
    """Render requests as CSV text (BOM first, '\\n' between rows)."""
    output = io.StringIO()
    writer = csv.writer(output, lineterminator="\n", quoting=csv.QUOTE_MINIMAL)

    headers = BASE_HEADERS + (DETAIL_HEADERS if include_details else [])
    writer.writerow(headers)

    for service_request in requests:
        items = None
        if service_request.status != ServiceRequest.Status.CONFIRMED:
            items = list(service_request.items.all())
        totals = calculate_request_totals(service_request, items=items, fallback_lacarte_paise=lacarte_paise)
        row = [
            service_request.order_id or "",
            service_request.customer_name or "",
            f"+{service_request.phone_digits_intl or ''}",
            service_request.bike_name or "",
            (service_request.status or "").capitalize(),
            _format_date(service_request.created_at),
            _format_date(service_request.sent_at),
            str(_rupees(totals.total_paise)),
        ]
        if include_details:
            row.extend(_detail_columns(service_request, include_pricing))
        writer.writerow(row)

    text = output.getvalue()
    if text.endswith("\n"):
        text = text[:-1]
    return CSV_BOM + text


def export_filename(start_date, end_date) -> str:
    return f"cyclebees_requests_{start_date:%Y-%m-%d}_to_{end_date:%Y-%m-%d}.csv"
