"""Dashboard aggregates over the requests created in a date range.

The pure functions work on ``RequestFigure`` rows so they can be tested
without a database; ``build_analytics`` runs the queries and assembles the
response body.
"""

from collections import Counter, defaultdict
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Iterable, List

from django.db.models import Count, Sum
from django.utils import timezone

from catalog.models import Addon, get_lacarte_price
from service_requests.models import ConfirmedOrderAddon, RequestItem, ServiceRequest
from service_requests.totals import calculate_request_totals

DAILY_MAX_DAYS = 60
WEEKLY_MAX_DAYS = 180
TREND_DAYS = 90
TOP_SERVICES = 10


@dataclass(frozen=True)
class RequestFigure:
    day: date
    status: str
    total_paise: int


def _percent(part, whole) -> float:
    return round(part / whole * 100, 2) if whole else 0.0


# ----------------------------------- periods -----------------------------------

def period_granularity(start: date, end: date) -> str:
    days = (end - start).days
    if days > WEEKLY_MAX_DAYS:
        return "monthly"
    if days > DAILY_MAX_DAYS:
        return "weekly"
    return "daily"


def period_key(day: date, granularity: str) -> str:
    if granularity == "daily":
        return day.isoformat()
    if granularity == "weekly":
        sunday = day - timedelta(days=(day.weekday() + 1) % 7)
        return f"Week of {sunday.isoformat()}"
    return f"{day:%Y-%m}"


def revenue_by_period(figures: Iterable[RequestFigure], start: date, end: date) -> List[dict]:
    granularity = period_granularity(start, end)
    periods = defaultdict(lambda: {"revenue": 0, "orders": 0})
    for figure in figures:
        bucket = periods[period_key(figure.day, granularity)]
        bucket["revenue"] += figure.total_paise
        bucket["orders"] += 1
    return [{"period": key, **periods[key]} for key in sorted(periods)]


def daily_trends(figures: Iterable[RequestFigure], start: date, end: date, max_days: int = TREND_DAYS) -> List[dict]:
    """One row per day of the last ``max_days`` days of the range, zero-filled."""
    first = max(start, end - timedelta(days=max_days - 1))
    days = {}
    current = first
    while current <= end:
        days[current] = {"date": current.isoformat(), "orders": 0, "revenue": 0}
        current += timedelta(days=1)
    for figure in figures:
        row = days.get(figure.day)
        if row is not None:
            row["orders"] += 1
            row["revenue"] += figure.total_paise
    return list(days.values())


# ----------------------------------- summary -----------------------------------

def orders_by_status(figures: List[RequestFigure]) -> List[dict]:
    counts = Counter(f.status for f in figures)
    return [
        {"status": name, "count": count, "percentage": _percent(count, len(figures))}
        for name, count in counts.most_common()
    ]


def summarize(figures: List[RequestFigure]) -> dict:
    total_orders = len(figures)
    total_revenue = sum(f.total_paise for f in figures)
    confirmed = sum(1 for f in figures if f.status == ServiceRequest.Status.CONFIRMED)
    return {
        "totalRevenue": total_revenue,
        "totalOrders": total_orders,
        "averageOrderValue": round(total_revenue / total_orders) if total_orders else 0,
        "confirmationRate": _percent(confirmed, total_orders),
    }


# ---------------------------------- database -----------------------------------

def _figures(requests, lacarte_paise) -> List[RequestFigure]:
    figures = []
    for service_request in requests:
        items = None
        if service_request.status != ServiceRequest.Status.CONFIRMED:
            items = list(service_request.items.all())
        totals = calculate_request_totals(service_request, items=items, fallback_lacarte_paise=lacarte_paise)
        figures.append(
            RequestFigure(
                day=timezone.localtime(service_request.created_at).date(),
                status=service_request.status,
                total_paise=totals.total_paise,
            )
        )
    return figures


def top_services(requests_qs, limit: int = TOP_SERVICES) -> List[dict]:
    rows = (
        RequestItem.objects.filter(request__in=requests_qs)
        .values("label")
        .annotate(count=Count("id"), revenue=Sum("price_paise"))
        .order_by("-revenue", "label")[:limit]
    )
    return [{"name": r["label"], "count": r["count"], "revenue": r["revenue"] or 0} for r in rows]


def addons_performance(requests_qs) -> List[dict]:
    confirmed_qs = requests_qs.filter(status=ServiceRequest.Status.CONFIRMED)
    confirmed_count = confirmed_qs.count()
    stats = {
        row["addon_id"]: row
        for row in ConfirmedOrderAddon.objects.filter(request__in=confirmed_qs)
        .values("addon_id")
        .annotate(orders=Count("request", distinct=True), revenue=Sum("price_paise"))
    }
    result = []
    for addon in Addon.objects.active():
        row = stats.get(addon.id, {})
        orders = row.get("orders", 0)
        result.append(
            {
                "name": addon.name,
                "orders": orders,
                "adoptionRate": _percent(orders, confirmed_count),
                "revenue": row.get("revenue") or 0,
            }
        )
    return result


def build_analytics(start: date, end: date) -> dict:
    requests_qs = ServiceRequest.objects.filter(created_at__date__gte=start, created_at__date__lte=end)
    figures = _figures(requests_qs.prefetch_related("items"), get_lacarte_price())
    return {
        **summarize(figures),
        "ordersByStatus": orders_by_status(figures),
        "topServices": top_services(requests_qs),
        "revenueByPeriod": revenue_by_period(figures, start, end),
        "addonsPerformance": addons_performance(requests_qs),
        "dailyTrends": daily_trends(figures, start, end),
    }
