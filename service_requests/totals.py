"""Read-path totals for requests.

Stored totals can lag behind the La Carte charge on rows written before the
charge was introduced, so everything that displays or exports a total goes
through ``calculate_request_totals``: it derives subtotal + La Carte and
never reports less than that.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Iterable, Optional


@dataclass(frozen=True)
class RequestTotals:
    subtotal_paise: int
    total_paise: int
    la_carte_applied: int


def _field(source, name):
    if isinstance(source, Mapping):
        return source.get(name)
    return getattr(source, name, None)


def _items_subtotal(items) -> Optional[int]:
    if not items:
        return None
    return sum(_field(item, "price_paise") or 0 for item in items if item is not None)


def calculate_request_totals(
    source,
    items: Optional[Iterable] = None,
    fallback_lacarte_paise: Optional[int] = None,
) -> RequestTotals:
    """Reconcile the stored totals of ``source`` with its items and La Carte charge."""
    items = list(items) if items is not None else None
    subtotal = _items_subtotal(items)
    if subtotal is None:
        subtotal = _field(source, "subtotal_paise") or 0

    lacarte = _field(source, "lacarte_paise")
    if lacarte is None:
        lacarte = fallback_lacarte_paise if fallback_lacarte_paise is not None else 0

    stored_total = _field(source, "total_paise") or 0
    return RequestTotals(
        subtotal_paise=subtotal,
        total_paise=max(stored_total, subtotal + lacarte),
        la_carte_applied=lacarte,
    )
