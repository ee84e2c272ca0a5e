"""Customer selection state and where it is kept between requests.

A selection is the set of request items, the set of add-ons and at most one
bundle the customer has picked. The state object is passed around
explicitly; stores only persist it.
"""

from dataclasses import dataclass, field
from typing import Dict, Iterable, Optional, Protocol, Set


@dataclass
class SelectionState:
    items: Set[str] = field(default_factory=set)
    addons: Set[str] = field(default_factory=set)
    bundle: Optional[str] = None

    @classmethod
    def of(cls, items: Iterable = (), addons: Iterable = (), bundle=None) -> "SelectionState":
        return cls(
            items={str(i) for i in items},
            addons={str(a) for a in addons},
            bundle=str(bundle) if bundle else None,
        )

    @property
    def bundles(self) -> Set[str]:
        return {self.bundle} if self.bundle else set()

    def is_empty(self) -> bool:
        return not (self.items or self.addons or self.bundle)

    def toggle_item(self, item_id) -> None:
        self.items ^= {str(item_id)}

    def toggle_addon(self, addon_id) -> None:
        self.addons ^= {str(addon_id)}

    def toggle_bundle(self, bundle_id) -> None:
        """Select a bundle, replacing any other; selecting the current one clears it."""
        bundle_id = str(bundle_id)
        self.bundle = None if self.bundle == bundle_id else bundle_id

    def to_dict(self) -> dict:
        return {"items": sorted(self.items), "addons": sorted(self.addons), "bundle": self.bundle}

    @classmethod
    def from_dict(cls, data) -> "SelectionState":
        data = data or {}
        return cls.of(data.get("items") or (), data.get("addons") or (), data.get("bundle"))


class SelectionStore(Protocol):
    def load(self, slug: str) -> Optional[SelectionState]:
        ...

    def save(self, slug: str, state: SelectionState) -> None:
        ...

    def clear(self, slug: str) -> None:
        ...


class SessionSelectionStore:
    """Keeps one selection per order slug in the Django session."""

    prefix = "selection_"

    def __init__(self, session):
        self.session = session

    def _key(self, slug):
        return f"{self.prefix}{slug}"

    def load(self, slug):
        data = self.session.get(self._key(slug))
        return SelectionState.from_dict(data) if data is not None else None

    def save(self, slug, state):
        self.session[self._key(slug)] = state.to_dict()
        self.session.modified = True

    def clear(self, slug):
        self.session.pop(self._key(slug), None)
        self.session.modified = True


class MemorySelectionStore:
    def __init__(self):
        self.data: Dict[str, dict] = {}

    def load(self, slug):
        data = self.data.get(slug)
        return SelectionState.from_dict(data) if data is not None else None

    def save(self, slug, state):
        self.data[slug] = state.to_dict()

    def clear(self, slug):
        self.data.pop(slug, None)


class NullSelectionStore:
    """Persists nothing; every load starts from the defaults."""

    def load(self, slug):
        return None

    def save(self, slug, state):
        pass

    def clear(self, slug):
        pass
