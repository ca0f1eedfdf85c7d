"""PropertyStore — owner-keyed storage for attached property values.

Each owner gets one value table (property id -> value), created on first
access. Owners are keyed by identity and held through weak references, so
the store never keeps an owner alive: the table disappears when the owner
is garbage collected or when clear() drops it early.
"""

from __future__ import annotations

import logging
import weakref

logger = logging.getLogger("propslot.store")


class PropertyStore:
    """Identity-keyed, weakly-held map of owner -> property value table."""

    __slots__ = ("_tables",)

    def __init__(self) -> None:
        # id(owner) -> (weakref to owner, value table)
        self._tables: dict[int, tuple[weakref.ref, dict[int, object]]] = {}

    def lookup_table(self, owner: object) -> dict[int, object]:
        """Return the owner's value table, creating an empty one if needed."""
        table = self.find_table(owner)
        if table is not None:
            return table
        key = id(owner)
        tables = self._tables

        def _reap(ref: weakref.ref) -> None:
            # id() may have been recycled by a newer owner already
            entry = tables.get(key)
            if entry is not None and entry[0] is ref:
                del tables[key]

        try:
            ref = weakref.ref(owner, _reap)
        except TypeError:
            raise TypeError(
                f"cannot attach properties to {type(owner).__name__!r} objects: "
                "owners must support weak references"
            ) from None
        table = {}
        tables[key] = (ref, table)
        return table

    def find_table(self, owner: object) -> dict[int, object] | None:
        """Return the owner's value table, or None if it has none."""
        entry = self._tables.get(id(owner))
        if entry is None or entry[0]() is not owner:
            return None
        return entry[1]

    def clear(self, owner: object) -> None:
        """Drop every stored value for owner. No-op if it has none."""
        if self.find_table(owner) is None:
            return
        del self._tables[id(owner)]
        logger.debug("Cleared property data for %s", type(owner).__name__)

    def __contains__(self, owner: object) -> bool:
        return self.find_table(owner) is not None

    def __len__(self) -> int:
        return len(self._tables)

    def __repr__(self) -> str:
        return f"PropertyStore({len(self._tables)} owners)"


# ─── Default store ───────────────────────────────────────────────────────────
_default_store = PropertyStore()


def get_default_store() -> PropertyStore:
    """The store used by properties constructed without store=."""
    return _default_store


def set_default_store(store: PropertyStore) -> PropertyStore:
    """Install a new default store. Returns the previous one.

    Properties without an explicit store resolve the default on every call,
    so swapping it isolates all of their values at once:

        previous = propslot.set_default_store(PropertyStore())
        try:
            ...
        finally:
            propslot.set_default_store(previous)
    """
    global _default_store
    previous = _default_store
    _default_store = store
    return previous


def clear_property_data(owner: object, store: PropertyStore | None = None) -> None:
    """Clear all stored property values for owner.

    Every property reverts to its default on the next get(). No change
    notification is emitted for any of them.
    """
    (store if store is not None else _default_store).clear(owner)
