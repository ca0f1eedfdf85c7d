"""Attached property descriptors.

A Property defines one named value slot whose storage lives outside the
owner, in a PropertyStore keyed by owner identity. One descriptor is
typically created per logical property and shared by every owner:

    stretch = Property(
        "stretch",
        default=0,
        coerce=lambda owner, value: max(0, value),
        changed=lambda owner, old, new: owner.parent.relayout(),
    )

    stretch.set(child, 2)
    stretch.get(child)  # 2

Reads never run coercion, comparison or side effects. Writes always commit
the (coerced) value first, then, if the value changed, run the changed
hook and finally emit a PropertyChangedArgs on the notification channel.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Callable, Generic, NamedTuple, TypeVar

from propslot import _anchor
from propslot.store import PropertyStore, get_default_store

if TYPE_CHECKING:
    from propslot.owner import PropertyOwner

O = TypeVar("O")
V = TypeVar("V")

logger = logging.getLogger("propslot.property")

# notify=OWNER: emit on the owner's own property_changed channel.
OWNER = "owner"


class PropertyOwnerError(TypeError):
    """The owner does not expose the property_changed channel it must have."""


class PropertyChangedArgs(NamedTuple):
    """Payload emitted when a property value changes."""

    property: Property
    name: str | None
    owner: Any
    old_value: Any
    new_value: Any


def _check_callable(label: str, fn: object) -> None:
    if fn is not None and not callable(fn):
        raise TypeError(f"{label} must be callable, got {type(fn).__name__}")


class Property(Generic[O, V]):
    """A property descriptor whose values are stored per owner.

    Options:
        default: value used while the slot is unset. Shared by all owners,
            so it should be immutable.
        default_factory: owner -> value. Takes precedence over default and
            runs every time a default is needed for an unset slot.
        coerce: (owner, value) -> value, applied by set() and coerce().
        compare: (old, new) -> bool, True when the values are equivalent.
            Defaults to identity, then ==. Values whose == does not return
            a plain bool (numpy arrays, pandas frames) need their own
            compare; the default raises for them once the value is stored.
        changed: (owner, old, new) side effect, run before notification.
        notify: None, OWNER, or any object with an emit(args) method.
        metadata: arbitrary dict for consumers. A fresh {} by default.
        store: the PropertyStore to use. Defaults to the process default
            store, resolved on each call.

    Also usable as a class attribute, in which case instance attribute
    access routes to get()/set():

        class Panel(PropertyOwnerMixin):
            title = Property(default="", notify=OWNER)
    """

    __slots__ = (
        "_id",
        "_name",
        "_default",
        "_default_factory",
        "_coerce",
        "_compare",
        "_changed",
        "_notify",
        "_metadata",
        "_store",
    )

    def __init__(
        self,
        name: str | None = None,
        *,
        default: V | None = None,
        default_factory: Callable[[O], V] | None = None,
        coerce: Callable[[O, V], V] | None = None,
        compare: Callable[[V, V], bool] | None = None,
        changed: Callable[[O, V, V], None] | None = None,
        notify: Any = None,
        metadata: dict | None = None,
        store: PropertyStore | None = None,
    ) -> None:
        _check_callable("default_factory", default_factory)
        _check_callable("coerce", coerce)
        _check_callable("compare", compare)
        _check_callable("changed", changed)
        if isinstance(notify, str):
            if notify != OWNER:
                raise TypeError(f"unknown notify channel {notify!r}")
        elif notify is not None and not callable(getattr(notify, "emit", None)):
            raise TypeError(
                f"notify must be None, OWNER or have an emit() method, got {type(notify).__name__}"
            )
        self._id = _anchor.new_id()
        self._name = name
        self._default = default
        self._default_factory = default_factory
        self._coerce = coerce
        self._compare = compare
        self._changed = changed
        self._notify = notify
        self._metadata = metadata if metadata is not None else {}
        self._store = store

    @property
    def id(self) -> int:
        return self._id

    @property
    def name(self) -> str | None:
        return self._name

    @property
    def metadata(self) -> dict:
        return self._metadata

    @property
    def store(self) -> PropertyStore:
        """The store holding this property's values right now."""
        return self._store if self._store is not None else get_default_store()

    # --- Operations ---

    def get(self, owner: O) -> V:
        """Current value for owner.

        An unset slot gets its default computed and stored. That is not a
        change: nothing is coerced, compared or notified.
        """
        table = self.store.lookup_table(owner)
        if self._id in table:
            return table[self._id]
        value = table[self._id] = self._create_value(owner)
        return value

    def set(self, owner: O, value: V) -> None:
        """Coerce and store value for owner, notifying if it changed.

        If the slot is unset, the default is computed as the old value for
        the comparison but is not stored.
        """
        table = self.store.lookup_table(owner)
        old_value = table[self._id] if self._id in table else self._create_value(owner)
        new_value = table[self._id] = self._coerce_value(owner, value)
        self._notify_if_changed(owner, old_value, new_value)

    def coerce(self, owner: O) -> None:
        """Re-run coercion on the current value, notifying if it changed.

        Used when state the coerce function depends on has changed.
        """
        table = self.store.lookup_table(owner)
        old_value = table[self._id] if self._id in table else self._create_value(owner)
        new_value = table[self._id] = self._coerce_value(owner, old_value)
        self._notify_if_changed(owner, old_value, new_value)

    def has_value(self, owner: O) -> bool:
        """Whether owner's slot is set. Does not create a value table."""
        table = self.store.find_table(owner)
        return table is not None and self._id in table

    # --- Python descriptor protocol ---

    def __set_name__(self, owner_type: type, name: str) -> None:
        if self._name is None:
            self._name = name

    def __get__(self, instance: O | None, owner_type: type | None = None):
        if instance is None:
            return self
        return self.get(instance)

    def __set__(self, instance: O, value: V) -> None:
        self.set(instance, value)

    # --- Internals ---

    def _create_value(self, owner: O) -> V:
        create = self._default_factory
        return create(owner) if create is not None else self._default

    def _coerce_value(self, owner: O, value: V) -> V:
        coerce = self._coerce
        return coerce(owner, value) if coerce is not None else value

    def _same(self, old_value: V, new_value: V) -> bool:
        compare = self._compare
        if compare is not None:
            return compare(old_value, new_value)
        return old_value is new_value or bool(old_value == new_value)

    def _notify_if_changed(self, owner: O, old_value: V, new_value: V) -> None:
        changed = self._changed
        notify = self._notify
        # Nothing observes the change: don't pay for the comparison.
        if changed is None and notify is None:
            return
        if self._same(old_value, new_value):
            return
        if changed is not None:
            changed(owner, old_value, new_value)
        if notify is not None:
            channel = self._owner_channel(owner) if isinstance(notify, str) else notify
            logger.debug("Property %s changed: %r -> %r", self, old_value, new_value)
            channel.emit(PropertyChangedArgs(self, self._name, owner, old_value, new_value))

    def _owner_channel(self, owner: PropertyOwner):
        channel = getattr(owner, "property_changed", None)
        if channel is None:
            raise PropertyOwnerError(
                f"{type(owner).__name__!r} has no property_changed channel; "
                f"required by {self!r} (notify=OWNER)"
            )
        return channel

    def __repr__(self) -> str:
        label = self._name if self._name is not None else f"#{self._id}"
        return f"Property({label})"
