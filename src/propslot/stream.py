"""Property change channel.

An EventStream carries PropertyChangedArgs to its listeners, synchronously
and in subscription order, inside the set()/coerce() call that caused the
change. Listeners can ask for a single property, or a single owner, instead
of filtering payloads themselves:

    changes = EventStream()
    size = Property("size", default=0, notify=changes)

    changes.subscribe(relayout, prop=size)
    changes.subscribe(lambda args: print(args.name), owner=panel)

The stream is also what PropertyOwnerMixin hands out as property_changed.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from propslot.property import Property, PropertyChangedArgs

Listener = Callable[["PropertyChangedArgs"], None]
Disposer = Callable[[], None]

# owner=None means "any owner", so a distinct marker is needed.
_ANY = object()


class _Subscription:
    __slots__ = ("callback", "prop", "owner")

    def __init__(self, callback: Listener, prop: Property | None, owner: object) -> None:
        self.callback = callback
        self.prop = prop
        self.owner = owner

    def wants(self, args: PropertyChangedArgs) -> bool:
        if self.prop is not None and args.property is not self.prop:
            return False
        return self.owner is _ANY or args.owner is self.owner


class EventStream:
    """Synchronous fan-out of property change payloads."""

    __slots__ = ("_subscriptions", "_closed")

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription] = []
        self._closed = False

    def emit(self, args: PropertyChangedArgs) -> None:
        """Deliver args to every matching listener."""
        if self._closed:
            return
        # Listeners may subscribe or unsubscribe while we deliver.
        for sub in tuple(self._subscriptions):
            if sub.wants(args):
                sub.callback(args)

    def subscribe(
        self,
        callback: Listener,
        *,
        prop: Property | None = None,
        owner: object = _ANY,
    ) -> Disposer:
        """Listen for changes, optionally only to prop and/or owner.

        Returns a function that removes the listener. Calling it twice is
        harmless.
        """
        sub = _Subscription(callback, prop, owner)
        self._subscriptions.append(sub)

        def _unsubscribe() -> None:
            if sub in self._subscriptions:
                self._subscriptions.remove(sub)

        return _unsubscribe

    def close(self) -> None:
        """Drop all listeners; later emits are ignored."""
        self._closed = True
        self._subscriptions.clear()

    @property
    def closed(self) -> bool:
        return self._closed

    def __repr__(self) -> str:
        state = "closed" if self._closed else f"{len(self._subscriptions)} listeners"
        return f"EventStream({state})"
