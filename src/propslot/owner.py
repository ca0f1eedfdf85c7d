"""Owner-side notification channel.

Properties created with notify=OWNER emit on the owner's own
property_changed channel, looked up when the change happens. An owner
provides it by satisfying PropertyOwner, most simply via the mixin.
"""

from __future__ import annotations

from functools import cached_property
from typing import Any, Protocol, runtime_checkable

from propslot.stream import EventStream


@runtime_checkable
class PropertyOwner(Protocol):
    """An object exposing a channel for property change notifications."""

    property_changed: Any  # anything with emit(PropertyChangedArgs)


class PropertyOwnerMixin:
    """Gives instances a lazily created property_changed EventStream.

    The stream lives in the instance __dict__, so clearing an owner's
    property data leaves its subscribers in place.

    Usage:
        class Panel(PropertyOwnerMixin):
            title = Property(default="", notify=OWNER)

        panel = Panel()
        panel.property_changed.subscribe(lambda args: print(args.name, args.new_value))
        panel.title = "Inbox"  # prints: title Inbox
    """

    @cached_property
    def property_changed(self) -> EventStream:
        return EventStream()
