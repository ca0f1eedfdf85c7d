"""propslot: attached property descriptors for Python."""

from importlib.metadata import version as _version

__version__ = _version("propslot")

from propslot.store import PropertyStore, clear_property_data, get_default_store, set_default_store
from propslot.property import OWNER, Property, PropertyChangedArgs, PropertyOwnerError
from propslot.stream import EventStream
from propslot.owner import PropertyOwner, PropertyOwnerMixin
# textual NOT auto-imported — opt-in only

__all__ = [
    "Property",
    "PropertyChangedArgs",
    "PropertyOwner",
    "PropertyOwnerMixin",
    "PropertyOwnerError",
    "OWNER",
    "PropertyStore",
    "clear_property_data",
    "get_default_store",
    "set_default_store",
    "EventStream",
]
