"""Textual integration for propslot. Opt-in — requires textual.

Attached layout metadata for child widgets: a container can give each child
a stretch factor without the child's class knowing about it. Changing a
child's stretch refreshes its parent's layout.

// [LAW:locality-or-seam] Textual coupling isolated in this module — core propslot stays agnostic.
// [LAW:no-shared-mutable-globals] _paused/_dirty have a single owner (this module), explicit API
//   (pause), documented invariant (id in _dirty -> _paused[id] > 0).
"""

from __future__ import annotations

import logging
from contextlib import contextmanager

from textual.css.query import NoMatches
from textual.widget import Widget

from propslot.property import Property

logger = logging.getLogger("propslot.textual")

# Module-owned pause state — keyed by id(container) so multiple apps work in tests.
_paused: dict[int, int] = {}  # id(container) -> pause depth
_dirty: set[int] = set()


def _coerce_stretch(widget: Widget, value) -> int:
    return max(0, int(value))


def _refresh_parent(widget: Widget, old_value: int, new_value: int) -> None:
    parent = widget.parent
    if parent is None:
        return
    key = id(parent)
    if key in _paused:
        _dirty.add(key)
        return
    parent.refresh(layout=True)


stretch: Property[Widget, int] = Property(
    "stretch",
    default=0,
    coerce=_coerce_stretch,
    changed=_refresh_parent,
)


@contextmanager
def pause(container: Widget):
    """Defer layout refreshes while restretching several children.

    Pauses nest: only the outermost exit refreshes, at most once, and only
    if some child changed.
    """
    key = id(container)
    _paused[key] = _paused.get(key, 0) + 1
    try:
        yield
    finally:
        depth = _paused.pop(key) - 1
        if depth:
            _paused[key] = depth
        elif key in _dirty:
            _dirty.discard(key)
            container.refresh(layout=True)


def set_child_stretch(container: Widget, selector: str, value: int) -> bool:
    """Set the stretch of the child matching selector. False if none matches."""
    try:
        child = container.query_one(selector)
    except NoMatches:
        logger.debug("No child matching %r to stretch", selector)
        return False
    stretch.set(child, value)
    return True


def stretch_fractions(container: Widget) -> list[tuple[Widget, float]]:
    """Each child's share of the container's total stretch.

    Children share equally when no child has a stretch.
    """
    children = list(container.children)
    if not children:
        return []
    factors = [stretch.get(child) for child in children]
    total = sum(factors)
    if total == 0:
        return [(child, 1 / len(children)) for child in children]
    return [(child, factor / total) for child, factor in zip(children, factors)]
