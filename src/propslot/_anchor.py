"""Property id source.

Every Property mints its id here at construction. Ids key the per-owner
value tables in PropertyStore, so they must never repeat within a process.
"""

import itertools

# itertools.count is thread-safe (C-level GIL atomic)
_id_counter = itertools.count(1)


def new_id() -> int:
    return next(_id_counter)
