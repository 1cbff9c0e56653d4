

class BaseFieldSequence:
    """Storage for a single field (e.g. ``state`` or ``reward``) across all
    recorded turns.  Implemented outside this package (circular array,
    growable list, priority structure, ...); the turn buffer only needs the
    append / length / read interface below.  Sequences with unbounded
    capacity are never full."""

    def append(self, value):
        """Record the value for the newest turn, possibly ejecting the
        oldest one."""
        raise NotImplementedError

    def __len__(self):
        raise NotImplementedError

    def __getitem__(self, j):
        """Read the value at logical position ``j`` (0 is the oldest value
        still held)."""
        raise NotImplementedError

    def clear(self):
        raise NotImplementedError

    def is_empty(self):
        return len(self) == 0

    def is_full(self):
        return False
