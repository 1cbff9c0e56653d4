
from functools import reduce

import numpy as np

from rlturns.utils.misc import empty, check_positive_int


def _check_range(sequence, low, high):
    """Positions [low, high) must all lie inside the sequence; never wrap."""
    if low < 0 or high > len(sequence):
        raise IndexError(f"Positions [{low}, {high}) out of range for field "
            f"sequence of length {len(sequence)}.")


def select_frame(sequence, j, stack_size=None):
    """Value at position ``j``, or with ``stack_size=S`` the ``S`` values at
    ``j-S+1 .. j`` stacked OLDEST to NEWEST along a new trailing axis."""
    check_positive_int("stack_size", stack_size, optional=True)
    if stack_size is None:
        _check_range(sequence, j, j + 1)
        return sequence[j]
    _check_range(sequence, j - stack_size + 1, j + 1)
    return np.stack([np.asarray(sequence[k])
        for k in range(j - stack_size + 1, j + 1)], axis=-1)


def consecutive_view(sequence, inds, n_step=None, stack_size=None):
    """Gather values from a field sequence at the (1-D) indexes ``inds``.

    * Neither option: one value per index, shaped [n,...].
    * ``stack_size=S``: the ``S`` values ending at each index (frame
      stacking), shaped [n,...,S] with frames OLDEST to NEWEST.
    * ``n_step=W``: the ``W`` values starting at each index, time-major
      [W,n,...], ready for reduction over the leading (time) dimension.

    The two options are mutually exclusive.  Every requested position must
    lie inside the sequence; positions before the start (e.g. stacking with
    too little history) or past the end raise ``IndexError``.  Returns a new
    numpy array whose dtype is promoted over all gathered values (e.g. an
    int placeholder in the first turn does not truncate later floats).

    Each requested position costs one ``sequence[j]`` read, so a batch of
    ``n`` indexes makes ``n * W`` (or ``n * S``) reads of the backend.
    """
    if n_step is not None and stack_size is not None:
        raise ValueError("Use either n_step or stack_size, not both.")
    check_positive_int("n_step", n_step, optional=True)
    check_positive_int("stack_size", stack_size, optional=True)
    inds = np.asarray(inds)
    if inds.ndim != 1:
        raise ValueError(f"Expected 1-D indexes, got shape {inds.shape}.")
    if len(inds) and not np.issubdtype(inds.dtype, np.integer):
        raise TypeError(f"Indexes must be integers, got dtype {inds.dtype}.")
    n = len(inds)
    if n:
        lookback = 0 if stack_size is None else stack_size - 1
        ahead = 1 if n_step is None else n_step
        _check_range(sequence, int(inds.min()) - lookback,
            int(inds.max()) + ahead)

    if n_step is not None:
        positions = [[i + t for i in inds] for t in range(n_step)]  # [W,n]
    elif stack_size is not None:
        positions = [[i - stack_size + 1 + f for f in range(stack_size)]
            for i in inds]  # [n,S]
    else:
        positions = [[i] for i in inds]  # [n,1]
    values = [[np.asarray(sequence[j]) for j in row] for row in positions]
    flat = [v for row in values for v in row]
    if flat:
        example = flat[0]
        dtype = reduce(np.promote_types, (v.dtype for v in flat))
    else:
        example = np.asarray(sequence[0]) if len(sequence) else np.asarray(0.)
        dtype = example.dtype

    if n_step is not None:
        view = empty((n_step, n) + example.shape, dtype=dtype)
        for t, row in enumerate(values):
            for b, v in enumerate(row):
                view[t, b] = v
    elif stack_size is not None:
        view = empty((n,) + example.shape + (stack_size,), dtype=dtype)
        for b, row in enumerate(values):
            for f, v in enumerate(row):
                view[b, ..., f] = v
    else:
        view = empty((n,) + example.shape, dtype=dtype)
        for b, row in enumerate(values):
            view[b] = row[0]
    return view
