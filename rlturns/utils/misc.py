
import numpy as np
import torch


def zeros(shape, dtype):
    """Attempt to return torch tensor of zeros, or if numpy dtype provided,
    return numpy array of zeros."""
    try:
        return torch.zeros(shape, dtype=dtype)
    except TypeError:
        return np.zeros(shape, dtype=dtype)


def empty(shape, dtype):
    """Attempt to return empty torch tensor, or if numpy dtype provided,
    return empty numpy array."""
    try:
        return torch.empty(shape, dtype=dtype)
    except TypeError:
        return np.empty(shape, dtype=dtype)


def check_positive_int(name, value, optional=False):
    """Raise ``ValueError`` unless ``value`` is an integer >= 1 (or None,
    if ``optional``).  Bools are rejected."""
    if optional and value is None:
        return
    if (isinstance(value, bool) or not isinstance(value, (int, np.integer))
            or value < 1):
        raise ValueError(f"{name} must be a positive integer, got {value!r}.")
