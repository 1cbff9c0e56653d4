
import numpy as np
import torch


def torchify_buffer(buffer_):
    """Convert contents of ``buffer_`` from numpy arrays to torch tensors.
    ``buffer_`` can be an arbitrary structure of tuples, namedtuples and
    namedarraytuples, and a new, matching structure will be returned.
    ``None`` fields remain ``None``, and torch tensors are left alone.  Numpy
    scalars (e.g. a single stored reward) become 0-dim tensors."""
    if buffer_ is None:
        return
    if isinstance(buffer_, np.ndarray):
        return torch.from_numpy(buffer_)
    elif isinstance(buffer_, np.generic):
        return torch.as_tensor(buffer_)
    elif isinstance(buffer_, torch.Tensor):
        return buffer_
    contents = tuple(torchify_buffer(b) for b in buffer_)
    if type(buffer_) is tuple:  # tuple, namedtuple instantiate differently.
        return contents
    return buffer_._make(contents)


def buffer_to(buffer_, device=None):
    """Send contents of ``buffer_`` to specified device (contents must be
    torch tensors.). ``buffer_`` can be an arbitrary structure of tuples,
    namedtuples and namedarraytuples, and a new, matching structure will be
    returned."""
    if buffer_ is None:
        return
    if isinstance(buffer_, torch.Tensor):
        return buffer_.to(device)
    elif isinstance(buffer_, np.ndarray):
        raise TypeError("Cannot move numpy array to device.")
    contents = tuple(buffer_to(b, device=device) for b in buffer_)
    if type(buffer_) is tuple:
        return contents
    return buffer_._make(contents)
