
import numpy as np
import torch

from rlturns.utils.misc import zeros


def discount_return_n_step(reward, done, discount, return_dest=None,
        done_n_dest=None):
    """Time-major window inputs: [n_step], [n_step,B], etc., where
    ``reward[k]`` and ``done[k]`` are the consequences of the k-th step after
    each sampled index.  Reduces the window into one discounted return per
    trailing position: ``sum_k discount ** k * reward[k]``, stopping after the
    first ``done=True`` (that step's reward is included, later ones are not).
    Returns the returns, shaped like ``reward[0]``, and ``done_n``, which is
    True wherever ``done=True`` appears anywhere in the window (so the value
    of the state after the window should not be bootstrapped).  Optionally
    writes into ``return_dest`` and ``done_n_dest``.  Supports numpy arrays
    and torch tensors."""
    n_step = reward.shape[0]
    if n_step < 1:
        raise ValueError("Need at least one step of rewards to discount.")
    return_ = return_dest if return_dest is not None else zeros(
        reward.shape[1:], dtype=reward.dtype)
    done_n = done_n_dest if done_n_dest is not None else zeros(
        done.shape[1:], dtype=done.dtype)
    return_[...] = reward[0]  # 1-step return is first reward.
    done_n[...] = done[0]  # True if done any time up through step k.
    is_torch = isinstance(done, torch.Tensor)
    maximum = torch.maximum if is_torch else np.maximum
    if is_torch:
        done_dtype = done.dtype
        done_n = done_n.type(reward.dtype)
        done = done.type(reward.dtype)
    for n in range(1, n_step):
        return_ += (discount ** n) * reward[n] * (1 - done_n)
        done_n[...] = maximum(done_n, done[n])
    if is_torch:
        done_n = done_n.type(done_dtype)
    return return_, done_n
