
import numpy as np

from rlturns.algos.utils import discount_return_n_step
from rlturns.turns.frame import consecutive_view
from rlturns.utils.buffer import torchify_buffer, buffer_to
from rlturns.utils.collections import namedarraytuple
from rlturns.utils.logging import logger
from rlturns.utils.misc import check_positive_int
from rlturns.utils.quick_args import save__init__args

SamplesFromTurns = namedarraytuple("SamplesFromTurns",
    ["states", "actions", "rewards", "terminals", "next_states"])


def _check_config(discount, n_step_return, stack_size):
    if not 0 <= discount <= 1:
        raise ValueError(f"discount must be in [0, 1], got {discount}.")
    check_positive_int("n_step_return", n_step_return)
    check_positive_int("stack_size", stack_size, optional=True)


def extract_sarts(buffer, inds, discount, n_step_return, stack_size=None):
    """From turn buffer indexes ``inds``, extract n-step training data:
    state (and action) at each index, the discounted return of the
    ``n_step_return`` following rewards, whether the episode terminated
    within that horizon, and the state ``n_step_return`` steps later.

    Rewards are discounted as ``discount ** k`` from the step right after the
    sampled index, and stop after the first terminal in the window (data past
    it belongs to another episode); ``terminals`` is then True and the
    returned next state should not be bootstrapped from.  States are
    frame-stacked when ``stack_size`` is given.  Returns a
    ``SamplesFromTurns`` of numpy arrays with leading batch dimension
    ``len(inds)``.  Each index must satisfy ``0 <= i`` and
    ``i + n_step_return <= len(buffer)``.
    """
    _check_config(discount, n_step_return, stack_size)
    inds = np.asarray(inds)
    if inds.ndim != 1:
        raise ValueError(f"Expected 1-D indexes, got shape {inds.shape}.")
    if len(inds) == 0:
        inds = inds.astype(np.int64)
    if len(inds) and (inds.min() < 0 or
            inds.max() + n_step_return > len(buffer)):
        raise IndexError(f"Indexes in [{inds.min()}, {inds.max()}] with "
            f"n_step_return={n_step_return} out of range for turn buffer of "
            f"length {len(buffer)}.")
    s = buffer.sequences
    end_inds = inds + n_step_return
    shift_inds = inds + 1

    states = consecutive_view(s.state, inds, stack_size=stack_size)
    actions = consecutive_view(s.action, inds)
    next_states = consecutive_view(s.state, end_inds, stack_size=stack_size)
    batch_rewards = consecutive_view(s.reward, shift_inds,
        n_step=n_step_return).astype(np.float32)  # [n_step,B]
    batch_terminals = consecutive_view(s.terminal, shift_inds,
        n_step=n_step_return).astype(bool)  # [n_step,B]

    rewards, terminals = discount_return_n_step(batch_rewards,
        batch_terminals, discount)
    return SamplesFromTurns(
        states=states,
        actions=actions,
        rewards=rewards,
        terminals=terminals,
        next_states=next_states,
    )


class NStepTurnExtractor:
    """Builds n-step training batches from a ``TurnBuffer``, holding the
    return settings (``discount``, ``n_step_return``, ``stack_size``).

    Does not choose which indexes to train on: an external sampler draws
    them, e.g. uniformly from ``valid_idxs()``, and passes them to
    ``extract_batch()``.
    """

    def __init__(self, buffer, discount=1, n_step_return=1, stack_size=None):
        _check_config(discount, n_step_return, stack_size)
        save__init__args(locals())
        logger.log(f"{buffer.field_set.name} n-step extractor: "
            f"discount={discount}, n_step_return={n_step_return}"
            + ("" if stack_size is None else f", {stack_size}-frame states."))

    def valid_idxs(self):
        """Indexes with enough history for frame stacking and enough
        recorded future for the full n-step window."""
        low = 0 if self.stack_size is None else self.stack_size - 1
        high = len(self.buffer) - self.n_step_return + 1
        return np.arange(low, max(low, high))

    def extract_sarts(self, inds):
        """Batch as numpy arrays (see ``extract_sarts()``)."""
        return extract_sarts(self.buffer, inds, self.discount,
            self.n_step_return, self.stack_size)

    def extract_batch(self, inds, device=None):
        """Batch as torch tensors, optionally moved to ``device``."""
        batch = torchify_buffer(self.extract_sarts(inds))
        if device is not None:
            batch = buffer_to(batch, device)
        return batch
