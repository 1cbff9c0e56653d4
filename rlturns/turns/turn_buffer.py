
from collections import namedtuple

import numpy as np

from rlturns.envs.base import meta_items
from rlturns.turns.field_sets import FIELD_SETS
from rlturns.utils.collections import is_namedtuple
from rlturns.utils.logging import logger
from rlturns.utils.misc import check_positive_int
from rlturns.utils.quick_args import save__init__args


class TurnBuffer:
    """
    Bundle of per-field sequences (one per name in ``field_set.fields``)
    which are pushed together once per environment step, read back as
    transitions.  The field set (``RTSA`` or ``PRTSA``) determines which
    fields exist and how an index maps onto them (see ``field_sets``).

    Storage is supplied by the caller: ``sequences`` maps each field name to
    an appendable, indexable sequence (see ``BaseFieldSequence``), which the
    buffer owns from then on.  Data is only ever appended (``push*()``) or
    wiped (``clear()``), never written by index.

    With ``stack_size=S``, ``state`` and ``next_state`` of each transition
    are the last ``S`` frames stacked on a trailing axis, which requires
    ``S-1`` turns of history before the requested index.
    """

    def __init__(self, field_set, sequences, stack_size=None):
        if not any(field_set is f for f in FIELD_SETS):
            raise TypeError(f"Unrecognized field set: {field_set!r}; use one "
                f"of {[f.name for f in FIELD_SETS]}.")
        check_positive_int("stack_size", stack_size, optional=True)
        if is_namedtuple(sequences):
            sequences = sequences._asdict()
        if set(sequences) != set(field_set.fields):
            raise ValueError(f"{field_set.name} buffer needs sequences for "
                f"exactly {field_set.fields}, got {tuple(sequences)}.")
        save__init__args(locals())
        SequencesCls = namedtuple(f"{field_set.name}Sequences",
            field_set.fields)
        self.sequences = SequencesCls(**{k: sequences[k]
            for k in field_set.fields})
        logger.debug(f"{field_set.name} turn buffer with fields "
            f"{field_set.fields}"
            + ("" if stack_size is None else f", {stack_size}-frame states."))

    # Field accessors: buffer.state, buffer.reward, ...

    @property
    def state(self):
        return self.sequences.state

    @property
    def action(self):
        return self.sequences.action

    @property
    def reward(self):
        return self.sequences.reward

    @property
    def terminal(self):
        return self.sequences.terminal

    @property
    def priority(self):
        if "priority" not in self.field_set.fields:
            raise AttributeError(f"{self.field_set.name} buffer has no "
                "priority field.")
        return self.sequences.priority

    # Writing.

    def push(self, **fields):
        """Append one value to each named field sequence.  Names the field
        set does not recognize (e.g. extra environment metadata) are silently
        ignored."""
        for name, value in fields.items():
            if name in self.field_set.fields:
                getattr(self.sequences, name).append(value)

    def push_experience(self, observation, action):
        """Push an ``(Observation, action)`` pair: the observation's state,
        reward and terminal, the action, and any metadata entries (which take
        precedence over the former on name clashes)."""
        fields = dict(
            state=observation.state,
            reward=observation.reward,
            terminal=observation.terminal,
            action=action,
        )
        fields.update(meta_items(observation.meta))
        self.push(**fields)

    def push_turn(self, turn):
        """Strict push: ``turn`` must be this field set's own turn struct
        (``RtsaTurn`` or ``PrtsaTurn``), carrying every field."""
        if type(turn) is not self.field_set.TurnCls:
            raise TypeError(f"{self.field_set.name} buffer expects a "
                f"{self.field_set.TurnCls.__name__}, got "
                f"{type(turn).__name__}.")
        for name, value in turn._asdict().items():
            getattr(self.sequences, name).append(value)

    def clear(self):
        for sequence in self.sequences:
            sequence.clear()
        logger.debug(f"Cleared {self.field_set.name} turn buffer.")

    # Reading.

    def is_full(self):
        return all(sequence.is_full() for sequence in self.sequences)

    def is_empty(self):
        return all(sequence.is_empty() for sequence in self.sequences)

    def __len__(self):
        """Number of complete transitions: the first recorded turn holds only
        a starting state, with no consequence recorded yet."""
        return max(0, len(self.sequences.terminal) - 1)

    @property
    def shape(self):
        return (len(self),)

    def get(self, i):
        """Transition at index ``i``, a ``field_set.TransitionCls``."""
        if isinstance(i, bool) or not isinstance(i, (int, np.integer)):
            raise TypeError(f"Turn buffer index must be an integer, got "
                f"{type(i).__name__}.")
        if not 0 <= i < len(self):
            raise IndexError(f"Index {i} out of range for turn buffer of "
                f"length {len(self)}.")
        return self.field_set.transition(self, int(i))

    __getitem__ = get

    def __iter__(self):
        for i in range(len(self)):
            yield self.get(i)

    def __repr__(self):
        return (f"{type(self).__name__}({self.field_set.name}, "
            f"length={len(self)})")
