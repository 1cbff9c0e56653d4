
"""
The two recognized field sets and their index-to-transition mappings.

A transition at index ``i`` pairs the pre-transition ``state``/``action`` at
``i`` with the consequences recorded at ``i+1``: ``reward``, ``terminal``
(and ``priority``), along with ``next_state``/``next_action``.  So with
``N`` recorded turns there are ``N - 1`` complete transitions.
"""

from collections import namedtuple

from rlturns.turns.frame import select_frame

FieldSet = namedtuple("FieldSet",
    ["name", "fields", "TurnCls", "TransitionCls", "transition"])

RTSA_FIELDS = ("reward", "terminal", "state", "action")
PRTSA_FIELDS = ("priority",) + RTSA_FIELDS

# Explicit push structures: one value per field, all required.
RtsaTurn = namedtuple("RtsaTurn", RTSA_FIELDS)
PrtsaTurn = namedtuple("PrtsaTurn", PRTSA_FIELDS)

# Single transitions hold one value per field; batches use namedarraytuple.
TransitionRtsa = namedtuple("TransitionRtsa",
    ["state", "action", "reward", "terminal", "next_state", "next_action"])
TransitionPrtsa = namedtuple("TransitionPrtsa",
    TransitionRtsa._fields + ("priority",))


def rtsa_transition(buffer, i):
    s = buffer.sequences
    return TransitionRtsa(
        state=select_frame(s.state, i, buffer.stack_size),
        action=select_frame(s.action, i),
        reward=select_frame(s.reward, i + 1),
        terminal=select_frame(s.terminal, i + 1),
        next_state=select_frame(s.state, i + 1, buffer.stack_size),
        next_action=select_frame(s.action, i + 1),
    )


def prtsa_transition(buffer, i):
    return TransitionPrtsa(*rtsa_transition(buffer, i),
        priority=select_frame(buffer.sequences.priority, i + 1))


RTSA = FieldSet(
    name="RTSA",
    fields=RTSA_FIELDS,
    TurnCls=RtsaTurn,
    TransitionCls=TransitionRtsa,
    transition=rtsa_transition,
)

PRTSA = FieldSet(
    name="PRTSA",
    fields=PRTSA_FIELDS,
    TurnCls=PrtsaTurn,
    TransitionCls=TransitionPrtsa,
    transition=prtsa_transition,
)

FIELD_SETS = (RTSA, PRTSA)
