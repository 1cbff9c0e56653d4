
from collections import namedtuple

from rlturns.utils.collections import is_namedtuple

# What an environment reports after each step, as consumed by
# ``TurnBuffer.push_experience()``.  ``meta`` holds any extra per-step fields
# (e.g. ``priority``); the buffer keeps only the ones its field set knows.
Observation = namedtuple("Observation", ["state", "reward", "terminal", "meta"])

# Step record in the (observation, reward, done, env_info) convention.
EnvStep = namedtuple("EnvStep",
    ["observation", "reward", "done", "env_info"])


def meta_items(meta):
    """Normalize observation metadata (None, mapping, or namedtuple) into a
    dict."""
    if meta is None:
        return dict()
    if is_namedtuple(meta):
        return dict(meta._asdict())
    return dict(meta)


def observation_from_env_step(env_step):
    """Re-label an ``EnvStep``-like tuple as an ``Observation``: ``done``
    becomes ``terminal`` and ``env_info`` becomes the metadata."""
    return Observation(
        state=env_step.observation,
        reward=env_step.reward,
        terminal=env_step.done,
        meta=env_step.env_info,
    )
