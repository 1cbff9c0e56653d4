import unittest
from collections import namedtuple

import numpy as np

from rlturns.envs.base import EnvStep, Observation, observation_from_env_step
from rlturns.turns.field_sets import (RTSA, PRTSA, RtsaTurn, PrtsaTurn,
    TransitionRtsa, TransitionPrtsa)
from rlturns.turns.turn_buffer import TurnBuffer

from field_sequences import ListFieldSequence, make_buffer, fill_episode


class TestTurnBufferLength(unittest.TestCase):

    def test_empty(self):
        buffer = make_buffer()
        self.assertEqual(len(buffer), 0)
        self.assertTrue(buffer.is_empty())
        self.assertFalse(buffer.is_full())
        self.assertEqual(buffer.shape, (0,))

    def test_start_turn_only(self):
        buffer = make_buffer()
        buffer.push(state=0, action=0, reward=0., terminal=False)
        self.assertEqual(len(buffer), 0)
        self.assertFalse(buffer.is_empty())

    def test_length_is_turns_minus_one(self):
        buffer = fill_episode(make_buffer(), [1., 2., 3.], [False] * 3)
        self.assertEqual(len(buffer), 3)
        self.assertEqual(buffer.shape, (3,))

    def test_clear(self):
        buffer = fill_episode(make_buffer(capacity=3), [1., 2., 3.],
            [False] * 3)
        self.assertTrue(buffer.is_full())
        buffer.clear()
        self.assertEqual(len(buffer), 0)
        self.assertTrue(buffer.is_empty())
        self.assertFalse(buffer.is_full())

    def test_full_only_when_every_sequence_full(self):
        buffer = fill_episode(make_buffer(capacity=3), [1., 2., 3., 4.],
            [False] * 4)
        self.assertTrue(buffer.is_full())
        self.assertEqual(len(buffer), 2)  # Oldest turns ejected.
        self.assertEqual(buffer[0].state, 2)

    def test_unbounded_never_full(self):
        buffer = fill_episode(make_buffer(), [1.] * 50, [False] * 50)
        self.assertFalse(buffer.is_full())


class TestTurnBufferRead(unittest.TestCase):

    def setUp(self):
        self.buffer = fill_episode(make_buffer(), [1., 2., 3.],
            [False, False, True])

    def test_rtsa_offsets(self):
        t = self.buffer.get(0)
        self.assertIsInstance(t, TransitionRtsa)
        self.assertEqual(t.state, 0)
        self.assertEqual(t.action, 0)
        self.assertEqual(t.reward, 1.)
        self.assertFalse(t.terminal)
        self.assertEqual(t.next_state, 1)
        self.assertEqual(t.next_action, 10)
        t = self.buffer[2]
        self.assertEqual(t.state, 2)
        self.assertEqual(t.action, 20)
        self.assertEqual(t.reward, 3.)
        self.assertTrue(t.terminal)
        self.assertEqual(t.next_state, 3)
        self.assertEqual(t.next_action, 30)

    def test_state_continuity(self):
        for i in range(len(self.buffer) - 1):
            self.assertEqual(self.buffer[i].next_state,
                self.buffer[i + 1].state)

    def test_reads_idempotent(self):
        first, second = self.buffer[1], self.buffer[1]
        for a, b in zip(first, second):
            np.testing.assert_array_equal(a, b)

    def test_positional_fields(self):
        t = self.buffer[0]
        self.assertEqual(t[0], t.state)
        self.assertEqual(t[2], t.reward)
        state, action, reward, terminal, next_state, next_action = t
        self.assertEqual(next_action, 10)

    def test_iteration(self):
        transitions = list(self.buffer)
        self.assertEqual(len(transitions), 3)
        self.assertEqual([t.reward for t in transitions], [1., 2., 3.])

    def test_out_of_range(self):
        with self.assertRaises(IndexError):
            self.buffer[3]
        with self.assertRaises(IndexError):
            self.buffer[-1]
        with self.assertRaises(IndexError):
            make_buffer()[0]

    def test_numpy_integer_index(self):
        self.assertEqual(self.buffer[np.int64(1)].state, 1)

    def test_non_integer_index(self):
        with self.assertRaises(TypeError):
            self.buffer[1.0]
        with self.assertRaises(TypeError):
            self.buffer[0:2]

    def test_field_accessors(self):
        self.assertIs(self.buffer.state, self.buffer.sequences.state)
        self.assertEqual(len(self.buffer.reward), 4)
        with self.assertRaises(AttributeError):
            self.buffer.priority


class TestTurnBufferPush(unittest.TestCase):

    def test_unrecognized_field_ignored(self):
        buffer = make_buffer()
        buffer.push(state=0, action=0, reward=0., terminal=False,
            debug_info="x")
        buffer.push(state=1, action=10, reward=1., terminal=False,
            debug_info="y")
        self.assertEqual(len(buffer), 1)
        buffer.push(debug_info="z")
        self.assertEqual(len(buffer), 1)
        self.assertEqual(buffer[0].reward, 1.)

    def test_priority_ignored_by_rtsa(self):
        buffer = make_buffer()
        buffer.push(state=0, action=0, reward=0., terminal=False, priority=5.)
        self.assertEqual(len(buffer.state), 1)

    def test_push_experience(self):
        buffer = make_buffer(PRTSA)
        buffer.push_experience(Observation(state=0, reward=0., terminal=False,
            meta=dict(priority=1., debug_info="start")), 7)
        buffer.push_experience(Observation(state=1, reward=2., terminal=True,
            meta=dict(priority=3.)), 8)
        self.assertEqual(len(buffer), 1)
        t = buffer[0]
        self.assertEqual(t.state, 0)
        self.assertEqual(t.action, 7)
        self.assertEqual(t.reward, 2.)
        self.assertTrue(t.terminal)
        self.assertEqual(t.next_action, 8)
        self.assertEqual(t.priority, 3.)

    def test_push_experience_without_meta(self):
        buffer = make_buffer()
        buffer.push_experience(Observation(0, 0., False, None), 1)
        buffer.push_experience(Observation(1, 1., False, None), 2)
        self.assertEqual(buffer[0].reward, 1.)

    def test_push_experience_from_env_step(self):
        EnvInfo = namedtuple("EnvInfo", ["priority", "game_score"])
        buffer = make_buffer(PRTSA)
        for k in range(3):
            step = EnvStep(observation=k, reward=float(k), done=k == 2,
                env_info=EnvInfo(priority=10. * k, game_score=k))
            buffer.push_experience(observation_from_env_step(step), -k)
        self.assertEqual(len(buffer), 2)
        self.assertEqual(buffer[1].priority, 20.)
        self.assertTrue(buffer[1].terminal)
        self.assertEqual(buffer[1].next_action, -2)

    def test_push_turn(self):
        buffer = make_buffer(PRTSA)
        buffer.push_turn(PrtsaTurn(priority=0., reward=0., terminal=False,
            state=0, action=0))
        buffer.push_turn(PrtsaTurn(priority=4., reward=1., terminal=False,
            state=1, action=10))
        self.assertEqual(buffer[0].priority, 4.)

    def test_push_turn_rejects_other_structs(self):
        # Stricter than push(): only the field set's own struct is accepted.
        buffer = make_buffer(PRTSA)
        with self.assertRaises(TypeError):
            buffer.push_turn(RtsaTurn(reward=0., terminal=False, state=0,
                action=0))
        with self.assertRaises(TypeError):
            buffer.push_turn(dict(priority=0., reward=0., terminal=False,
                state=0, action=0))
        self.assertTrue(buffer.is_empty())


class TestPrtsa(unittest.TestCase):

    def test_priority_offset(self):
        buffer = fill_episode(make_buffer(PRTSA), [1., 2.], [False, True],
            priorities=[0.5, 0.25])
        t = buffer[1]
        self.assertIsInstance(t, TransitionPrtsa)
        self.assertEqual(t.priority, 0.25)
        self.assertEqual(buffer[0].priority, 0.5)

    def test_rtsa_fields_unchanged(self):
        rtsa = fill_episode(make_buffer(RTSA), [1., 2.], [False, True])
        prtsa = fill_episode(make_buffer(PRTSA), [1., 2.], [False, True],
            priorities=[0.5, 0.25])
        for i in range(len(rtsa)):
            for name, value in rtsa[i]._asdict().items():
                self.assertEqual(getattr(prtsa[i], name), value)


class TestTurnBufferConstruction(unittest.TestCase):

    def test_unknown_field_set(self):
        with self.assertRaises(TypeError):
            TurnBuffer(("reward", "terminal", "state", "action"),
                {n: ListFieldSequence() for n in RTSA.fields})

    def test_mismatched_sequences(self):
        with self.assertRaises(ValueError):
            TurnBuffer(PRTSA, {n: ListFieldSequence() for n in RTSA.fields})
        with self.assertRaises(ValueError):
            TurnBuffer(RTSA, {n: ListFieldSequence() for n in PRTSA.fields})

    def test_bad_stack_size(self):
        with self.assertRaises(ValueError):
            make_buffer(stack_size=0)

    def test_sequences_ordered_by_field_set(self):
        sequences = {n: ListFieldSequence() for n in reversed(PRTSA.fields)}
        buffer = TurnBuffer(PRTSA, sequences)
        self.assertEqual(buffer.sequences._fields, PRTSA.fields)


class TestStackedTurnBuffer(unittest.TestCase):

    def test_stacked_states(self):
        buffer = fill_episode(make_buffer(stack_size=3), [0.] * 4,
            [False] * 4)
        t = buffer[2]
        np.testing.assert_array_equal(t.state, [0, 1, 2])
        np.testing.assert_array_equal(t.next_state, [1, 2, 3])
        self.assertEqual(t.action, 20)  # Actions are never stacked.

    def test_stacked_reads_idempotent(self):
        buffer = fill_episode(make_buffer(stack_size=2), [0.] * 3,
            [False] * 3)
        first, second = buffer[1], buffer[1]
        for a, b in zip(first, second):
            np.testing.assert_array_equal(a, b)
        np.testing.assert_array_equal(first.next_state, buffer[2].state)

    def test_stacked_mixed_dtype_frames(self):
        buffer = make_buffer(stack_size=2)
        buffer.push(state=np.zeros(2, dtype=np.uint8), action=0, reward=0,
            terminal=False)
        buffer.push(state=np.array([0.25, 0.75]), action=1, reward=1.,
            terminal=False)
        buffer.push(state=np.array([0.5, 1.5]), action=2, reward=1.,
            terminal=False)
        t = buffer[1]
        np.testing.assert_array_equal(t.state, [[0., 0.25], [0., 0.75]])
        np.testing.assert_array_equal(t.next_state, [[0.25, 0.5], [0.75, 1.5]])

    def test_stacked_needs_history(self):
        buffer = fill_episode(make_buffer(stack_size=3), [0.] * 4,
            [False] * 4)
        with self.assertRaises(IndexError):
            buffer[1]


if __name__ == "__main__":
    unittest.main()
