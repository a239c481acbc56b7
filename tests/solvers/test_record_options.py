"""Tests for the record decorator and its actions."""

import jax.numpy as jnp
import pytest

import riemannprox as rp
from riemannprox.solvers import (
    RecordChange,
    RecordEntry,
    RecordEvery,
    RecordGroup,
    RecordIterate,
    RecordIteration,
    record_factory,
)


@pytest.fixture
def line():
    """Create the real line."""
    return rp.Euclidean()


@pytest.fixture
def problem(line):
    """Minimize |x| on the real line with the soft thresholding prox."""

    def soft_threshold(lam, x):
        return jnp.sign(x) * jnp.maximum(jnp.abs(x) - lam, 0.0)

    return rp.ProximalProblem(line, jnp.abs, [soft_threshold])


def make_state(max_iterations=4):
    """Cyclic proximal point state starting at 5 with constant step 1."""
    return rp.CyclicProximalPointState(
        jnp.array(5.0), stopping_criterion=rp.StopAfterIteration(max_iterations), lambda_fn=1.0
    )


def test_single_record_returns_list(problem):
    """Test that a single record yields a plain list."""
    state = rp.RecordOptions(make_state(), ["iteration"])

    rp.solve(problem, state)

    assert rp.get_record(state) == [1, 2, 3, 4]


def test_group_record_returns_dictionary(problem):
    """Test that several records are returned by name."""
    state = rp.RecordOptions(make_state(), ["iteration", "cost", "lambda"])

    rp.solve(problem, state)

    record = rp.get_record(state)
    assert set(record) == {"iteration", "cost", "lambda"}
    assert record["iteration"] == [1, 2, 3, 4]
    assert record["cost"] == pytest.approx([4.0, 3.0, 2.0, 1.0])
    assert record["lambda"] == [1.0, 1.0, 1.0, 1.0]
    assert rp.get_record(state, "cost") == pytest.approx([4.0, 3.0, 2.0, 1.0])


def test_single_record_by_name(problem):
    """Test that a single record is also available under its name."""
    state = rp.RecordOptions(make_state(), ["cost"])

    rp.solve(problem, state)

    assert rp.get_record(state, "cost") == pytest.approx([4.0, 3.0, 2.0, 1.0])
    with pytest.raises(KeyError):
        rp.get_record(state, "iteration")


def test_single_named_record_and_every(problem):
    """Test names given in the configuration and records of every k-th iteration."""
    named = rp.RecordOptions(make_state(2), [("visits", RecordEntry("order"))])
    every = rp.RecordOptions(make_state(), ["iteration", 2])

    rp.solve(problem, named)
    rp.solve(problem, every)

    assert rp.get_record(named, "visits") == [[0], [0]]
    assert rp.get_record(every, "iteration") == [2, 4]
    with pytest.raises(KeyError):
        rp.get_record(every, "cost")


def test_record_change_and_iterate(problem):
    """Test that the recorded change is the distance between recorded iterates."""
    state = rp.RecordOptions(make_state(3), ["iterate", "change"])

    rp.solve(problem, state)

    iterates = [float(x) for x in rp.get_record(state, "iterate")]
    assert iterates == pytest.approx([4.0, 3.0, 2.0])
    assert rp.get_record(state, "change") == pytest.approx([1.0, 1.0, 1.0])


def test_records_are_cleared_on_reuse(problem):
    """Test that solving again starts with empty records."""
    state = rp.RecordOptions(make_state(3), ["iteration"])

    rp.solve(problem, state)
    rp.solve(problem, state)

    assert rp.get_record(state) == [1, 2, 3]


def test_record_every(problem):
    """Test that an integer entry records every k-th iteration only."""
    state = rp.RecordOptions(make_state(), ["iteration", 2])

    rp.solve(problem, state)

    assert isinstance(state.record, RecordEvery)
    assert rp.get_record(state) == [2, 4]


def test_record_every_keeps_change_consecutive(problem):
    """Test that skipped iterations still update the change record."""
    state = rp.RecordOptions(make_state(), [RecordEvery(RecordChange(), 2)])

    rp.solve(problem, state)

    assert rp.get_record(state) == pytest.approx([1.0, 1.0])


def test_record_entry_with_name(problem):
    """Test named actions and fields of the state."""
    state = rp.RecordOptions(make_state(2), [("visits", RecordEntry("order")), RecordIteration()])

    rp.solve(problem, state)

    assert isinstance(state.record, RecordGroup)
    assert rp.get_record(state) == {"visits": [[0], [0]], "iteration": [1, 2]}


def test_record_factory_errors():
    """Test invalid configurations."""
    with pytest.raises(ValueError):
        record_factory(["iteration", "iteration"])
    with pytest.raises(ValueError):
        record_factory(["unknown"])
    with pytest.raises(ValueError):
        record_factory([3])


def test_record_factory_single_action():
    """Test that a single action is used as is."""
    action = RecordIterate()
    assert record_factory([action]) is action


def test_get_record_requires_record_decorator():
    """Test that get_record fails for states without records."""
    with pytest.raises(ValueError):
        rp.get_record(make_state())


def test_debug_and_record_together(problem, collect_output):
    """Test that a debug decorator around a record decorator does not interfere."""
    output, print_fn = collect_output
    state = rp.DebugOptions(rp.RecordOptions(make_state(2), ["iteration"]), ["iteration", "\n"], print_fn=print_fn)

    x = rp.solve(problem, state)

    assert jnp.allclose(x, 3.0)
    assert rp.get_record(state) == [1, 2]
    assert "".join(output) == "Initial \n# 1\n# 2\n"
