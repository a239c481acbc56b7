"""Tests for the debug decorator and its actions."""

import jax.numpy as jnp
import pytest

import riemannprox as rp
from riemannprox.solvers import (
    DebugChange,
    DebugDivider,
    DebugEntry,
    DebugEvery,
    DebugGroup,
    DebugIteration,
    debug_factory,
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


def make_state(max_iterations=3):
    """Cyclic proximal point state starting at 5 with constant step 1."""
    return rp.CyclicProximalPointState(
        jnp.array(5.0), stopping_criterion=rp.StopAfterIteration(max_iterations), lambda_fn=1.0
    )


def test_decorator_forwards_attributes():
    """Test that reads and writes go to the wrapped state."""
    state = make_state()
    decorated = rp.DebugOptions(state, ["iteration"])

    assert decorated.get_iterate() is state.x
    assert decorated.lambda_fn is state.lambda_fn
    decorated.x = jnp.array(2.0)
    assert jnp.allclose(state.x, 2.0)
    assert rp.is_options_decorator(decorated)
    assert rp.get_options(decorated) is state
    assert not rp.is_options_decorator(state)


def test_debug_output_per_iteration(problem, collect_output):
    """Test the printed lines of a short run."""
    output, print_fn = collect_output
    state = rp.DebugOptions(make_state(), ["iteration", " | ", "iterate", "\n", "stop"], print_fn=print_fn)

    rp.solve(problem, state)

    text = "".join(output)
    lines = text.splitlines()
    assert lines[0] == "Initial  | x: 5.0"
    assert lines[1] == "# 1 | x: 4.0"
    assert lines[3] == "# 3 | x: 2.0"
    assert text.endswith("The algorithm reached its maximal number of iterations (3).\n")


def test_debug_every(problem, collect_output):
    """Test that an integer entry restricts output to every k-th iteration."""
    output, print_fn = collect_output
    state = rp.DebugOptions(make_state(4), ["iteration", "\n", 2], print_fn=print_fn)

    rp.solve(problem, state)

    assert "".join(output).splitlines() == ["Initial ", "# 2", "# 4"]


def test_debug_change_and_cost(problem, collect_output):
    """Test the change and cost actions."""
    output, print_fn = collect_output
    state = rp.DebugOptions(make_state(2), ["change", " ", "cost", "\n"], print_fn=print_fn)

    rp.solve(problem, state)

    lines = "".join(output).splitlines()
    assert lines[0] == " F(x): 5.0"
    assert lines[1] == "Δx: 1.0 F(x): 4.0"


def test_debug_proximal_parameter(problem, collect_output):
    """Test that λ(i) is printed for positive iterations."""
    output, print_fn = collect_output
    state = rp.DebugOptions(make_state(2), ["lambda", "\n"], print_fn=print_fn)

    rp.solve(problem, state)

    assert "".join(output).splitlines() == ["", "λ: 1.0", "λ: 1.0"]


def test_debug_entry_prints_state_field(problem, collect_output):
    """Test printing an arbitrary field of the state."""
    output, print_fn = collect_output
    entry = DebugEntry("order", print_fn=print_fn)
    state = rp.DebugOptions(make_state(1), entry)

    rp.solve(problem, state)

    assert output == ["order: None", "order: [0]"]


def test_debug_every_forwards_skipped_iterations(problem, collect_output):
    """Test that DebugChange measures consecutive iterates under DebugEvery."""
    output, print_fn = collect_output
    action = DebugEvery(DebugGroup([DebugChange(print_fn=print_fn), DebugDivider("\n", print_fn=print_fn)]), 2)
    state = rp.DebugOptions(make_state(4), action)

    rp.solve(problem, state)

    assert [line for line in "".join(output).splitlines() if line] == ["Δx: 1.0", "Δx: 1.0"]


def test_debug_factory_dictionary(collect_output):
    """Test the structure built by the factory."""
    _, print_fn = collect_output
    dictionary = debug_factory(["iteration", " | ", "stop", 5], print_fn)

    assert set(dictionary) == {"all", "stop"}
    assert isinstance(dictionary["all"], DebugEvery)
    assert dictionary["all"].every == 5

    dictionary = debug_factory([DebugIteration(print_fn=print_fn)], print_fn)
    assert isinstance(dictionary["all"], DebugGroup)
    assert "stop" not in dictionary


def test_debug_factory_rejects_invalid_entries():
    """Test that only strings, integers and actions are accepted."""
    with pytest.raises(TypeError):
        debug_factory([1.5])
    with pytest.raises(TypeError):
        debug_factory([True])


def test_debug_default_sink_prints(problem, capsys):
    """Test that the default sink writes to standard output."""
    state = rp.DebugOptions(make_state(1), ["iteration", "\n"])

    rp.solve(problem, state)

    assert capsys.readouterr().out == "Initial \n# 1\n"
