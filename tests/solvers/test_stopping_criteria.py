"""Tests for stopping criteria and their composition."""

import time

import jax.numpy as jnp
import pytest

import riemannprox as rp
from riemannprox.solvers import StoppingCriterion, get_active_stopping_criteria


@pytest.fixture
def plane():
    """Create the Euclidean plane R^2."""
    return rp.Euclidean(2)


@pytest.fixture
def problem(plane):
    """A quadratic cost on the plane, its gradient is the point itself."""
    return rp.RiemannianProblem(plane, lambda x: 0.5 * jnp.sum(x**2))


def make_state(x, criterion=None):
    """Create a bare solver state."""
    return rp.OptState(jnp.asarray(x), criterion)


def test_stop_after_iteration_fires_exactly_at_cap(problem):
    """Test that the cap fires at iteration k and never before."""
    criterion = rp.StopAfterIteration(3)
    state = make_state([1.0, 1.0])

    assert not criterion(problem, state, 0)
    assert not criterion(problem, state, 1)
    assert not criterion(problem, state, 2)
    assert criterion.reason == ""
    assert criterion(problem, state, 3)
    assert criterion.reason == "The algorithm reached its maximal number of iterations (3).\n"


def test_stop_after_iteration_resets_at_zero(problem):
    """Test that iteration 0 clears the reason for reuse."""
    criterion = rp.StopAfterIteration(1)
    state = make_state([1.0, 1.0])
    assert criterion(problem, state, 1)

    assert not criterion(problem, state, 0)
    assert criterion.reason == ""


@pytest.mark.parametrize(
    "factory",
    [
        lambda: rp.StopAfterIteration(0),
        lambda: rp.StopWhenChangeLess(0.0),
        lambda: rp.StopWhenGradientNormLess(-1.0),
        lambda: rp.StopAfter(0.0),
    ],
)
def test_invalid_parameters_raise(factory):
    """Test that non-positive parameters are rejected."""
    with pytest.raises(ValueError):
        factory()


def test_stop_when_change_less(problem):
    """Test that the change between consecutive iterates is measured."""
    criterion = rp.StopWhenChangeLess(1e-3)
    state = make_state([0.0, 0.0])

    assert not criterion(problem, state, 0)
    state.set_iterate(jnp.array([1.0, 0.0]))
    assert not criterion(problem, state, 1)
    state.set_iterate(jnp.array([1.0, 1e-4]))
    assert criterion(problem, state, 2)
    assert "less than 0.001" in criterion.reason


def test_stop_when_change_less_remembers_initial_point(problem):
    """Test that the first comparison is with the iterate at the reset."""
    criterion = rp.StopWhenChangeLess(1e-3)
    state = make_state([0.0, 0.0])

    criterion(problem, state, 0)
    assert criterion(problem, state, 1)


def test_stop_when_gradient_norm_less(problem):
    """Test the gradient norm criterion with the problem's gradient."""
    criterion = rp.StopWhenGradientNormLess(1e-3)
    state = make_state([1.0, 0.0])

    assert not criterion(problem, state, 0)
    assert not criterion(problem, state, 1)
    state.set_iterate(jnp.array([1e-4, 0.0]))
    assert criterion(problem, state, 2)
    assert "gradient norm" in criterion.reason


def test_stop_when_gradient_norm_less_uses_state_gradient(problem):
    """Test that a gradient stored in the state takes precedence."""
    criterion = rp.StopWhenGradientNormLess(1e-3)
    state = make_state([1.0, 0.0])
    state.gradient = jnp.zeros(2)

    assert criterion(problem, state, 1)


def test_stop_when_cost_less(problem):
    """Test the cost threshold."""
    criterion = rp.StopWhenCostLess(0.1)
    state = make_state([1.0, 0.0])

    assert not criterion(problem, state, 1)
    state.set_iterate(jnp.array([0.1, 0.0]))
    assert criterion(problem, state, 2)


def test_stop_after_time_budget(problem):
    """Test the wall clock criterion."""
    criterion = rp.StopAfter(0.01)
    state = make_state([1.0, 0.0])

    assert not criterion(problem, state, 0)
    time.sleep(0.02)
    assert criterion(problem, state, 1)
    assert not criterion(problem, state, 0)
    assert not criterion(problem, state, 1)


def test_operators_build_sets():
    """Test that & and | compose criteria."""
    a = rp.StopAfterIteration(2)
    b = rp.StopWhenChangeLess(1e-6)

    assert isinstance(a & b, rp.StopWhenAll)
    assert isinstance(a | b, rp.StopWhenAny)
    assert (a | b).criteria == (a, b)
    assert repr(a | b) == "StopWhenAny(StopAfterIteration(2), StopWhenChangeLess(1e-06))"


def test_stop_when_all_fires_only_when_all_fired(problem):
    """Test that an AND composition waits for every sub-criterion."""
    criterion = rp.StopAfterIteration(2) & rp.StopAfterIteration(4)
    state = make_state([1.0, 0.0])

    assert not criterion(problem, state, 0)
    assert [criterion(problem, state, i) for i in range(1, 5)] == [False, False, False, True]
    assert "(2)" in criterion.reason
    assert "(4)" in criterion.reason


def test_stop_when_any_reports_firing_criterion(problem):
    """Test that an OR composition fires with the first firing sub-criterion."""
    change = rp.StopWhenChangeLess(1e-3)
    cap = rp.StopAfterIteration(10)
    criterion = cap | change
    state = make_state([1.0, 0.0])

    criterion(problem, state, 0)
    assert criterion(problem, state, 1)
    assert criterion.reason == change.reason
    assert get_active_stopping_criteria(criterion) == [change]


def test_sets_evaluate_every_sub_criterion(problem):
    """Test that no sub-criterion is skipped, so their bookkeeping stays current."""

    class Counting(StoppingCriterion):
        def __init__(self):
            super().__init__()
            self.calls = 0

        def __call__(self, problem, state, iteration):
            self.calls += 1
            return False

    counting = Counting()
    criterion = rp.StopAfterIteration(1) | counting
    state = make_state([1.0, 0.0])

    criterion(problem, state, 0)
    criterion(problem, state, 1)

    assert counting.calls == 2


def test_get_reason_unwraps_decorators(problem):
    """Test that the reason is found through decorators."""
    criterion = rp.StopAfterIteration(1)
    state = rp.DebugOptions(make_state([1.0, 0.0], criterion), [], print_fn=lambda text: None)
    criterion(problem, state, 1)

    assert rp.get_reason(state) == criterion.reason
