"""Tests for the Riemannian problem base class."""

import jax.numpy as jnp
import pytest

import riemannprox as rp


@pytest.fixture
def sphere():
    """Create a sphere manifold instance for testing."""
    return rp.Sphere()


@pytest.fixture
def point_on_sphere():
    """A fixed point on the sphere."""
    return jnp.array([0.6, 0.0, 0.8])


def test_riemannian_problem_initialization(sphere):
    """Test initialization of the RiemannianProblem class."""

    def cost_fn(x):
        return jnp.sum(x)

    problem = rp.RiemannianProblem(sphere, cost_fn)
    assert problem.manifold is sphere
    assert problem.cost_fn is cost_fn
    assert problem.grad_fn is None
    assert problem.euclidean_grad_fn is None
    assert repr(problem) == "RiemannianProblem(Sphere(2))"


def test_riemannian_problem_cost(sphere, point_on_sphere):
    """Test the cost method and get_cost."""
    problem = rp.RiemannianProblem(sphere, lambda x: jnp.sum(x))

    assert jnp.allclose(problem.cost(point_on_sphere), 1.4)
    assert jnp.allclose(rp.get_cost(problem, point_on_sphere), 1.4)


def test_grad_with_grad_fn(sphere, point_on_sphere):
    """Test that a given Riemannian gradient is used unchanged."""

    def grad_fn(x):
        return jnp.array([1.0, 2.0, 3.0])

    problem = rp.RiemannianProblem(sphere, lambda x: jnp.sum(x), grad_fn=grad_fn)
    assert jnp.allclose(problem.grad(point_on_sphere), jnp.array([1.0, 2.0, 3.0]))


def test_grad_with_euclidean_grad_fn(sphere, point_on_sphere):
    """Test that a Euclidean gradient is projected onto the tangent space."""
    problem = rp.RiemannianProblem(sphere, lambda x: jnp.sum(x), euclidean_grad_fn=lambda x: jnp.ones_like(x))

    grad = problem.grad(point_on_sphere)

    assert jnp.allclose(jnp.dot(grad, point_on_sphere), 0.0, atol=1e-6)
    assert jnp.allclose(grad, sphere.proj(point_on_sphere, jnp.ones(3)))


def test_grad_with_autodiff(sphere, point_on_sphere):
    """Test that the gradient falls back to automatic differentiation."""
    problem = rp.RiemannianProblem(sphere, lambda x: jnp.sum(x))

    grad = problem.grad(point_on_sphere)

    assert jnp.allclose(grad, sphere.proj(point_on_sphere, jnp.ones(3)), atol=1e-6)
