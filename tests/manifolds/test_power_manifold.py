"""Tests for power manifolds M^k."""

import jax
import jax.numpy as jnp
import pytest

import riemannprox as rp


@pytest.fixture
def sphere():
    """Create the 2-sphere."""
    return rp.Sphere()


@pytest.fixture
def sphere_cubed(sphere):
    """Create (S^2)^3."""
    return rp.PowerManifold(sphere, 3)


@pytest.fixture
def plane_squared():
    """Create (R^2)^2."""
    return rp.create_power(rp.Euclidean(2), 2)


def test_power_manifold_initialization(sphere):
    """Test construction and validation of power manifolds."""
    power = rp.PowerManifold(sphere, 4)
    assert power.k == 4
    assert power.base is sphere
    assert power.dimension == 8
    assert repr(power) == "PowerManifold(Sphere(2), 4)"

    with pytest.raises(ValueError):
        rp.PowerManifold(sphere, 0)
    with pytest.raises(TypeError):
        rp.PowerManifold("sphere", 2)
    with pytest.raises(TypeError):
        rp.create_power(sphere, 2.0)


def test_diagonal_and_components(sphere_cubed):
    """Test embedding of base points and splitting into coordinates."""
    p = jnp.array([0.0, 1.0, 0.0])
    x = sphere_cubed.diagonal(p)

    assert x.shape == (3, 3)
    assert len(sphere_cubed.components(x)) == 3
    for component in sphere_cubed.components(x):
        assert jnp.allclose(component, p)
    assert sphere_cubed.validate_point(x)


def test_coordinate_wise_operations(plane_squared):
    """Test that exp, log and inner act coordinate-wise."""
    x = jnp.array([[0.0, 0.0], [1.0, 1.0]])
    y = jnp.array([[1.0, 0.0], [1.0, 3.0]])

    v = plane_squared.log(x, y)
    assert jnp.allclose(v, y - x)
    assert jnp.allclose(plane_squared.exp(x, v), y)
    assert jnp.allclose(plane_squared.inner(x, v, v), 5.0)


def test_distance_composes_component_distances(sphere_cubed):
    """Test d(x, y) = sqrt(sum_i d(x_i, y_i)^2)."""
    north = jnp.array([0.0, 0.0, 1.0])
    east = jnp.array([1.0, 0.0, 0.0])
    x = sphere_cubed.diagonal(north)
    y = jnp.stack([east, north, east])

    assert jnp.allclose(sphere_cubed.dist(x, y), jnp.sqrt(2.0) * jnp.pi / 2, atol=1e-4)


def test_coordinate_mean(plane_squared, sphere_cubed):
    """Test the mean of the coordinates on the base manifold."""
    x = jnp.array([[0.0, 0.0], [2.0, 4.0]])
    assert jnp.allclose(plane_squared.coordinate_mean(x), jnp.array([1.0, 2.0]))

    north = jnp.array([0.0, 0.0, 1.0])
    assert jnp.allclose(sphere_cubed.coordinate_mean(sphere_cubed.diagonal(north)), north, atol=1e-5)


def test_mid_point_uses_reference_per_coordinate(sphere):
    """Test that antipodal coordinates are resolved with their reference."""
    power = rp.PowerManifold(sphere, 2)
    north = jnp.array([0.0, 0.0, 1.0])
    east = jnp.array([1.0, 0.0, 0.0])
    reference = jnp.stack([jnp.array([0.0, 1.0, 0.0]), east])

    mid = power.mid_point(power.diagonal(north), jnp.stack([-north, east]), reference)

    assert jnp.allclose(mid[0], jnp.array([0.0, 1.0, 0.0]), atol=1e-5)
    assert jnp.allclose(mid[1], sphere.mid_point(north, east), atol=1e-5)


def test_random_point(sphere_cubed):
    """Test random points and the unsupported batched sampling."""
    x = sphere_cubed.random_point(jax.random.key(1))
    assert sphere_cubed.validate_point(x)
    assert not sphere_cubed.validate_point(x[:2])

    with pytest.raises(NotImplementedError):
        sphere_cubed.random_point(jax.random.key(1), 5)
