"""Ray data structure and vector utilities for Whitted-style ray tracing.

This module provides the fundamental Ray dataclass and the Vector3 algebra
used by every other part of the tracer: dot products, normalization,
mirror reflection and Snell's-law refraction. The device functions are
Taichi functions; a few host-side helpers validate values before they are
handed to a kernel.

Example:
    >>> import taichi as ti
    >>> ti.init(arch=ti.cpu)
    >>> origin = ti.math.vec3(0.0, 0.0, 0.0)
    >>> direction = ti.math.vec3(0.0, 0.0, -1.0)
    >>> ray = Ray(origin=origin, direction=direction)
    >>> point = ray_at(ray, 5.0)  # Point 5 units along the ray
"""

import math
from collections.abc import Sequence

import taichi as ti
import taichi.math as tm

# Type alias for 3D vectors using Taichi's math module
vec3 = tm.vec3

# Minimum ray parameter accepted as a hit; keeps secondary rays from
# re-hitting the surface they start on.
RAY_EPSILON = 1e-3

# Returned by refract() on total internal reflection. The shader still
# traces this direction.
TOTAL_INTERNAL_REFLECTION = (1.0, 0.0, 0.0)


class VectorIndexError(IndexError):
    """Raised when a vector component index is outside {0, 1, 2}."""


@ti.dataclass
class Ray:
    """A ray with an origin point and direction vector.

    Attributes:
        origin: The starting point of the ray (vec3).
        direction: The direction vector of the ray (vec3). Expected to be
            normalized wherever intersection math relies on it, but this is
            not enforced.
    """

    origin: vec3
    direction: vec3


@ti.func
def ray_at(ray: Ray, t: ti.f32) -> vec3:
    """Compute the point along the ray at parameter t.

    Args:
        ray: The ray to evaluate.
        t: The parameter value. Positive values are in front of the origin.

    Returns:
        The point ray.origin + t * ray.direction.
    """
    return ray.origin + t * ray.direction


@ti.func
def make_ray(origin: vec3, direction: vec3) -> Ray:
    """Create a ray from origin and direction."""
    return Ray(origin=origin, direction=direction)


# =============================================================================
# Vector Utility Functions
# =============================================================================


@ti.func
def length(v: vec3) -> ti.f32:
    """Compute the Euclidean norm of a vector."""
    return tm.length(v)


@ti.func
def length_squared(v: vec3) -> ti.f32:
    """Compute the squared norm of a vector."""
    return tm.dot(v, v)


@ti.func
def normalize(v: vec3) -> vec3:
    """Normalize a vector to unit length.

    Zero-length input is not special-cased: the result is non-finite. Host
    code validates directions with require_nonzero() before they get here.
    """
    return v / tm.length(v)


@ti.func
def dot(a: vec3, b: vec3) -> ti.f32:
    """Compute the dot product a . b."""
    return tm.dot(a, b)


@ti.func
def reflect(incident: vec3, normal: vec3) -> vec3:
    """Reflect an incident vector about a normal.

    Computes incident - normal * 2 * (incident . normal). Reflecting the
    result about the same normal restores the incident vector.

    Args:
        incident: The incoming direction vector (pointing toward the surface).
        normal: The surface normal (should be normalized).

    Returns:
        The reflected direction vector.
    """
    return incident - normal * 2.0 * tm.dot(incident, normal)


@ti.func
def refract(incident: vec3, normal: vec3, eta_t: ti.f32, eta_i: ti.f32) -> vec3:
    """Refract an incident vector through a surface using Snell's law.

    eta_t is the index of the medium behind the surface and eta_i the index
    on the incident side. When the ray arrives from behind the normal
    (incident . normal > 0) the normal is flipped and the two indices are
    swapped, so the same call handles rays entering and leaving a solid.

    On total internal reflection the fixed direction (1, 0, 0) is returned
    instead of a physical ray. Callers trace it like any other direction.

    Args:
        incident: The incoming direction vector (should be normalized).
        normal: The outward surface normal (should be normalized).
        eta_t: Refractive index of the transmitting medium.
        eta_i: Refractive index of the incident medium.

    Returns:
        The refracted direction vector (not normalized).
    """
    cos_i = -tm.clamp(tm.dot(incident, normal), -1.0, 1.0)
    n = normal
    n_i = eta_i
    n_t = eta_t
    if cos_i < 0.0:
        # Ray is inside the object: flip the normal and swap the media
        cos_i = -cos_i
        n = -normal
        n_i = eta_t
        n_t = eta_i

    eta = n_i / n_t
    k = 1.0 - eta * eta * (1.0 - cos_i * cos_i)

    result = vec3(1.0, 0.0, 0.0)
    if k >= 0.0:
        result = incident * eta + n * (eta * cos_i - ti.sqrt(k))
    return result


# =============================================================================
# Host-side Helpers
# =============================================================================


def component(v: Sequence[float], index: int) -> float:
    """Return component 0, 1 or 2 of a vector.

    Args:
        v: A vec3 or any 3-element sequence.
        index: Component index (0 = x, 1 = y, 2 = z).

    Returns:
        The requested component as a float.

    Raises:
        VectorIndexError: If index is not 0, 1 or 2. Negative indices are
            rejected as well.
    """
    if isinstance(index, bool) or index not in (0, 1, 2):
        raise VectorIndexError(f"Index out of vector range: {index}")
    return float(v[index])


def to_vec3(values: Sequence[float]) -> vec3:
    """Convert a 3-element sequence into a Taichi vec3.

    Raises:
        ValueError: If the sequence does not have exactly 3 elements.
    """
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {len(values)}")
    return vec3(float(values[0]), float(values[1]), float(values[2]))


def require_nonzero(values: Sequence[float]) -> tuple[float, float, float]:
    """Validate a direction vector before it is normalized on the device.

    Args:
        values: A 3-element direction.

    Returns:
        The direction as a tuple of floats.

    Raises:
        ValueError: If the direction has the wrong arity, contains non-finite
            components, or has zero length.
    """
    if len(values) != 3:
        raise ValueError(f"Expected 3 components, got {len(values)}")
    x, y, z = (float(values[0]), float(values[1]), float(values[2]))
    if not all(math.isfinite(c) for c in (x, y, z)):
        raise ValueError(f"Direction has non-finite components: {(x, y, z)}")
    if x * x + y * y + z * z == 0.0:
        raise ValueError("Cannot use a zero-length direction")
    return x, y, z
