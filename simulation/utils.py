#utils.py
import math

import numpy as np
from einsteinpy.coordinates.utils import spherical_to_cartesian_fast


# -----------------------------------------------------------------------------
# Helper: static Schwarzschild metric in (t, r, θ, φ)
# -----------------------------------------------------------------------------
def schwarzschild_metric(r, th, *, mass_bh=1.0):
    """Return the covariant metric g_{μν} at (r, θ) as a 4x4 array."""
    f = 1.0 - 2.0 * mass_bh / r
    s = math.sin(th)
    g = np.zeros((4, 4))
    g[0, 0] = -f
    g[1, 1] = 1.0 / f
    g[2, 2] = r * r
    g[3, 3] = r * r * s * s
    return g


def lower_index(v, r, th, *, mass_bh=1.0):
    """p_μ = g_{μν} v^ν for the diagonal Schwarzschild metric."""
    return schwarzschild_metric(r, th, mass_bh=mass_bh) @ np.asarray(v, dtype=np.float64)


def null_norm(x, v, *, mass_bh=1.0):
    """g_{μν} v^μ v^ν at position x; zero for a photon."""
    v = np.asarray(v, dtype=np.float64)
    return float(v @ lower_index(v, x[1], x[2], mass_bh=mass_bh))


def to_cartesian(x):
    """(t, r, θ, φ) -> (x, y, z) using EinsteinPy's coordinate helper."""
    _, cx, cy, cz = spherical_to_cartesian_fast(0.0, x[1], x[2], x[3])
    return np.array([cx, cy, cz])


def wrap_angle(phi):
    """Wrap an angle into [0, 2π)."""
    return math.fmod(phi + 1000.0 * 2.0 * math.pi, 2.0 * math.pi)


# -----------------------------------------------------------------------------
# Camera: pixel -> initial null ray at the static observer
# -----------------------------------------------------------------------------
def screen_angles(scene, px, py):
    """
    Return the (yaw, pitch) camera angles of the centre of pixel (px, py).

    The pixel centre is mapped to [-0.5, 0.5]^2, rotated by the camera roll and
    scaled by the horizontal / vertical field of view.
    """
    u = (px + 0.5) / scene.width - 0.5
    v = (py + 0.5) / scene.height - 0.5
    if scene.roll != 0.0:
        c, s = math.cos(scene.roll), math.sin(scene.roll)
        u, v = u * c - v * s, u * s + v * c
    return u * scene.fov_x, v * scene.fov_y


def get_initial_conditions(scene, px, py):
    """
    Returns q0, v0 for the ray through pixel (px, py).

    Parameters
    ----------
    scene : SceneConfig
        Observer pose and field of view.
    px, py : int
        Pixel column / row; row 0 is the top of the frame.

    Returns
    -------
    q0 : ndarray, shape (4,)
        Initial position ``(t, r, θ, φ)``.
    v0 : ndarray, shape (4,)
        Initial velocity ``dx^μ/dλ``. The local direction has a fixed inward
        radial component of -1 and angular components ``tan(pitch)`` and
        ``tan(yaw)``; this is a small-angle camera, not an exact spherical one.
    """
    yaw, pitch = screen_angles(scene, px, py)
    n_r, n_th, n_ph = -1.0, math.tan(pitch), math.tan(yaw)
    norm = math.sqrt(n_r * n_r + n_th * n_th + n_ph * n_ph)
    n_r /= norm
    n_th /= norm
    n_ph /= norm

    r_obs = scene.r_obs
    f = scene.black_hole.metric_factor(r_obs)
    s = math.sin(scene.theta_obs)

    q0 = np.array([0.0, r_obs, scene.theta_obs, scene.phi_obs])
    v0 = np.array([
        1.0 / math.sqrt(f),
        n_r * math.sqrt(f),
        n_th / r_obs,
        n_ph / (r_obs * (s if s > 1e-12 else 1e-12)),
    ])
    return q0, v0
