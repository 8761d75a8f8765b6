# geodesic.py
import numpy as np
from numba import njit
import math
import logging
logging.getLogger('numba').setLevel(logging.ERROR)

# ----------------------------------------------------------------------------
# Schwarzschild null-geodesic kernels (CPU, numba)
# ----------------------------------------------------------------------------
# State is a pair of float64 arrays of length 4:
#   x = (t, r, θ, φ)            position
#   v = (dt, dr, dθ, dφ) / dλ   velocity along the affine parameter λ
# The integrator is a fixed-step classic RK4 with no error control. Step size
# is shrunk near the hole by ``step_size``; those thresholds are part of the
# rendered output and must not change.
# ----------------------------------------------------------------------------

BASE_STEP = 0.5
THETA_EPS = 1e-6


@njit(cache=False)
def acceleration(x, v, mass):
    """a^μ = -Γ^μ_αβ v^α v^β with the closed-form Schwarzschild Christoffels."""
    r = x[1]
    th = x[2]
    s = math.sin(th)
    c = math.cos(th)
    f = 1.0 - 2.0 * mass / r

    g_t_tr = mass / (r * (r - 2.0 * mass))
    g_r_tt = f * mass / (r * r)
    g_r_rr = -mass / (r * (r - 2.0 * mass))
    g_r_thth = -(r - 2.0 * mass)
    g_r_phph = -(r - 2.0 * mass) * s * s
    g_th_rth = 1.0 / r
    g_th_phph = -s * c
    g_ph_rph = 1.0 / r
    g_ph_thph = c / (s + 1e-12)  # singular on the axis

    vt = v[0]
    vr = v[1]
    vth = v[2]
    vph = v[3]
    a = np.empty(4)
    a[0] = -2.0 * g_t_tr * vt * vr
    a[1] = -(g_r_tt * vt * vt + g_r_rr * vr * vr + g_r_thth * vth * vth
             + g_r_phph * vph * vph)
    a[2] = -(2.0 * g_th_rth * vr * vth + g_th_phph * vph * vph)
    a[3] = -(2.0 * g_ph_rph * vr * vph + 2.0 * g_ph_thph * vth * vph)
    return a


@njit(cache=False)
def rk4_step(x, v, h, mass):
    """Advance (x, v) by one RK4 step of size h; returns new arrays."""
    a = acceleration(x, v, mass)
    k1x = h * v
    k1v = h * a
    xt = x + 0.5 * k1x
    vt = v + 0.5 * k1v

    a = acceleration(xt, vt, mass)
    k2x = h * vt
    k2v = h * a
    xt = x + 0.5 * k2x
    vt = v + 0.5 * k2v

    a = acceleration(xt, vt, mass)
    k3x = h * vt
    k3v = h * a
    xt = x + k3x
    vt = v + k3v

    a = acceleration(xt, vt, mass)
    k4x = h * vt
    k4v = h * a

    x_new = x + (k1x + 2.0 * k2x + 2.0 * k3x + k4x) / 6.0
    v_new = v + (k1v + 2.0 * k2v + 2.0 * k3v + k4v) / 6.0
    if x_new[2] < THETA_EPS:
        x_new[2] = THETA_EPS
    if x_new[2] > math.pi - THETA_EPS:
        x_new[2] = math.pi - THETA_EPS
    return x_new, v_new


@njit(cache=False)
def step_size(r, mass):
    h = BASE_STEP
    if r < 10.0 * mass:
        h = 0.25 * BASE_STEP
    if r < 6.0 * mass:
        h = 0.125 * BASE_STEP
    return h


@njit(cache=False)
def plane_value(x, nx, ny, nz):
    """Signed n·X of the Cartesian image of x; changes sign across the disk plane."""
    r = x[1]
    st = math.sin(x[2])
    return (nx * r * st * math.cos(x[3])
            + ny * r * st * math.sin(x[3])
            + nz * r * math.cos(x[2]))
