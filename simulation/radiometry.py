"""
Disk photometrics: redshift, emissivity, ring banding and rotating hotspots.

The brightness of a disk pixel is ``emiss * g**3 * ring * hotspots``; the cube on
g stands in for the frequency shift plus relativistic beaming of bolometric
flux. The banding and hotspot helpers accept scalars or numpy arrays.
"""
import math

import numpy as np

from .utils import lower_index


def redshift_factor(scene, r, th, v):
    """
    g = E_obs / E_em for a photon with velocity v^μ crossing the disk at (r, θ).

    The observer is static at r_obs; the emitter is on a circular Keplerian
    orbit at r (only meaningful for r beyond 3M, which the disk's inner edge
    guarantees).
    """
    mass = scene.black_hole.mass
    p = lower_index(v, r, th, mass_bh=mass)

    ut_obs = 1.0 / math.sqrt(scene.black_hole.metric_factor(scene.r_obs))
    e_obs = -(p[0] * ut_obs)

    denom = math.sqrt(1.0 - 3.0 * mass / r)
    ut = 1.0 / denom
    uphi = math.sqrt(mass / (r * r * r)) / denom
    e_em = -(p[0] * ut + p[3] * uphi)

    g = e_obs / (e_em if e_em > 1e-15 else 1e-15)
    return g if g > 0 else 0.0


def emissivity(disk, r):
    return np.power(r, -disk.emissivity_index)


def ring_multiplier(disk, r):
    """Concentric bright/dark bands across [r_in, r_out]; clamped outside it."""
    r = np.clip(r, disk.r_in, disk.r_out)
    s = (r - disk.r_in) / (disk.r_out - disk.r_in)
    pos = disk.ring_bands * s
    f = pos - np.floor(pos)
    w = disk.ring_edge + 1e-6
    t = 0.5 + 0.5 * np.tanh((disk.ring_fill - f) / w)
    return disk.ring_floor + (disk.ring_peak - disk.ring_floor) * t


def hotspot_multiplier(disk, r, phi, phase):
    """1 + sum of soft circular boosts orbiting clockwise with the phase."""
    x = r * np.cos(phi)
    y = r * np.sin(phi)
    m = 1.0
    for k in range(disk.hotspot_count):
        ang = -phase + 2.0 * math.pi * k / disk.hotspot_count
        cx = disk.hotspot_orbit * math.cos(ang)
        cy = disk.hotspot_orbit * math.sin(ang)
        d = np.sqrt((x - cx) ** 2 + (y - cy) ** 2)
        t = 0.5 + 0.5 * np.tanh((disk.hotspot_radius - d) / (disk.hotspot_edge + 1e-9))
        m = m + disk.hotspot_amplitude * t
    return m


def base_brightness(disk, r, g, emiss):
    """Phase-independent part of the disk brightness."""
    return emiss * np.power(g, 3.0) * ring_multiplier(disk, r)


def disk_brightness(disk, r, phi, g, emiss, phase):
    return base_brightness(disk, r, g, emiss) * hotspot_multiplier(disk, r, phi, phase)
