# raytracing.py
import math
import logging
from concurrent.futures import ProcessPoolExecutor

import numpy as np
from tqdm import tqdm

from .geodesic import plane_value, rk4_step, step_size
from .hits import CAPTURED, INNER_VOID, SKY, DiskHit, LensMap
from .radiometry import emissivity, redshift_factor
from .utils import get_initial_conditions, to_cartesian, wrap_angle

MAX_STEPS = 5000
CAPTURE_MARGIN = 1.001   # × horizon radius
ESCAPE_FACTOR = 1.2      # × observer radius
MIN_ESCAPE_STEPS = 10


def classify_closest_approach(scene, r_min):
    """Classify a ray that left the scene by the smallest radius it reached."""
    if r_min < scene.black_hole.photon_sphere:
        return CAPTURED  # inside the photon ring, same look as the hole
    if r_min < scene.disk.r_in:
        return INNER_VOID
    return SKY


def _equatorial_crossing(scene, x_prev, v_prev, x, v):
    """
    Return a DiskHit if the segment prev -> curr crosses θ = π/2 inside the annulus.

    Used for the untilted disk: the crossing fraction is interpolated in θ and
    the hit azimuth is the interpolated Boyer-Lindquist φ.
    """
    half_pi = math.pi / 2.0
    if (x_prev[2] - half_pi) * (x[2] - half_pi) > 0.0:
        return None
    f = (half_pi - x_prev[2]) / (x[2] - x_prev[2] + 1e-15)
    r_hit = x_prev[1] + f * (x[1] - x_prev[1])
    if not (scene.disk.r_in <= r_hit <= scene.disk.r_out):
        return None
    phi_hit = x_prev[3] + f * (x[3] - x_prev[3])
    v_hit = v_prev + f * (v - v_prev)
    g = redshift_factor(scene, r_hit, half_pi, v_hit)
    return DiskHit(r=float(r_hit), phi=wrap_angle(phi_hit), g=float(g),
                   emiss=float(emissivity(scene.disk, r_hit)))


def _disk_crossing(scene, x_prev, v_prev, s_prev, x, v, s_curr):
    """
    Return a DiskHit if the segment prev -> curr crosses the tilted disk annulus.

    The crossing point and its 4-velocity are linearly interpolated at the
    fraction where the plane test changes sign.
    """
    if s_prev * s_curr > 0.0:
        return None
    f = -s_prev / ((s_curr - s_prev) + 1e-15)
    f = min(max(f, 0.0), 1.0)
    x_hit = x_prev + f * (x - x_prev)
    r_hit = x_hit[1]
    if not (scene.disk.r_in <= r_hit <= scene.disk.r_out):
        return None
    v_hit = v_prev + f * (v - v_prev)

    g = redshift_factor(scene, r_hit, x_hit[2], v_hit)

    # azimuth inside the disk plane, measured from the reference axis u
    cart = to_cartesian(x_hit)
    phi_plane = math.atan2(float(np.dot(cart, scene.disk_v_axis)),
                           float(np.dot(cart, scene.disk_u_axis)))
    return DiskHit(r=float(r_hit), phi=wrap_angle(phi_plane), g=float(g),
                   emiss=float(emissivity(scene.disk, r_hit)))


def _find_crossing(scene, x_prev, v_prev, x, v):
    if scene.equatorial_disk:
        return _equatorial_crossing(scene, x_prev, v_prev, x, v)
    nx, ny, nz = scene.disk_normal
    return _disk_crossing(scene, x_prev, v_prev, plane_value(x_prev, nx, ny, nz),
                          x, v, plane_value(x, nx, ny, nz))


def trace_pixel(scene, px, py):
    """
    Trace the ray through pixel (px, py) and classify where it ends up.

    Every ray terminates in exactly one of DiskHit / SKY / CAPTURED /
    INNER_VOID; running out of steps falls back to the closest-approach rule.
    """
    mass = scene.black_hole.mass
    capture_radius = CAPTURE_MARGIN * scene.black_hole.rs
    escape_radius = ESCAPE_FACTOR * scene.r_obs

    x, v = get_initial_conditions(scene, px, py)
    r_min = x[1]
    for step in range(MAX_STEPS):
        x_prev, v_prev = x, v
        x, v = rk4_step(x, v, step_size(x[1], mass), mass)
        r = x[1]
        if r < r_min:
            r_min = r
        if r <= capture_radius:
            return CAPTURED
        if r > escape_radius and step > MIN_ESCAPE_STEPS:
            return classify_closest_approach(scene, r_min)
        hit = _find_crossing(scene, x_prev, v_prev, x, v)
        if hit is not None:
            return hit
    logging.debug("pixel (%d, %d) exhausted %d steps, r_min=%.3f", px, py, MAX_STEPS, r_min)
    return classify_closest_approach(scene, r_min)


def trace_ray_path(scene, px, py, max_points=None):
    """
    Integrate the ray through (px, py) and return its Cartesian trajectory.

    Uses the same stepping and termination rules as ``trace_pixel``; the
    returned array has shape (n, 3) and starts at the observer.
    """
    mass = scene.black_hole.mass
    x, v = get_initial_conditions(scene, px, py)
    points = [to_cartesian(x)]
    for step in range(MAX_STEPS):
        x_prev, v_prev = x, v
        x, v = rk4_step(x, v, step_size(x[1], mass), mass)
        points.append(to_cartesian(x))
        if x[1] <= CAPTURE_MARGIN * scene.black_hole.rs:
            break
        if x[1] > ESCAPE_FACTOR * scene.r_obs and step > MIN_ESCAPE_STEPS:
            break
        if _find_crossing(scene, x_prev, v_prev, x, v) is not None:
            break
    traj = np.array(points, dtype=np.float64)
    if max_points is not None and len(traj) > max_points:
        keep_idx = np.linspace(0, len(traj) - 1, num=max_points, dtype=np.int64)
        traj = traj[keep_idx]
    return traj


def _trace_row(args):
    scene, py = args
    return [trace_pixel(scene, px, py) for px in range(scene.width)]


def trace_lens_map(scene, workers=1, progress=True):
    """
    Build the lens map: one classified Hit per pixel, row-major.

    workers > 1 distributes rows over a ProcessPoolExecutor; the result is
    identical to the serial pass.
    """
    logging.info("Tracing %dx%d lens map (r_obs=%.1f, inc=%.1f deg, tilt=%.1f deg)...",
                 scene.width, scene.height, scene.r_obs, scene.inclination_deg, scene.disk_tilt_deg)
    jobs = [(scene, py) for py in range(scene.height)]
    if workers is not None and workers > 1:
        with ProcessPoolExecutor(max_workers=workers) as executor:
            rows = list(tqdm(executor.map(_trace_row, jobs), total=scene.height,
                             desc="Tracing lens map", unit="row", disable=not progress))
    else:
        rows = [_trace_row(job) for job in tqdm(jobs, desc="Tracing lens map", unit="row", disable=not progress)]
    lens_map = LensMap(scene.width, scene.height, [hit for row in rows for hit in row])
    logging.info("Lens map complete: %s", ", ".join(f"{k.value}={n}" for k, n in lens_map.counts().items()))
    return lens_map
