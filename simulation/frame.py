"""Frame compositor: lens map + phase -> one printable glyph per pixel."""
import math

import numpy as np

from .background import EMPTY, sky_symbol
from .hits import HitKind
from .radiometry import base_brightness, disk_brightness

# dark -> bright; star glyphs ('.', '+', '*') are deliberately absent
RAMP = " `,-:'_;~/\\^\"<>!=()?{}|[]#%$&@"

NORM_FLOOR = 1e-12
PHASE_STEP = 2.0 * math.pi / 180.0  # 180 frames per hotspot revolution


def compute_norm_scale(scene, lens_map):
    """Largest phase-independent disk brightness (hotspots excluded), floored."""
    _, r, _, g, emiss = lens_map.disk_arrays()
    if r.size == 0:
        return NORM_FLOOR
    return max(float(np.max(base_brightness(scene.disk, r, g, emiss))), NORM_FLOOR)


def brightness_field(scene, lens_map, phase, norm_scale):
    """
    (height, width) array of normalised, clamped, gamma-corrected disk values.

    Off-disk pixels are NaN.
    """
    field = np.full(scene.width * scene.height, np.nan)
    idx, r, phi, g, emiss = lens_map.disk_arrays()
    if idx.size:
        if norm_scale <= 0.0:
            norm_scale = 1.0
        val = disk_brightness(scene.disk, r, phi, g, emiss, phase) / norm_scale
        field[idx] = np.power(np.clip(val, 0.0, 1.0), scene.gamma)
    return field.reshape(scene.height, scene.width)


def quantize(q):
    """Map gamma-corrected values in [0, 1] to RAMP indices."""
    levels = len(RAMP)
    idx = (np.asarray(q) * (levels - 1)).astype(np.int64)
    return np.clip(idx, 0, levels - 1)


def compose_frame(scene, lens_map, phase, norm_scale):
    """
    Return the frame as a flat row-major string of width*height glyphs.

    Callers add row separators, frame delimiters and cursor control.
    """
    field = brightness_field(scene, lens_map, phase, norm_scale).ravel()
    ramp_idx = quantize(np.nan_to_num(field, nan=0.0))
    chars = []
    for i, hit in enumerate(lens_map):
        kind = hit.kind
        if kind is HitKind.DISK:
            chars.append(RAMP[ramp_idx[i]])
        elif kind is HitKind.SKY:
            y, x = divmod(i, scene.width)
            chars.append(sky_symbol(x, y, phase))
        else:
            chars.append(EMPTY)
    return ''.join(chars)


def frame_rows(frame, width):
    return [frame[i:i + width] for i in range(0, len(frame), width)]


def advance_phase(phase):
    phase += PHASE_STEP
    if phase > 2.0 * math.pi:
        phase -= 2.0 * math.pi
    return phase
