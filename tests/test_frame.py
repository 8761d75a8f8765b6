import math

import numpy as np
import pytest

from simulation.background import EMPTY, sky_symbol, star_hash, star_tier
from simulation.frame import (NORM_FLOOR, PHASE_STEP, RAMP, advance_phase, brightness_field, compose_frame,
                              compute_norm_scale, frame_rows, quantize)
from simulation.hits import CAPTURED, INNER_VOID, SKY, DiskHit, LensMap
from simulation.radiometry import base_brightness, emissivity
from simulation.raytracing import trace_lens_map
from simulation.scene import SceneConfig


@pytest.fixture(scope='module')
def traced():
    scene = SceneConfig(width=24, height=16)
    lens_map = trace_lens_map(scene, progress=False)
    return scene, lens_map


def test_ramp_catalog():
    assert len(RAMP) == 30
    assert RAMP[0] == ' ' and RAMP[-1] == '@'
    for star in '.+*':
        assert star not in RAMP


def test_norm_scale_normalises_baseline_to_one(traced):
    scene, lens_map = traced
    scale = compute_norm_scale(scene, lens_map)
    assert scale > 0.0
    _, r, _, g, emiss = lens_map.disk_arrays()
    assert r.size > 0
    assert np.max(base_brightness(scene.disk, r, g, emiss)) / scale == pytest.approx(1.0)


def test_norm_scale_floor_without_disk():
    scene = SceneConfig(width=2, height=2)
    lens_map = LensMap(2, 2, [SKY, CAPTURED, INNER_VOID, SKY])
    assert compute_norm_scale(scene, lens_map) == NORM_FLOOR


def test_frame_shape_and_glyphs(traced):
    scene, lens_map = traced
    scale = compute_norm_scale(scene, lens_map)
    frame = compose_frame(scene, lens_map, 0.0, scale)
    assert isinstance(frame, str)
    assert len(frame) == scene.width * scene.height
    assert '\n' not in frame
    assert set(frame) <= set(RAMP) | set('.+*')
    rows = frame_rows(frame, scene.width)
    assert len(rows) == scene.height and all(len(row) == scene.width for row in rows)


def test_frame_is_deterministic(traced):
    scene, lens_map = traced
    scale = compute_norm_scale(scene, lens_map)
    assert compose_frame(scene, lens_map, 1.234, scale) == compose_frame(scene, lens_map, 1.234, scale)


def test_hotspot_phase_changes_disk_pixels(traced):
    scene, lens_map = traced
    scale = compute_norm_scale(scene, lens_map)
    a = brightness_field(scene, lens_map, 0.0, scale)
    b = brightness_field(scene, lens_map, math.pi, scale)
    disk = ~np.isnan(a)
    assert disk.any()
    assert np.all(np.isnan(b) == ~disk)
    assert not np.allclose(a[disk], b[disk])
    assert np.all((a[disk] >= 0.0) & (a[disk] <= 1.0))


def test_non_disk_pixels_render_expected_glyphs():
    scene = SceneConfig(width=4, height=1)
    # (0,0) is in the empty sky tier, so captured / inner-void / sky all print blank there
    lens_map = LensMap(4, 1, [CAPTURED, INNER_VOID, SKY, SKY])
    frame = compose_frame(scene, lens_map, 0.0, 1.0)
    assert frame[0] == EMPTY
    assert frame[1] == EMPTY
    assert frame[2] == sky_symbol(2, 0, 0.0)
    assert frame[3] == sky_symbol(3, 0, 0.0)


def test_disk_glyph_quantisation():
    scene = SceneConfig(width=3, height=1)
    r = 40.0
    emiss = float(emissivity(scene.disk, r))
    bright = DiskHit(r=r, phi=math.pi, g=1.0, emiss=emiss)   # opposite the phase-0 hotspot
    dark = DiskHit(r=r, phi=math.pi, g=0.0, emiss=emiss)
    lens_map = LensMap(3, 1, [bright, dark, CAPTURED])
    scale = compute_norm_scale(scene, lens_map)
    frame = compose_frame(scene, lens_map, 0.0, scale)
    assert frame == '@' + RAMP[0] + EMPTY


def test_quantize_clamps():
    assert list(quantize(np.array([0.0, 0.5, 1.0, 1.5, -0.2]))) == [0, 14, 29, 29, 0]


def test_star_hash_matches_reference_values():
    assert star_hash(0, 0) == 2075908277
    assert star_hash(0, 1) == 2158241704
    assert star_hash(40, 26) == 2503939323
    assert star_hash(79, 51) == 2168936561
    assert star_tier(5, 7) == 18315


def test_sky_tiers():
    # tier values precomputed from the hash
    assert sky_symbol(0, 0, 0.0) == ' '        # r = 55477, empty
    assert sky_symbol(0, 1, 0.0) == '.'        # r = 10152, dense tier
    assert sky_symbol(1, 1, 0.0) == '+'        # r = 15445, twinkle offset 60/1024 turns
    assert sky_symbol(0, 3, 0.0) == '*'        # r = 16622, bright tier, offset 238/1024 turns


def test_dense_tier_is_phase_invariant():
    dense = [(x, y) for x in range(40) for y in range(20) if star_tier(x, y) < 12000]
    assert dense
    for x, y in dense:
        symbols = {sky_symbol(x, y, phase) for phase in np.linspace(0.0, 2 * math.pi, 13)}
        assert symbols == {'.'}


def test_twinkling_tiers_depend_on_phase():
    # '+' tier peaks when 0.6 * phase + offset = pi / 2
    offset = 60 * 2 * math.pi / 1024
    assert sky_symbol(1, 1, (math.pi / 2 - offset) / 0.6) == '*'
    # '*' tier dips when 0.75 * phase + offset = 3 pi / 2
    offset = 238 * 2 * math.pi / 1024
    assert sky_symbol(0, 3, (1.5 * math.pi - offset) / 0.75) == '+'


def test_advance_phase_wraps():
    assert advance_phase(0.0) == pytest.approx(PHASE_STEP)
    assert PHASE_STEP == pytest.approx(2 * math.pi / 180)
    wrapped = advance_phase(2 * math.pi - 0.5 * PHASE_STEP)
    assert wrapped == pytest.approx(0.5 * PHASE_STEP)
    phase = 0.0
    for _ in range(1000):
        phase = advance_phase(phase)
        assert 0.0 <= phase <= 2 * math.pi
