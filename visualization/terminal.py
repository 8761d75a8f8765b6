import logging
import os
import sys
import time

from simulation.frame import advance_phase, compose_frame, frame_rows

CLEAR_SCREEN = "\x1b[2J"
CURSOR_HOME = "\x1b[H"
FRAME_SEPARATOR = "\f"


def write_frame(out, frame, width):
    """Write one frame, each row terminated by a newline."""
    for row in frame_rows(frame, width):
        out.write(row)
        out.write("\n")


def dump_frames(path, scene, lens_map, norm_scale, n_frames, phase=0.0):
    """
    Write n_frames consecutive frames to path.

    Frames are separated by a form feed; no separator follows the last one.
    Returns the phase after the last frame.
    """
    if n_frames < 1:
        raise ValueError(f"need at least one frame to dump, got {n_frames}")
    if os.path.dirname(path):
        os.makedirs(os.path.dirname(path), exist_ok=True)
    with open(path, "w", encoding="ascii", newline="\n") as f:
        for frame_idx in range(n_frames):
            frame = compose_frame(scene, lens_map, phase, norm_scale)
            write_frame(f, frame, scene.width)
            if frame_idx != n_frames - 1:
                f.write(FRAME_SEPARATOR)
            phase = advance_phase(phase)
    logging.info("dumped %d frames to %s (size %dx%d)", n_frames, path, scene.width, scene.height)
    return phase


def animate(scene, lens_map, norm_scale, frame_delay=0.04, max_frames=0, out=None):
    """Redraw frames in place on an ANSI terminal; max_frames=0 runs until interrupted."""
    out = out or sys.stdout
    out.write(CLEAR_SCREEN)
    phase = 0.0
    n = 0
    try:
        while max_frames <= 0 or n < max_frames:
            out.write(CURSOR_HOME)
            write_frame(out, compose_frame(scene, lens_map, phase, norm_scale), scene.width)
            out.flush()
            if frame_delay > 0:
                time.sleep(frame_delay)
            phase = advance_phase(phase)
            n += 1
    except KeyboardInterrupt:
        logging.info("animation stopped after %d frames", n)
    return n
