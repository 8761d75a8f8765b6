#main.py
import logging
import os
import random
import sys

import pandas as pd

from config import build_scene, parse_args
from simulation.frame import brightness_field, compute_norm_scale
from simulation.raytracing import trace_lens_map, trace_ray_path
from simulation.scene import SceneConfigError
from visualization.terminal import animate, dump_frames

# ---
# GEOMETRIZED UNITS: G = c = 1, M = 1
# Horizon r_s = 2M, photon sphere 3M, disk annulus [6M, 40M]
# ---


def export_sampled_rays(scene, n_samples, out_path, seed=None):
    """Trace n randomly chosen pixels and save their trajectories as CSV."""
    rng = random.Random(seed)
    sampled_indices = set()
    n_samples = min(n_samples, scene.pixel_count)
    while len(sampled_indices) < n_samples:
        sampled_indices.add((rng.randrange(scene.width), rng.randrange(scene.height)))
    trajectories = []
    rows = []
    for ridx, (px, py) in enumerate(sorted(sampled_indices)):
        traj = trace_ray_path(scene, px, py, max_points=1000)
        trajectories.append(traj)
        for pidx, (x, y, z) in enumerate(traj):
            rows.append({'ray_id': ridx, 'px': px, 'py': py, 'point_idx': pidx, 'x': x, 'y': y, 'z': z})
    pd.DataFrame(rows).to_csv(out_path, index=False)
    logging.info(f"Saved {len(trajectories)} sampled rays to {out_path}")
    return trajectories


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=getattr(logging, args.log_level), format='%(asctime)s %(levelname)s: %(message)s')
    try:
        scene = build_scene(args)
    except SceneConfigError as e:
        logging.error(f"Invalid scene configuration: {e}")
        return 2
    if args.dump and args.frames < 1:
        logging.error(f"--frames must be at least 1 when dumping, got {args.frames}")
        return 2

    lens_map = trace_lens_map(scene, workers=args.workers, progress=not args.no_progress)
    norm_scale = compute_norm_scale(scene, lens_map)
    logging.info(f"Normalisation scale: {norm_scale:.6g}")

    counts = lens_map.counts()
    print("\nPhoton summary:")
    for kind, n in counts.items():
        print(f"  {kind.value}: {n}")

    if args.photon_data:
        lens_map.to_dataframe().to_csv(args.photon_data, index=False)
        logging.info(f"Saved per-pixel hit data to {args.photon_data}")

    trajectories = []
    if args.sample_rays > 0:
        out_csv = os.path.join(args.plots, 'sampled_rays.csv') if args.plots else 'sampled_rays.csv'
        if args.plots:
            os.makedirs(args.plots, exist_ok=True)
        trajectories = export_sampled_rays(scene, args.sample_rays, out_csv, seed=args.seed)

    if args.plots:
        # matplotlib is only needed for the diagnostic images
        from visualization.plot import plot_lens_map, plot_ray_trajectories, save_brightness_image
        plot_lens_map(lens_map, os.path.join(args.plots, 'lens_map.png'))
        save_brightness_image(brightness_field(scene, lens_map, 0.0, norm_scale),
                              os.path.join(args.plots, 'brightness.png'))
        if trajectories:
            plot_ray_trajectories(scene, trajectories, os.path.join(args.plots, 'ray_trajectories.png'))

    if args.dump:
        dump_frames(args.dump, scene, lens_map, norm_scale, args.frames)
        return 0

    animate(scene, lens_map, norm_scale, frame_delay=args.frame_delay, max_frames=args.max_frames)
    return 0


if __name__ == "__main__":
    sys.exit(main())
