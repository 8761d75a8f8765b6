import argparse

from simulation.scene import SceneConfig


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Schwarzschild Accretion Disk ASCII Renderer")
    parser.add_argument('--width', type=int, default=80, help='Frame width in characters (default: 80)')
    parser.add_argument('--height', type=int, default=52, help='Frame height in characters (default: 52)')
    parser.add_argument('--inclination', type=float, default=10.0, help='Observer inclination above the equator in degrees (default: 10)')
    parser.add_argument('--fov', type=float, default=60.0, help='Horizontal field of view in degrees (default: 60)')
    parser.add_argument('--observer-distance', type=float, default=39.0, help='Observer radius in units of M (default: 39)')
    parser.add_argument('--disk-tilt', type=float, default=0.0, help='Disk plane tilt about the screen x axis in degrees (default: 0)')
    parser.add_argument('--roll', type=float, default=0.0, help='Camera roll about the optical axis in degrees (default: 0)')
    parser.add_argument('--gamma', type=float, default=0.30, help='Display gamma exponent (default: 0.30)')
    parser.add_argument('--workers', type=int, default=1, help='Processes used to trace the lens map (default: 1)')
    # Output configurables
    parser.add_argument('--dump', type=str, default=None, help='Write frames to this file instead of animating')
    parser.add_argument('--frames', type=int, default=180, help='Number of frames written with --dump (default: 180)')
    parser.add_argument('--frame-delay', type=float, default=0.04, help='Seconds between animated frames (default: 0.04)')
    parser.add_argument('--max-frames', type=int, default=0, help='Stop the animation after this many frames, 0 = run forever (default: 0)')
    parser.add_argument('--photon-data', type=str, default=None, help='Save per-pixel hit data to this CSV file')
    parser.add_argument('--sample-rays', type=int, default=0, help='Number of randomly sampled ray trajectories to export (default: 0)')
    parser.add_argument('--plots', type=str, default=None, help='Directory for diagnostic PNG plots')
    parser.add_argument('--seed', type=int, default=None, help='Random seed for ray sampling')
    parser.add_argument('--no-progress', action='store_true', help='Hide the tracing progress bar')
    parser.add_argument('--log-level', type=str, default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'], help='Logging level (default: INFO)')
    return parser.parse_args(argv)


def build_scene(args):
    """Turn parsed CLI arguments into an immutable SceneConfig (raises SceneConfigError)."""
    return SceneConfig(
        width=args.width,
        height=args.height,
        r_obs=args.observer_distance,
        inclination_deg=args.inclination,
        fov_deg=args.fov,
        disk_tilt_deg=args.disk_tilt,
        roll_deg=args.roll,
        gamma=args.gamma,
    )
