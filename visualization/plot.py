import matplotlib.pyplot as plt
import numpy as np
import os
from PIL import Image
from matplotlib.colors import ListedColormap
from matplotlib.patches import Patch

from simulation.hits import HitKind

# display order / colours for the classification plot
_KIND_ORDER = [HitKind.CAPTURED, HitKind.INNER_VOID, HitKind.SKY, HitKind.DISK]
_KIND_COLOURS = ['black', 'dimgray', 'midnightblue', 'orange']


def _ensure_dir(out_path):
    if os.path.dirname(out_path):
        os.makedirs(os.path.dirname(out_path), exist_ok=True)


def plot_lens_map(lens_map, out_path='images/lens_map.png'):
    """
    Save a categorical image of the lens map: one colour per hit kind.
    """
    codes = np.array([_KIND_ORDER.index(hit.kind) for hit in lens_map]).reshape(lens_map.height, lens_map.width)
    fig, ax = plt.subplots(figsize=(8, 8 * lens_map.height / lens_map.width + 1))
    ax.imshow(codes, cmap=ListedColormap(_KIND_COLOURS), vmin=0, vmax=len(_KIND_ORDER) - 1,
              interpolation='nearest')
    counts = lens_map.counts()
    ax.legend(handles=[Patch(color=c, label=f"{k.value} ({counts[k]})") for k, c in zip(_KIND_ORDER, _KIND_COLOURS)],
              loc='upper right', fontsize='small')
    ax.set_title('Lens map classification')
    ax.axis('off')
    _ensure_dir(out_path)
    fig.savefig(out_path, bbox_inches='tight')
    plt.close(fig)
    print(f"Saved lens map image to {out_path}")


def save_brightness_image(field, out_path='images/brightness.png'):
    """Write a (h, w) gamma-corrected brightness field as an 8-bit greyscale PNG; NaN -> black."""
    img = (np.nan_to_num(field, nan=0.0).clip(0.0, 1.0) * 255).astype(np.uint8)
    _ensure_dir(out_path)
    Image.fromarray(img).save(out_path)
    print(f"Saved brightness image to {out_path}")


def plot_ray_trajectories(scene, trajectories, out_path='images/ray_trajectories.png'):
    """
    Side view (x-z) of sampled ray trajectories with the horizon, photon sphere
    and the disk plane trace.
    """
    fig, ax = plt.subplots(figsize=(8, 8))
    bh = scene.black_hole
    ax.add_patch(plt.Circle((0, 0), bh.rs, color='black', label='Event Horizon'))
    ax.add_patch(plt.Circle((0, 0), bh.photon_sphere, color='gray', fill=False, linestyle='--',
                            label='Photon Sphere'))
    # trace of the disk plane n.X = 0 in the y = 0 slice
    nx, _, nz = scene.disk_normal
    dx, dz = nz, -nx
    d = np.hypot(dx, dz)
    for sign in (-1, 1):
        seg = np.array([scene.disk.r_in, scene.disk.r_out]) * sign
        ax.plot(seg * dx / d, seg * dz / d, color='orange', lw=3,
                label='Disk' if sign == 1 else None)
    obs = scene.r_obs * np.array([np.sin(scene.theta_obs), np.cos(scene.theta_obs)])
    ax.plot(obs[0], obs[1], 'ro', markersize=8, label='Observer')
    for traj in trajectories:
        ax.plot(traj[:, 0], traj[:, 2], color='tab:blue', lw=1, alpha=0.8)
    lim = 1.3 * scene.r_obs
    ax.set_xlim(-lim, lim)
    ax.set_ylim(-lim, lim)
    ax.set_aspect('equal')
    ax.set_xlabel('x')
    ax.set_ylabel('z')
    ax.set_title('Sampled null geodesics (x-z projection)')
    ax.legend(loc='upper left', fontsize='small')
    _ensure_dir(out_path)
    fig.savefig(out_path, bbox_inches='tight')
    plt.close(fig)
    print(f"Saved ray trajectory plot to {out_path}")
