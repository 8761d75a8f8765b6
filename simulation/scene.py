import math
from dataclasses import dataclass, field

import numpy as np

from .blackhole import AccretionDisk, BlackHole


class SceneConfigError(ValueError):
    """Raised when scene parameters describe a degenerate geometry."""


@dataclass(frozen=True)
class SceneConfig:
    """
    Immutable description of one lensing pass.

    width, height : output grid in pixels
    r_obs : observer radius (units of M), must lie outside the horizon
    inclination_deg : observer elevation above the equator; theta_obs = pi/2 - inc
    fov_deg : horizontal field of view; the vertical one follows the aspect ratio
    disk_tilt_deg : rotation of the disk plane about the world x axis
    roll_deg : rotation of the image plane about the optical axis
    gamma : display gamma applied before quantisation
    """
    width: int = 80
    height: int = 52
    r_obs: float = 39.0
    inclination_deg: float = 10.0
    fov_deg: float = 60.0
    disk_tilt_deg: float = 0.0
    roll_deg: float = 0.0
    gamma: float = 0.30
    phi_obs: float = 0.0
    black_hole: BlackHole = field(default_factory=BlackHole)
    disk: AccretionDisk = field(default_factory=AccretionDisk)

    # derived, filled in __post_init__
    theta_obs: float = field(init=False)
    fov_x: float = field(init=False)
    fov_y: float = field(init=False)
    roll: float = field(init=False)
    disk_normal: tuple = field(init=False)
    disk_u_axis: tuple = field(init=False)
    disk_v_axis: tuple = field(init=False)

    def __post_init__(self):
        self._validate()
        set_ = object.__setattr__
        set_(self, 'theta_obs', math.pi / 2.0 - math.radians(self.inclination_deg))
        set_(self, 'fov_x', math.radians(self.fov_deg))
        set_(self, 'fov_y', self.fov_x * (self.height / self.width))
        set_(self, 'roll', math.radians(self.roll_deg))

        # equatorial normal (0, 0, 1) rotated by +tilt about x
        tilt = math.radians(self.disk_tilt_deg)
        n = np.array([0.0, -math.sin(tilt), math.cos(tilt)])
        u = np.array([1.0, 0.0, 0.0])
        v = np.cross(n, u)
        set_(self, 'disk_normal', tuple(float(c) for c in n))
        set_(self, 'disk_u_axis', tuple(float(c) for c in u))
        set_(self, 'disk_v_axis', tuple(float(c) for c in v))

    def _validate(self):
        if self.width < 1 or self.height < 1:
            raise SceneConfigError(f"grid must be at least 1x1, got {self.width}x{self.height}")
        if not self.r_obs > self.black_hole.rs:
            raise SceneConfigError(
                f"Observer must lie outside the event horizon (r_obs={self.r_obs} <= {self.black_hole.rs}).")
        if not -90.0 < self.inclination_deg < 90.0:
            raise SceneConfigError(f"inclination must be within (-90, 90) degrees, got {self.inclination_deg}")
        if not 0.0 < self.fov_deg < 180.0:
            raise SceneConfigError(f"field of view must be within (0, 180) degrees, got {self.fov_deg}")
        if not -90.0 < self.disk_tilt_deg < 90.0:
            raise SceneConfigError(f"disk tilt must be within (-90, 90) degrees, got {self.disk_tilt_deg}")
        if not self.gamma > 0.0:
            raise SceneConfigError(f"gamma must be positive, got {self.gamma}")
        if not 0.0 < self.disk.r_in < self.disk.r_out:
            raise SceneConfigError(f"disk needs 0 < r_in < r_out, got ({self.disk.r_in}, {self.disk.r_out})")
        if not self.disk.r_in > self.black_hole.photon_sphere:
            raise SceneConfigError(
                f"disk inner edge must lie outside the photon sphere (r_in={self.disk.r_in} <= {self.black_hole.photon_sphere}).")

    @property
    def equatorial_disk(self):
        """True when the disk lies in the θ = π/2 plane."""
        return self.disk_tilt_deg == 0.0

    @property
    def pixel_count(self):
        return self.width * self.height
