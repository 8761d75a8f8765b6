#blackhole.py
from dataclasses import dataclass


@dataclass(frozen=True)
class BlackHole:
    """
    Represents a Schwarzschild black hole.
    mass: in geometrized units (e.g., M = 1)
    """
    mass: float = 1.0

    @property
    def rs(self):
        return 2 * self.mass  # Schwarzschild radius (r_s = 2M)

    @property
    def photon_sphere(self):
        return 3 * self.mass

    def metric_factor(self, r):
        """A(r) = 1 - 2M/r, the g_tt / g^rr factor of the static metric."""
        return 1.0 - 2.0 * self.mass / r


@dataclass(frozen=True)
class AccretionDisk:
    """
    Thin disk lying in the (possibly tilted) disk plane.
    r_in, r_out: annulus bounds in units of M
    emissivity_index: p in the r^-p emissivity law
    ring_*: radial banding (phase independent)
    hotspot_*: rotating circular brightness boosts
    """
    r_in: float = 6.0
    r_out: float = 40.0
    emissivity_index: float = 2.0

    ring_bands: int = 8
    ring_fill: float = 0.30
    ring_edge: float = 0.02
    ring_floor: float = 0.12
    ring_peak: float = 1.45

    hotspot_count: int = 1
    hotspot_amplitude: float = 3.0

    @property
    def hotspot_orbit(self):
        return 0.5 * self.r_out

    @property
    def hotspot_radius(self):
        return 0.5 * self.r_out

    @property
    def hotspot_edge(self):
        return 0.1 * self.r_out
