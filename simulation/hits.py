"""Per-pixel lensing outcomes and the frame-sized lens map that caches them."""
import enum
from collections import Counter
from dataclasses import dataclass
from typing import ClassVar

import numpy as np
import pandas as pd


class HitKind(enum.Enum):
    DISK = 'disk'
    SKY = 'sky'
    CAPTURED = 'captured'
    INNER_VOID = 'inner_void'


@dataclass(frozen=True)
class DiskHit:
    """Ray crossed the disk annulus.

    r     : crossing radius, r_in <= r <= r_out
    phi   : in-plane azimuth in [0, 2π)
    g     : redshift factor E_obs / E_em, floored at 0
    emiss : baseline emissivity r^-p
    """
    r: float
    phi: float
    g: float
    emiss: float
    kind: ClassVar[HitKind] = HitKind.DISK


@dataclass(frozen=True)
class Sky:
    kind: ClassVar[HitKind] = HitKind.SKY


@dataclass(frozen=True)
class Captured:
    kind: ClassVar[HitKind] = HitKind.CAPTURED


@dataclass(frozen=True)
class InnerVoid:
    """Escaped after dipping between the photon sphere and the inner disk edge."""
    kind: ClassVar[HitKind] = HitKind.INNER_VOID


SKY = Sky()
CAPTURED = Captured()
INNER_VOID = InnerVoid()


class LensMap:
    """
    Row-major cache of one Hit per pixel.

    Built once per SceneConfig and never mutated afterwards.
    """

    def __init__(self, width, height, hits):
        hits = tuple(hits)
        if len(hits) != width * height:
            raise ValueError(f"expected {width * height} hits for a {width}x{height} map, got {len(hits)}")
        self.width = width
        self.height = height
        self.hits = hits
        self._disk_arrays = None

    def __getitem__(self, xy):
        x, y = xy
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError(f"pixel ({x}, {y}) outside {self.width}x{self.height} map")
        return self.hits[y * self.width + x]

    def __iter__(self):
        return iter(self.hits)

    def __len__(self):
        return len(self.hits)

    def __eq__(self, other):
        if not isinstance(other, LensMap):
            return NotImplemented
        return (self.width, self.height, self.hits) == (other.width, other.height, other.hits)

    def __repr__(self):
        return f"LensMap({self.width}x{self.height}, {dict(self.counts())})"

    def disk_arrays(self):
        """Return (flat_index, r, phi, g, emiss) arrays for the DiskHit pixels."""
        if self._disk_arrays is None:
            idx = [i for i, hit in enumerate(self.hits) if isinstance(hit, DiskHit)]
            disk = [self.hits[i] for i in idx]
            self._disk_arrays = (
                np.array(idx, dtype=np.int64),
                np.array([h.r for h in disk], dtype=np.float64),
                np.array([h.phi for h in disk], dtype=np.float64),
                np.array([h.g for h in disk], dtype=np.float64),
                np.array([h.emiss for h in disk], dtype=np.float64),
            )
        return self._disk_arrays

    def counts(self):
        counts = Counter(hit.kind for hit in self.hits)
        return {kind: counts.get(kind, 0) for kind in HitKind}

    def to_dataframe(self):
        rows = []
        for i, hit in enumerate(self.hits):
            y, x = divmod(i, self.width)
            row = {'x': x, 'y': y, 'kind': hit.kind.value,
                   'r': np.nan, 'phi': np.nan, 'g': np.nan, 'emiss': np.nan}
            if isinstance(hit, DiskHit):
                row.update(r=hit.r, phi=hit.phi, g=hit.g, emiss=hit.emiss)
            rows.append(row)
        return pd.DataFrame(rows, columns=['x', 'y', 'kind', 'r', 'phi', 'g', 'emiss'])
