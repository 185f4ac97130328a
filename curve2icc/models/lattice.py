from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np


@dataclass(frozen=True)
class Lattice:
    size: int            # N, samples per axis
    values: np.ndarray   # shape (N**3, 3), red index varies fastest
    title: Optional[str] = None

    def index(self, ir: int, ig: int, ib: int) -> int:
        """Flat offset of cell (ir, ig, ib): ir + ig*N + ib*N^2."""
        n = self.size
        for name, i in (("red", ir), ("green", ig), ("blue", ib)):
            if not 0 <= i < n:
                raise IndexError(f"{name} axis index {i} outside lattice of size {n}")
        return ir + ig * n + ib * n * n

    def at(self, ir: int, ig: int, ib: int) -> np.ndarray:
        return self.values[self.index(ir, ig, ib)]
