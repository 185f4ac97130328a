from __future__ import annotations

import logging
from enum import Enum

import numpy as np

from curve2icc.config import TABLE_SIZE, U8_MAX
from curve2icc.models.lattice import Lattice
from curve2icc.models.tables import ChannelTables, quantize_u16

logger = logging.getLogger(__name__)


class AxisWeighting(str, Enum):
    # left*dx + right*(1-dx): matches the tables produced by the original converter
    REFERENCE = "reference"
    # left*(1-dx) + right*dx: textbook linear interpolation
    LINEAR = "linear"


def axis_coordinates(size: int) -> tuple[np.ndarray, np.ndarray]:
    """(ix, dx) for every output level a: x = a * (N-1) / 255, ix = floor(x), dx = x - ix."""
    a = np.arange(TABLE_SIZE, dtype=float)
    # multiply first so levels that land on a lattice node give an exact integer
    x = a * (size - 1) / U8_MAX
    ix = np.floor(x).astype(int)
    return ix, x - ix


def _axis_offsets(lattice: Lattice, channel: int, ix: np.ndarray) -> np.ndarray:
    # Walk one axis, the other two held at index 0.
    def offset(i: int) -> int:
        axes = [0, 0, 0]
        axes[channel] = i
        return lattice.index(*axes)

    return np.array([offset(int(i)) for i in ix], dtype=int)


def sample_channel(lattice: Lattice, channel: int, weighting: AxisWeighting = AxisWeighting.REFERENCE) -> np.ndarray:
    n = lattice.size
    ix, dx = axis_coordinates(n)
    ix_right = np.minimum(ix + 1, n - 1)

    left = lattice.values[_axis_offsets(lattice, channel, ix), channel]
    right = lattice.values[_axis_offsets(lattice, channel, ix_right), channel]

    if AxisWeighting(weighting) is AxisWeighting.REFERENCE:
        blended = left * dx + right * (1.0 - dx)
    else:
        blended = left * (1.0 - dx) + right * dx
    return quantize_u16(blended)


def sample_axes(lattice: Lattice, weighting: AxisWeighting = AxisWeighting.REFERENCE) -> ChannelTables:
    """Rebuild 256-entry R, G, B ramps by interpolating along each channel's own lattice axis."""
    logger.debug("Sampling %d^3 lattice axes (%s weighting)", lattice.size, AxisWeighting(weighting).value)
    return ChannelTables.from_channels(*(sample_channel(lattice, c, weighting) for c in range(3)))
