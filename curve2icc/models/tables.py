from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from curve2icc.config import TABLE_SIZE, U16_MAX


def quantize_u16(values: Sequence[float] | np.ndarray) -> np.ndarray:
    """
    Scale [0, 1] samples to 16-bit: round(value * 65535).

    Rounds half away from zero. Values outside [0, 1] are not rejected,
    they saturate at 0 / 65535.
    """
    scaled = np.asarray(values, dtype=float) * float(U16_MAX)
    whole = np.trunc(scaled)
    rounded = whole + np.where(np.abs(scaled - whole) >= 0.5, np.sign(scaled), 0.0)
    return np.clip(np.nan_to_num(rounded), 0, U16_MAX).astype(np.uint16)


@dataclass(frozen=True, eq=False)
class ChannelTables:
    """Red, green and blue correction tables, 256 uint16 entries each."""

    data: np.ndarray  # shape (3, 256), uint16, R/G/B order

    def __post_init__(self) -> None:
        arr = np.asarray(self.data)
        if arr.shape != (3, TABLE_SIZE):
            raise ValueError(f"Channel tables must have shape (3, {TABLE_SIZE}), got {arr.shape}")
        if arr.dtype != np.uint16:
            raise ValueError(f"Channel tables must be uint16, got {arr.dtype}")
        arr = arr.copy()
        arr.setflags(write=False)
        object.__setattr__(self, "data", arr)

    @classmethod
    def from_channels(cls, red, green, blue) -> "ChannelTables":
        return cls(np.stack([np.asarray(c, dtype=np.uint16) for c in (red, green, blue)]))

    @property
    def red(self) -> np.ndarray:
        return self.data[0]

    @property
    def green(self) -> np.ndarray:
        return self.data[1]

    @property
    def blue(self) -> np.ndarray:
        return self.data[2]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ChannelTables):
            return NotImplemented
        return bool(np.array_equal(self.data, other.data))

