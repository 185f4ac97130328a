from __future__ import annotations

# Every output channel table has one entry per 8-bit input level.
TABLE_SIZE = 256
U8_MAX = 255
U16_MAX = 65535

# A curves export holds value, red, green, blue (and optionally alpha).
MIN_CURVE_BLOCKS = 4

# GIMP writes this when the curve was edited in linear light.
LINEAR_MARKER = "linear yes"

DEFAULT_OUTPUT = "out.icc"
DEFAULT_DESCRIPTION = "Custom gamma ICC profile"
