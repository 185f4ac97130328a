"""
.cube 3D LUT parser.

Only the parts needed to rebuild per-channel ramps are read:

- ``LUT_3D_SIZE N``   (required)
- ``TITLE "..."``     (optional, kept as metadata)
- the data region: N^3 ``R G B`` float triplets, red index varying fastest

The data region starts at the first line that opens with three numeric tokens.
Header keywords with numeric arguments (DOMAIN_MIN, DOMAIN_MAX) start with a
word and are therefore skipped. Inside the data region, tokens that are not
numbers are dropped.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import List, Optional

import numpy as np

from curve2icc.models.lattice import Lattice
from curve2icc.parser.errors import CubeParseError

logger = logging.getLogger(__name__)

_NUM = r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?"
_SIZE_RE = re.compile(r"^[ \t]*LUT_3D_SIZE[ \t]+(\d+)\b", re.MULTILINE)
_TITLE_RE = re.compile(r'^\s*TITLE\s+"?([^"\r\n]*)"?\s*$', re.MULTILINE)
_TRIPLET_START_RE = re.compile(rf"^[ \t]*{_NUM}[ \t]+{_NUM}[ \t]+{_NUM}(?!\S)", re.MULTILINE)


def _line_no_at(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def _tolerant_floats(tokens: List[str]) -> List[float]:
    values: List[float] = []
    skipped = 0
    for tok in tokens:
        try:
            values.append(float(tok))
        except ValueError:
            skipped += 1
    if skipped:
        logger.debug("Skipped %d non-numeric token(s) in lattice data", skipped)
    return values


def parse_cube_text(text: str, source_path: str | Path | None = None) -> Lattice:
    src = Path(source_path).expanduser().resolve() if source_path is not None else None
    try:
        size_matches = _SIZE_RE.findall(text)
        if not size_matches:
            raise CubeParseError("Not a recognized lattice export: missing LUT_3D_SIZE")
        if len(size_matches) > 1:
            raise CubeParseError("LUT_3D_SIZE declared more than once")
        n = int(size_matches[0])
        if n < 1:
            raise CubeParseError(f"LUT_3D_SIZE must be >= 1, got {n}")

        title: Optional[str] = None
        tm = _TITLE_RE.search(text)
        if tm is not None:
            title = tm.group(1).strip() or None

        expected = n ** 3
        start = _TRIPLET_START_RE.search(text)
        if start is None:
            raise CubeParseError(f"Lattice count mismatch: expected {expected} triplets, found 0")

        data_line_no = _line_no_at(text, start.start())
        values = _tolerant_floats(text[start.start():].split())
        if len(values) % 3 != 0:
            raise CubeParseError(
                f"Lattice data holds {len(values)} values, which is not a whole number of RGB triplets",
                line_no=data_line_no,
            )
        count = len(values) // 3
        if count != expected:
            raise CubeParseError(
                f"Lattice count mismatch: LUT_3D_SIZE {n} needs {expected} triplets, found {count}",
                line_no=data_line_no,
            )

        logger.debug("Parsed %d^3 lattice starting at line %d", n, data_line_no)
        arr = np.asarray(values, dtype=float).reshape(expected, 3)
        arr.setflags(write=False)
        return Lattice(size=n, values=arr, title=title)
    except CubeParseError as e:
        if e.filename is None and src is not None:
            e.filename = str(src)
        raise
