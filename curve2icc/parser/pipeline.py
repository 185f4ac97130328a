from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Literal, Optional

from curve2icc.models.tables import ChannelTables
from curve2icc.parser.cube_parser import parse_cube_text
from curve2icc.parser.curve_parser import curve_tables_from_text
from curve2icc.parser.errors import ParseNote
from curve2icc.sampling.axis import AxisWeighting, sample_axes

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    tables: ChannelTables
    source_kind: Literal["curves", "cube"]
    notes: List[ParseNote] = field(default_factory=list)
    title: Optional[str] = None


def tables_from_curve_text(text: str, source_path: str | Path | None = None) -> ConversionResult:
    tables, notes = curve_tables_from_text(text, source_path=source_path)
    return ConversionResult(tables=tables, source_kind="curves", notes=notes)


def tables_from_cube_text(
    text: str,
    source_path: str | Path | None = None,
    weighting: AxisWeighting = AxisWeighting.REFERENCE,
) -> ConversionResult:
    lattice = parse_cube_text(text, source_path=source_path)
    return ConversionResult(
        tables=sample_axes(lattice, weighting=weighting),
        source_kind="cube",
        title=lattice.title,
    )


def load_channel_tables(
    path: str | Path,
    lattice: bool = False,
    weighting: AxisWeighting = AxisWeighting.REFERENCE,
) -> ConversionResult:
    p = Path(path).expanduser().resolve()
    if not p.is_file():
        raise FileNotFoundError(f"Input file not found: {p}")
    text = p.read_text(encoding="utf-8")
    logger.info("Read %d characters from %s", len(text), p)
    if lattice:
        return tables_from_cube_text(text, source_path=p, weighting=weighting)
    return tables_from_curve_text(text, source_path=p)
