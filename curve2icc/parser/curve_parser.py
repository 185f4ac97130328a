from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Sequence

import numpy as np

from curve2icc.config import LINEAR_MARKER, MIN_CURVE_BLOCKS, TABLE_SIZE, U8_MAX, U16_MAX
from curve2icc.models.tables import ChannelTables, quantize_u16
from curve2icc.parser.errors import CurveParseError, ParseNote

logger = logging.getLogger(__name__)

# (samples <count> v1 v2 ...)) on a line of its own, possibly indented.
# COUNT is redundant with the number of values and is dropped.
_SAMPLES_RE = re.compile(r"^ *\(samples \d+ ([^\r\n]*)\)\)\r?$", re.MULTILINE)


@dataclass(frozen=True)
class SampleBlock:
    values: List[float]
    line_no: int  # 1-indexed


@dataclass
class ParsedCurves:
    value: np.ndarray   # master curve, uint16, always 256 long
    red: np.ndarray
    green: np.ndarray
    blue: np.ndarray
    block_count: int
    notes: List[ParseNote] = field(default_factory=list)


def _line_no_at(text: str, offset: int) -> int:
    return text.count("\n", 0, offset) + 1


def _parse_sample_values(raw: str, line_no: int) -> List[float]:
    values: List[float] = []
    for tok in raw.split(" "):
        try:
            values.append(float(tok))
        except ValueError as e:
            raise CurveParseError(
                f"Failed to parse number '{tok}' in sample block",
                line_no=line_no,
                snippet=raw[:80],
            ) from e
    return values


def find_sample_blocks(text: str) -> List[SampleBlock]:
    """All ``(samples ...)`` blocks in file order."""
    blocks: List[SampleBlock] = []
    for m in _SAMPLES_RE.finditer(text):
        line_no = _line_no_at(text, m.start())
        blocks.append(SampleBlock(values=_parse_sample_values(m.group(1), line_no), line_no=line_no))
    return blocks


def parse_curve_text(text: str, source_path: str | Path | None = None) -> ParsedCurves:
    src = Path(source_path).expanduser().resolve() if source_path is not None else None
    try:
        notes: List[ParseNote] = []
        if LINEAR_MARKER in text:
            # Curves edited in linear light are still converted, they just may look off.
            msg = "Curve input is saved in linear light. The result might not look correct"
            logger.warning(msg)
            notes.append(ParseNote(msg))

        blocks = find_sample_blocks(text)
        # value, red, green, blue; a trailing alpha block is ignored
        if len(blocks) < MIN_CURVE_BLOCKS:
            raise CurveParseError(
                f"Curve count too low: found {len(blocks)} sample block(s), "
                f"expected at least {MIN_CURVE_BLOCKS} (value, red, green, blue)"
            )
        if len(blocks) > MIN_CURVE_BLOCKS:
            logger.debug("Ignoring %d extra sample block(s)", len(blocks) - MIN_CURVE_BLOCKS)

        value_block = blocks[0]
        if len(value_block.values) != TABLE_SIZE:
            raise CurveParseError(
                f"Value curve must have {TABLE_SIZE} samples, found {len(value_block.values)}",
                line_no=value_block.line_no,
            )

        red, green, blue = (quantize_u16(b.values) for b in blocks[1:MIN_CURVE_BLOCKS])
        return ParsedCurves(
            value=quantize_u16(value_block.values),
            red=red,
            green=green,
            blue=blue,
            block_count=len(blocks),
            notes=notes,
        )
    except CurveParseError as e:
        if e.filename is None and src is not None:
            e.filename = str(src)
        raise


def project_to_u8(channel: Sequence[int] | np.ndarray) -> np.ndarray:
    """
    Truncating 16-bit -> 8-bit projection: trunc(v / 65535 * 255).

    Done in integer arithmetic so multiples of 257 land exactly on their
    8-bit level.
    """
    c = np.asarray(channel, dtype=np.int64)
    return (c * U8_MAX) // U16_MAX


def compose_gray_curve(value: np.ndarray, channel: np.ndarray) -> np.ndarray:
    """Apply ``channel`` first, then look its output up in the ``value`` curve."""
    master = np.asarray(value, dtype=np.uint16)
    if master.shape != (TABLE_SIZE,):
        raise ValueError(f"Value curve must have {TABLE_SIZE} entries, got shape {master.shape}")
    return master[project_to_u8(channel)]


def curve_tables_from_text(text: str, source_path: str | Path | None = None) -> tuple[ChannelTables, List[ParseNote]]:
    parsed = parse_curve_text(text, source_path=source_path)
    composed = [compose_gray_curve(parsed.value, c) for c in (parsed.red, parsed.green, parsed.blue)]
    for name, table in zip(("red", "green", "blue"), composed):
        if len(table) != TABLE_SIZE:
            raise CurveParseError(
                f"{name} curve must have {TABLE_SIZE} samples to form a channel table, found {len(table)}",
                filename=str(Path(source_path).expanduser().resolve()) if source_path is not None else None,
            )
    return ChannelTables.from_channels(*composed), parsed.notes
