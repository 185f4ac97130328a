from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar, Optional


@dataclass(frozen=True)
class ParseNote:
    """Non-fatal finding; the conversion still runs."""

    message: str
    line_no: Optional[int] = None


@dataclass
class ParseError(Exception):
    """Fatal input problem. ``stage`` names the pipeline step that rejected the file."""

    stage: ClassVar[str] = "input"

    message: str
    line_no: Optional[int] = None
    snippet: Optional[str] = None
    filename: Optional[str] = None

    def __str__(self) -> str:
        where = f"{self.filename}: " if self.filename else ""
        if self.line_no is not None:
            where += f"line {self.line_no}: "
        return f"{where}[{self.stage}] {self.message}"


class CurveParseError(ParseError):
    stage = "curves"


class CubeParseError(ParseError):
    stage = "lattice"
