from __future__ import annotations

from typing import Callable, Optional, Sequence

import pytest

CHANNEL_NAMES = ("value", "red", "green", "blue", "alpha")


def _identity_ramp(n: int = 256) -> list[float]:
    return [i / (n - 1) for i in range(n)]


def _make_curves_text(
    curves: Sequence[Sequence[float]],
    linear: bool = False,
    newline: str = "\n",
    indent: str = "        ",
) -> str:
    """Render a GIMP 2.10 style curves export."""
    lines = [
        "# GIMP curves tool settings",
        "",
        '(GimpCurvesConfig "Default"',
        "    (time 0)",
        f"    (linear {'yes' if linear else 'no'})",
    ]
    for name, samples in zip(CHANNEL_NAMES, curves):
        lines += [
            f"    (channel {name})",
            "    (curve",
            f"{indent}(curve-type smooth)",
            f"{indent}(n-points 2)",
            f"{indent}(points 4 0 0 1 1)",
            f"{indent}(point-types 2 smooth smooth)",
            f"{indent}(n-samples {len(samples)})",
            f"{indent}(samples {len(samples)} " + " ".join(f"{v:.6f}" for v in samples) + "))",
        ]
    lines.append(")")
    lines.append("")
    return newline.join(lines)


def _make_cube_text(
    size: int,
    cell: Optional[Callable[[int, int, int], Sequence[float]]] = None,
    title: Optional[str] = "test lut",
    header: Sequence[str] = (),
    newline: str = "\n",
) -> str:
    """Render a .cube file, red index varying fastest."""
    if cell is None:
        def cell(ir: int, ig: int, ib: int) -> Sequence[float]:
            d = max(size - 1, 1)
            return (ir / d, ig / d, ib / d)

    lines = ["# generated"]
    if title is not None:
        lines.append(f'TITLE "{title}"')
    lines += list(header)
    lines.append(f"LUT_3D_SIZE {size}")
    lines.append("")
    for ib in range(size):
        for ig in range(size):
            for ir in range(size):
                lines.append(" ".join(f"{v:.6f}" for v in cell(ir, ig, ib)))
    lines.append("")
    return newline.join(lines)


@pytest.fixture
def identity_ramp():
    return _identity_ramp


@pytest.fixture
def make_curves_text():
    return _make_curves_text


@pytest.fixture
def make_cube_text():
    return _make_cube_text


@pytest.fixture
def identity_curves_text() -> str:
    ramp = _identity_ramp()
    return _make_curves_text([ramp, ramp, ramp, ramp])
