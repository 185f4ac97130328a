from __future__ import annotations

from pathlib import Path

import numpy as np
import pytest

from curve2icc.cli import main
from curve2icc.export.icc_writer import read_description, read_vcgt
from curve2icc.parser.curve_parser import curve_tables_from_text
from curve2icc.parser.pipeline import load_channel_tables, tables_from_cube_text
from curve2icc.sampling.axis import AxisWeighting


@pytest.fixture
def gamma_curves_text(identity_ramp, make_curves_text):
    def build(linear: bool = False) -> str:
        ramp = identity_ramp()
        return make_curves_text([[v ** 1.2 for v in ramp], [v ** 0.9 for v in ramp], ramp, ramp], linear=linear)

    return build


def test_cli_curves_to_profile(gamma_curves_text, tmp_path: Path) -> None:
    text = gamma_curves_text()
    src = tmp_path / "curves.txt"
    src.write_text(text, encoding="utf-8")
    out = tmp_path / "out" / "display.icc"

    rc = main([str(src), str(out), "-d", "Office monitor"])
    assert rc == 0
    data = out.read_bytes()
    assert read_vcgt(data) == curve_tables_from_text(text)[0]
    assert read_description(data) == "Office monitor"


def test_cli_default_output_name(gamma_curves_text, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    src = tmp_path / "curves.txt"
    src.write_text(gamma_curves_text(), encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    assert main([str(src)]) == 0
    data = (tmp_path / "out.icc").read_bytes()
    assert read_description(data) == "Custom gamma ICC profile"


def test_cli_cube_pipeline(make_cube_text, tmp_path: Path) -> None:
    text = make_cube_text(2)
    src = tmp_path / "look.cube"
    src.write_text(text, encoding="utf-8")

    ref_out = tmp_path / "ref.icc"
    lin_out = tmp_path / "lin.icc"
    assert main([str(src), str(ref_out), "--cube"]) == 0
    assert main([str(src), str(lin_out), "--cube", "--linear-interp"]) == 0

    assert read_vcgt(ref_out.read_bytes()) == tables_from_cube_text(text).tables
    lin = read_vcgt(lin_out.read_bytes())
    assert np.array_equal(lin.red, np.arange(256, dtype=np.uint16) * 257)


def test_cli_linear_light_warning(gamma_curves_text, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    src = tmp_path / "curves.txt"
    src.write_text(gamma_curves_text(linear=True), encoding="utf-8")
    assert main([str(src), str(tmp_path / "a.icc")]) == 0
    captured = capsys.readouterr().out
    assert "[WARN]" in captured
    assert "saving profile to" in captured


def test_cli_missing_size_directive_fails(make_cube_text, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    src = tmp_path / "bad.cube"
    src.write_text(make_cube_text(2).replace("LUT_3D_SIZE 2", ""), encoding="utf-8")
    out = tmp_path / "bad.icc"
    assert main([str(src), str(out), "--cube"]) == 2
    assert not out.exists()
    assert "LUT_3D_SIZE" in capsys.readouterr().out


def test_cli_too_few_curves_fails(identity_ramp, make_curves_text, tmp_path: Path) -> None:
    ramp = identity_ramp()
    src = tmp_path / "curves.txt"
    src.write_text(make_curves_text([ramp, ramp, ramp]), encoding="utf-8")
    out = tmp_path / "x.icc"
    assert main([str(src), str(out)]) == 2
    assert not out.exists()


def test_cli_missing_input(tmp_path: Path) -> None:
    assert main([str(tmp_path / "nope.txt")]) == 2


def test_cli_directory_input(tmp_path: Path) -> None:
    assert main([str(tmp_path)]) == 2


def test_load_channel_tables_dispatch(gamma_curves_text, make_cube_text, tmp_path: Path) -> None:
    cube = tmp_path / "a.cube"
    cube.write_text(make_cube_text(3, title="Warm"), encoding="utf-8")
    res = load_channel_tables(cube, lattice=True, weighting=AxisWeighting.LINEAR)
    assert res.source_kind == "cube"
    assert res.title == "Warm"
    assert res.notes == []

    curves = tmp_path / "c.txt"
    curves.write_text(gamma_curves_text(), encoding="utf-8")
    res = load_channel_tables(curves)
    assert res.source_kind == "curves"
    assert res.tables.data.shape == (3, 256)


def test_load_channel_tables_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_channel_tables(tmp_path / "missing.cube", lattice=True)
