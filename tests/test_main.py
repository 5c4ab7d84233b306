"""End-to-end tests for the command-line driver."""

import os

import main


def _write_inputs(tmp_path):
    groups = tmp_path / "groups.csv"
    groups.write_text("name,mean,sd,samples\nControl,10,1.2,5\nTreated,13,1.0,5\n")
    curve = tmp_path / "curve.csv"
    curve.write_text("concentration,absorbance\n0,0.01\n10,0.2\n20,0.41\n")
    return str(groups), str(curve)


def test_main_writes_outputs(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    groups, curve = _write_inputs(tmp_path)
    out_dir = tmp_path / "out"
    code = main.main(
        [
            groups,
            "--curve",
            curve,
            "--seed",
            "7",
            "--test",
            "Control",
            "Treated",
            "t-test",
            "--analysis-name",
            "demo",
            "--output-dir",
            str(out_dir),
        ]
    )
    assert code == 0
    for name in (
        "demo-results.csv",
        "standard_curve.csv",
        "statistical_tests.csv",
        "standard_curve.png",
        "forward_test.png",
    ):
        assert os.path.exists(out_dir / name), name


def test_main_without_curve(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    groups, _ = _write_inputs(tmp_path)
    code = main.main([groups, "--no-curve", "--no-plots", "--output-dir", str(tmp_path / "o")])
    assert code == 0
    assert os.path.exists(tmp_path / "o" / "analysis-results.csv")


def test_main_requires_curve_unless_disabled(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    groups, _ = _write_inputs(tmp_path)
    assert main.main([groups]) == 1


def test_main_reports_unsupported_test(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    groups, curve = _write_inputs(tmp_path)
    code = main.main(
        [groups, "--curve", curve, "--test", "Control", "Treated", "anova", "--no-plots"]
    )
    assert code == 1


def test_main_auto_fills_standard_curve(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    groups, _ = _write_inputs(tmp_path)
    curve = tmp_path / "partial_curve.csv"
    curve.write_text("concentration,absorbance\n0,0.01\n10,\n20,0.41\n")
    out_dir = tmp_path / "filled"
    code = main.main(
        [groups, "--curve", str(curve), "--auto-fill", "--no-plots", "--output-dir", str(out_dir)]
    )
    assert code == 0
    with open(out_dir / "standard_curve.csv", encoding="utf-8") as fh:
        assert "y = 0.0200x + 0.0100" in fh.read()
