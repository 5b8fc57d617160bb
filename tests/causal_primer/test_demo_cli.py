import pytest

from causal_primer import SimulationConfig, run_demo
from causal_primer.cli import main


@pytest.mark.parametrize("structure", ["chain", "fork", "collider"])
def test_run_demo_report(structure):
    report = run_demo(structure, SimulationConfig(n=500, seed=0))

    assert report.structure == structure
    assert set(report.correlations) == {("X", "Y"), ("Y", "Z"), ("X", "Z")}
    assert report.regression.formula == "Z ~ X + Y"
    text = report.render()
    assert "Structural equations:" in text
    assert "Paths between X and Z:" in text
    assert "lm(formula = Z ~ X + Y)" in text


def test_collider_render_shows_collider_path():
    text = run_demo("collider", SimulationConfig(n=200, seed=1)).render()
    assert "X -> Y <- Z  (collider path; open given Y)" in text
    assert "X _||_ Z        : True" in text


def test_run_demo_rejects_unknown_structure():
    with pytest.raises(ValueError):
        run_demo("triangle")


@pytest.mark.parametrize("kwargs", [{"n": 3}, {"alpha": 0.0}, {"confidence": 1.0}])
def test_simulation_config_validation(kwargs):
    with pytest.raises(ValueError):
        SimulationConfig(**kwargs)


def test_cli_prints_reports(capsys):
    assert main(["--structure", "fork", "--n", "300", "--seed", "3", "--log-level", "WARNING"]) == 0
    out = capsys.readouterr().out
    assert "== fork" in out
    assert "X <- Y -> Z" in out
    assert "Pearson's product-moment correlation" in out


def test_cli_runs_all_structures(capsys):
    main(["--n", "200", "--log-level", "ERROR"])
    out = capsys.readouterr().out
    for name in ["chain", "fork", "collider"]:
        assert f"== {name}" in out


def test_simulation_config_rejects_unknown_log_level():
    with pytest.raises(ValueError):
        SimulationConfig(log_level="bogus")
    assert SimulationConfig(log_level="DEBUG").log_level == "DEBUG"


def test_cli_rejects_unknown_log_level():
    with pytest.raises(SystemExit):
        main(["--log-level", "bogus"])
