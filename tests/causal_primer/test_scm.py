import numpy as np
import pytest

from causal_primer import (
    CausalGraph,
    LinearMechanism,
    NoiseSpec,
    Realization,
    StructuralCausalModel,
    UnknownVariableError,
    chain,
    collider,
)


def test_additive_chain_matches_hand_written_assignments():
    """Y = X + U_Y, Z = Y + U_Z, and a root is assigned from its own exogenous term."""
    scm = StructuralCausalModel.additive(chain())
    real = scm.sample(n=200, seed=0)

    assert isinstance(real, Realization)
    assert real.n == 200
    assert real.variables == ["X", "Y", "Z"]
    np.testing.assert_array_equal(real["X"], real["U_X"])
    np.testing.assert_allclose(real["Y"], real["X"] + real["U_Y"])
    np.testing.assert_allclose(real["Z"], real["Y"] + real["U_Z"])


def test_exogenous_draws_follow_seeded_generator():
    scm = StructuralCausalModel.additive(collider())
    real = scm.sample(n=50, seed=7)
    r = np.random.default_rng(7)
    for name in ["U_X", "U_Y", "U_Z"]:
        np.testing.assert_array_equal(real.exogenous[name], r.normal(0.0, 1.0, size=50))


def test_sample_reproducible_with_seed():
    """Same seed and n give bit-identical vectors."""
    scm = StructuralCausalModel.additive(chain())
    a = scm.sample(n=100, seed=123)
    b = scm.sample(n=100, seed=123)
    c = scm.sample(n=100, seed=124)
    for v in ["X", "Y", "Z", "U_X", "U_Y", "U_Z"]:
        assert np.array_equal(a[v], b[v])
    assert not np.array_equal(a["X"], c["X"])


def test_linear_mechanism_coefficients_and_intercept():
    g = CausalGraph(["A", "B"], [("A", "B")])
    scm = StructuralCausalModel(g, mechanisms={"B": LinearMechanism({"A": 2.0}, intercept=1.5, noise_scale=0.5)})
    real = scm.sample(n=30, seed=1)
    np.testing.assert_allclose(real["B"], 1.5 + 2.0 * real["A"] + 0.5 * real["U_B"])
    assert scm.equations() == ["A = U_A", "B = 1.5 + 2*A + 0.5*U_B"]


def test_mechanism_must_only_read_direct_causes():
    g = CausalGraph(["A", "B", "C"], [("A", "B"), ("B", "C")])
    with pytest.raises(ValueError):
        StructuralCausalModel(g, mechanisms={"C": LinearMechanism({"A": 1.0})})
    with pytest.raises(UnknownVariableError):
        StructuralCausalModel(g, mechanisms={"Q": LinearMechanism()})


def test_noise_spec():
    with pytest.raises(ValueError):
        NoiseSpec(name="laplace")
    with pytest.raises(ValueError):
        NoiseSpec(params={"scale": 0.0})
    g = CausalGraph(["A"])
    scm = StructuralCausalModel(g, noises={"U_A": NoiseSpec(params={"loc": 10.0, "scale": 0.1})})
    assert abs(scm.sample(n=500, seed=0)["A"].mean() - 10.0) < 0.05


@pytest.mark.parametrize("n", [0, -3, 2.5, True])
def test_sample_rejects_bad_n(n):
    with pytest.raises(ValueError):
        StructuralCausalModel.additive(chain()).sample(n=n, seed=0)


def test_dashed_arc_induces_correlation():
    g = CausalGraph(["X", "Y"], dashed=[("X", "Y")])
    scm = StructuralCausalModel.additive(g)
    real = scm.sample(n=5000, seed=3)
    assert "U_XY" in real.exogenous
    np.testing.assert_allclose(real["X"], real["U_X"] + real["U_XY"])
    assert np.corrcoef(real["X"], real["Y"])[0, 1] > 0.4


def test_intervention_cuts_incoming_edges():
    scm = StructuralCausalModel.additive(chain())
    done = scm.do(Y=2.0)
    assert done.graph.parents("Y") == []
    real = done.sample(n=100, seed=5)
    obs = scm.sample(n=100, seed=5)

    np.testing.assert_array_equal(real["Y"], np.full(100, 2.0))
    np.testing.assert_allclose(real["Z"], 2.0 + real["U_Z"])
    # same units: exogenous draws are shared with the observational model
    np.testing.assert_array_equal(real["X"], obs["X"])
    np.testing.assert_array_equal(real["U_Z"], obs["U_Z"])
    assert "Y = 2" in done.equations()


def test_intervention_keeps_latent_on_other_endpoint():
    g = CausalGraph(["X", "Y"], [("X", "Y")], dashed=[("X", "Y")])
    scm = StructuralCausalModel.additive(g)
    real = scm.intervene(X=0.0).sample(n=50, seed=2)
    np.testing.assert_allclose(real["Y"], real["U_Y"] + real["U_XY"])


def test_to_frame():
    real = StructuralCausalModel.additive(chain()).sample(n=10, seed=0)
    df = real.to_frame()
    assert list(df.columns) == ["X", "Y", "Z"]
    assert df.shape == (10, 3)
    assert real.to_frame(include_exogenous=True).shape == (10, 6)
    with pytest.raises(UnknownVariableError):
        real["Q"]


def test_every_exogenous_source_gets_its_own_draw():
    g = CausalGraph(["A", "B", "C"], dashed=[("A", "B"), ("B", "C")])
    scm = StructuralCausalModel.additive(g)
    assert scm.exogenous_names == ["U_A", "U_B", "U_C", "U_AB", "U_BC"]
    real = scm.sample(n=2000, seed=0)
    draws = [real.exogenous[name] for name in scm.exogenous_names]
    for i in range(len(draws)):
        for j in range(i + 1, len(draws)):
            assert abs(np.corrcoef(draws[i], draws[j])[0, 1]) < 0.1
    # A and C share no source
    assert abs(np.corrcoef(real["A"], real["C"])[0, 1]) < 0.1


def test_duplicate_exogenous_names_rejected():
    g = CausalGraph(["X", "Y"], dashed=[("X", "Y")])
    latents = g.latent_confounders()
    with pytest.raises(ValueError):
        StructuralCausalModel(g, latents=latents + latents)
