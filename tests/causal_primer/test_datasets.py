import numpy as np

from causal_primer import (
    CausalGraph,
    Dataset,
    StructuralCausalModel,
    chain,
    generate_dataset,
)


def test_generate_dataset_basic_shapes():
    """Smoke test that generate_dataset returns a Dataset and SCM over the given graph."""
    ds, scm = generate_dataset(chain(), n=100, seed=0)

    assert isinstance(ds, Dataset)
    assert isinstance(scm, StructuralCausalModel)
    assert ds.graph == chain()
    assert ds.realization.n == 100
    assert ds.seed == 0


def test_generate_dataset_reproducible_with_seed():
    ds1, _ = generate_dataset(chain(), n=50, seed=123)
    ds2, _ = generate_dataset(chain(), n=50, seed=123)
    for v in ["X", "Y", "Z"]:
        assert np.array_equal(ds1.realization[v], ds2.realization[v])


def test_save_and_load_npz(tmp_path):
    g = CausalGraph(["X", "Y", "Z"], [("X", "Y"), ("Y", "Z")], dashed=[("X", "Z")])
    ds, _ = generate_dataset(g, n=20, seed=4)
    path = tmp_path / "chain.npz"
    ds.save_npz(str(path))

    loaded = Dataset.load_npz(str(path))
    assert loaded.graph == g
    assert loaded.seed == 4
    assert loaded.realization.order == ds.realization.order
    assert sorted(loaded.realization.exogenous) == ["U_X", "U_XZ", "U_Y", "U_Z"]
    for v in ["X", "Y", "Z", "U_XZ"]:
        np.testing.assert_array_equal(loaded.realization[v], ds.realization[v])


def test_unseeded_dataset_round_trips_seed_as_none(tmp_path):
    ds, _ = generate_dataset(CausalGraph(["A"]), n=5)
    path = tmp_path / "a.npz"
    ds.save_npz(str(path))
    assert Dataset.load_npz(str(path)).seed is None
