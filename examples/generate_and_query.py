from causal_primer import (
    CausalGraph,
    d_separated,
    generate_dataset,
    regress,
)

def main():
    # Exercise, motivation -> effort -> grade, with a possible unmodeled
    # common cause (ability) behind motivation and grade.
    g = CausalGraph(
        ["motivation", "effort", "grade"],
        [("motivation", "effort"), ("effort", "grade")],
        dashed=[("motivation", "grade")],
    )
    ds, scm = generate_dataset(g, n=5000, seed=0)

    print("Equations:")
    for eq in scm.equations():
        print("  ", eq)
    for p in g.paths("motivation", "grade"):
        print(f"path {p}: {'collider' if p.is_collider_path else 'active'}")

    S = ["effort"]
    print(f"motivation _||_ grade | {S} ? ", d_separated(g, ["motivation"], ["grade"], S))
    print(regress(ds.realization, "grade", on=["motivation", "effort"]).summary())

    # Holding effort fixed removes every route except the confounding one.
    done = scm.do(effort=1.0).sample(n=5000, seed=0)
    print(regress(done, "grade", on=["motivation"]).summary())

    ds.save_npz("example_dataset.npz")
    print("Saved example_dataset.npz")

if __name__ == "__main__":
    main()
