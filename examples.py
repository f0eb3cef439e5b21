"""Example usage of the ProbNet package.

This example demonstrates the core features of the ProbNet package including:
- Building a network and generating synthetic structure
- Topological ordering
- Learning CPTs from an observation stream
- Refining posterior estimates with an InferenceQuery
"""

import numpy as np

from probnet import (
    BayesianNetwork,
    InMemoryObservationSet,
    InferenceQuery,
    RandomVariable,
    StructureMode,
)
from probnet.inference.sampling import forward_sample
from probnet.networks.graph import attach_random_cpts, build_chain


def structure_example():
    """Demonstrate structure generation and ordering."""
    print("=" * 60)
    print("Structure Generation Example")
    print("=" * 60)

    network = BayesianNetwork("synthetic")
    for i in range(8):
        network.add_variable(RandomVariable(f"V{i}", ["lo", "hi"]))
    network.generate_structure(StructureMode.RANDOM, seed=3, parent_limit=2)

    print(f"\n   Edges: {network.edges}")
    order = network.get_topological_ordering(check=True)
    print(f"   Ordering: {[v.name for v in order]}")


def learning_example():
    """Demonstrate learning CPTs from sampled data."""
    print("\n" + "=" * 60)
    print("Distribution Learning Example")
    print("=" * 60)

    truth = build_chain(3, seed=0)
    order = truth.get_topological_ordering()
    rng = np.random.default_rng(1)
    rows = [forward_sample(truth, order, rng) for _ in range(2000)]

    learned = BayesianNetwork("learned")
    for name in ("X0", "X1", "X2"):
        learned.add_variable(RandomVariable(name))
    learned.add_edge("X0", "X1")
    learned.add_edge("X1", "X2")
    learned.learn_distributions(InMemoryObservationSet(rows))

    for name in ("X0", "X1", "X2"):
        true_cpt = truth.variable(name).cpt
        learned_cpt = learned.variable(name).cpt
        for inst, dist in sorted(true_cpt.items()):
            print(
                f"   P({name}=s0 | {inst}): true {dist.mass('s0'):.3f}, "
                f"learned {learned_cpt.mass(inst, 's0'):.3f}"
            )


def inference_example():
    """Demonstrate Gibbs-sampling inference with warm-up."""
    print("\n" + "=" * 60)
    print("Inference Example")
    print("=" * 60)

    network = BayesianNetwork("alarm")
    for name in ("Burglary", "Alarm", "Call"):
        network.add_variable(RandomVariable(name, ["yes", "no"]))
    network.add_edge("Burglary", "Alarm")
    network.add_edge("Alarm", "Call")
    attach_random_cpts(network, np.random.default_rng(4))

    query = InferenceQuery(network, {"Call": "yes"}, seed=5)
    for _ in range(5):
        query.refine_results(200)
        burglary = query.posterior("Burglary")
        print(
            f"   particles={query.particle_count:5d} "
            f"state={query.state.value:10s} "
            f"P(Burglary=yes | Call=yes) ~ {burglary.mass('yes'):.3f}"
        )


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("ProbNet Package Examples")
    print("=" * 60)

    structure_example()
    learning_example()
    inference_example()

    print("\n" + "=" * 60)
    print("Examples completed successfully!")
    print("=" * 60 + "\n")
