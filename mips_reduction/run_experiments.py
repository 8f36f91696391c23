"""Entry point: test dataset, queries, and experiment execution."""

import logging

from mips_reduction.experiments import ExperimentRunner


# --------------------------------------------------------------------------
# Test dataset: 20 vectors in 4 clusters, 8 dimensions, uneven norms
# --------------------------------------------------------------------------

# Norms deliberately differ within each cluster: a long vector pointing
# slightly away from the query can beat a short one pointing right at it,
# which is where MIP and cosine/NN rankings disagree.

DATASET = [
    # cluster A
    [0.9, 0.3, 0.1, 0.0, 0.1, 0.0, 0.4, 0.1],
    [1.6, 1.8, 0.2, 0.0, 0.0, 0.2, 0.4, 0.6],
    [0.45, 0.2, 0.0, 0.0, 0.05, 0.0, 0.15, 0.1],
    [2.4, 1.5, 0.0, 0.0, 0.0, 0.3, 0.9, 0.0],
    [0.9, 0.7, 0.1, 0.0, 0.0, 0.0, 0.2, 0.3],
    # cluster B
    [0.1, 0.0, 0.9, 0.8, 0.0, 0.0, 0.2, 0.1],
    [0.3, 0.0, 2.4, 2.7, 0.0, 0.0, 0.9, 0.0],
    [0.05, 0.0, 0.4, 0.35, 0.0, 0.0, 0.1, 0.0],
    [0.4, 0.0, 1.8, 1.2, 0.0, 0.0, 0.2, 0.2],
    [0.2, 0.0, 0.8, 0.7, 0.0, 0.0, 0.2, 0.0],
    # cluster C
    [0.0, 0.0, 0.1, 0.0, 0.9, 0.2, 0.0, 0.0],
    [0.0, 0.0, 0.3, 0.0, 2.7, 0.9, 0.0, 0.0],
    [0.0, 0.0, 0.15, 0.05, 0.45, 0.05, 0.0, 0.0],
    [0.0, 0.0, 0.0, 0.0, 1.8, 0.6, 0.0, 0.0],
    [0.0, 0.0, 0.1, 0.0, 0.8, 0.9, 0.0, 0.0],
    # mixed
    [0.3, 0.3, 0.7, 0.5, 0.1, 0.0, 0.2, 0.9],
    [0.6, 0.6, 2.4, 1.8, 0.0, 0.0, 0.9, 2.4],
    [0.15, 0.05, 0.1, 0.1, 0.0, 0.0, 0.45, 0.05],
    [-0.4, -0.1, 0.5, 0.4, 0.0, 0.0, 0.8, 0.2],
    [0.2, 0.1, 0.3, 0.2, 0.0, 0.0, 0.3, 0.9],
]


QUERIES = [
    {"name": "cluster-a", "vector": [0.9, 0.5, 0.1, 0.0, 0.0, 0.0, 0.3, 0.2]},
    {"name": "cluster-b", "vector": [0.1, 0.0, 0.9, 0.6, 0.0, 0.0, 0.1, 0.3]},
    {"name": "cluster-c", "vector": [0.0, 0.0, 0.0, 0.0, 0.9, 0.3, 0.0, 0.0]},
    {"name": "mixed", "vector": [0.4, 0.2, 0.3, 0.1, 0.4, 0.2, 0.2, 0.2]},
    {"name": "negative", "vector": [-0.5, -0.2, 0.1, 0.0, -0.3, 0.0, 0.6, 0.1]},
    {"name": "tiny", "vector": [0.01, 0.0, 0.02, 0.0, 0.0, 0.0, 0.0, 0.01]},
]


def main():
    """Run all experiments and print results."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")
    runner = ExperimentRunner(DATASET, QUERIES, ratio=2.0, top_k=5)
    results = runner.run_all()

    print("=" * 72)
    print("MIP-to-NN Reduction Experimental Validation")
    print("=" * 72)
    print()
    print("Dataset: %d vectors, d=%d, M=%.4f" % (
        len(DATASET), runner.dimension, runner.max_norm
    ))
    print("Queries: %d" % len(QUERIES))
    print()

    all_passed = True
    for name, passed, details in results:
        status = "PASS" if passed else "FAIL"
        if not passed:
            all_passed = False
        print("-" * 72)
        print("[%s] %s" % (status, name))
        for line in details.split("\n"):
            print("       %s" % line)
        print()

    print("=" * 72)
    if all_passed:
        print("All %d experiments PASSED." % len(results))
    else:
        failed = [name for name, passed, _ in results if not passed]
        print("FAILED experiments: %s" % ", ".join(failed))
    print("=" * 72)
    return 0 if all_passed else 1


if __name__ == "__main__":
    raise SystemExit(main())
