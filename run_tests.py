#!/usr/bin/env python3
"""
Test runner for the GA path search package
"""

import unittest
import sys
from pathlib import Path

# Add current directory to path for imports
sys.path.insert(0, str(Path(__file__).parent))


def run_all_tests():
    """Discover and run every test module under tests/"""
    loader = unittest.TestLoader()
    suite = loader.discover(
        start_dir=str(Path(__file__).parent / "tests"),
        top_level_dir=str(Path(__file__).parent)
    )

    runner = unittest.TextTestRunner(verbosity=2)
    result = runner.run(suite)

    return result.wasSuccessful()


def run_integration_test():
    """Run a short end-to-end search on the example graph"""
    print("\n" + "=" * 50)
    print("INTEGRATION TEST")
    print("=" * 50)

    from ga_path.io_utils import load_graph_csv
    from ga_path.orchestration import run_search
    from ga_path.population import is_valid_sequence

    model = load_graph_csv(Path(__file__).parent / "examples" / "matrix.csv")
    result = run_search(model, population_size=25, generations=20, seed=310)

    print(f"Best distance: {result.best_distance}")
    print(f"Best path: {' -> '.join(result.labeled_path)}")

    success = (
        is_valid_sequence(result.best_sequence, model.node_count) and
        len(result.history) == 20 and
        result.best_distance == result.history[-1].best_distance
    )

    print("✓ Integration test PASSED" if success else "✗ Integration test FAILED")
    return success


if __name__ == "__main__":
    print("Running GA Path Search Tests")
    print("=" * 60)

    unit_success = run_all_tests()
    integration_success = run_integration_test()

    print("\n" + "=" * 60)
    print("TEST SUMMARY")
    print("=" * 60)
    print(f"Unit tests: {'PASSED' if unit_success else 'FAILED'}")
    print(f"Integration test: {'PASSED' if integration_success else 'FAILED'}")

    sys.exit(0 if unit_success and integration_success else 1)
