"""
Tests for GA operations: population, distance, ranking, crossover, and mutation.
"""

import itertools
import unittest
from unittest.mock import patch
import numpy as np

from ga_path.data_models import DistanceModel
from ga_path.population import (
    average_distance,
    distance,
    generate_initial_population,
    generate_random_sequence,
    is_valid_sequence,
    rank_population,
)
from ga_path.crossover import (
    breed,
    crossover,
    fix_duplicates,
    splice_parents,
)
from ga_path.mutation import (
    mutate,
    mutation_rate,
    swap_halves,
)
from tests.test_ga_path.ga_test_utils import ScriptedRng, random_model


class TestPopulation(unittest.TestCase):
    """Test initial population generation."""

    def setUp(self):
        self.rng = np.random.default_rng(42)

    def test_random_sequence_draws_from_shrinking_pool(self):
        """Test each draw indexes into the remaining pool."""
        rng = ScriptedRng([2, 0, 0])

        sequence = generate_random_sequence(3, rng)

        self.assertEqual(sequence, (2, 0, 1))
        self.assertEqual(rng.calls, [(0, 3), (0, 2), (0, 1)])

    def test_initial_population_is_valid(self):
        """Test every initial sequence is a permutation."""
        population = generate_initial_population(7, 30, self.rng)

        self.assertEqual(len(population), 30)
        for sequence in population:
            self.assertTrue(is_valid_sequence(sequence, 7))

    def test_single_node_population(self):
        """Test N=1 produces the trivial sequence."""
        population = generate_initial_population(1, 4, self.rng)
        self.assertEqual(population, [(0,)] * 4)

    def test_initial_population_reproducible(self):
        """Test equal seeds give equal populations."""
        first = generate_initial_population(6, 10, np.random.default_rng(310))
        second = generate_initial_population(6, 10, np.random.default_rng(310))
        self.assertEqual(first, second)


class TestDistance(unittest.TestCase):
    """Test fitness evaluation."""

    def setUp(self):
        self.model = DistanceModel.from_rows([
            [0, 10, 99],
            [99, 0, 35],
            [99, 99, 0],
        ])

    def test_distance_formula(self):
        """Test distance sums consecutive edge costs."""
        self.assertEqual(distance((0, 1, 2), self.model), 45)

    def test_open_path(self):
        """Test no cost is added from the last node back to the first."""
        # closing edge 2 -> 0 costs 99 and must not be counted
        self.assertEqual(distance((0, 1, 2), self.model), 10 + 35)

    def test_directed_costs(self):
        """Test reversed path uses reverse edge costs."""
        self.assertEqual(distance((2, 1, 0), self.model), 99 + 99)

    def test_short_sequences(self):
        """Test length 0 and 1 sequences have zero distance."""
        self.assertEqual(distance((1,), self.model), 0)
        self.assertEqual(distance((), self.model), 0)

    def test_average_distance(self):
        """Test population average."""
        population = [(0, 1, 2), (2, 1, 0)]
        self.assertEqual(average_distance(population, self.model), (45 + 198) / 2)


class TestRanking(unittest.TestCase):
    """Test population ranking."""

    def setUp(self):
        self.model = DistanceModel.from_rows([
            [0, 1, 5],
            [1, 0, 1],
            [5, 1, 0],
        ])

    def test_rank_ascending_and_stable(self):
        """Test sort order and stability for equal distances."""
        population = [(1, 0, 2), (0, 1, 2), (0, 2, 1), (2, 1, 0)]

        ranked = rank_population(population, self.model)

        self.assertIs(ranked, population)
        self.assertEqual(population, [(0, 1, 2), (2, 1, 0), (1, 0, 2), (0, 2, 1)])

    def test_rank_random_population(self):
        """Test distances are non-decreasing after ranking."""
        model = random_model(8, seed=3)
        population = generate_initial_population(8, 40, np.random.default_rng(1))

        rank_population(population, model)

        distances = [model.distance(sequence) for sequence in population]
        self.assertEqual(distances, sorted(distances))


class TestSpliceCrossover(unittest.TestCase):
    """Test splice crossover and duplicate repair."""

    def setUp(self):
        self.parent_a = (0, 1, 2, 3)
        self.parent_b = (3, 2, 1, 0)

    def test_splice_parent_a_first_with_empty_run(self):
        """Test a zero-length run only switches the active parent."""
        rng = ScriptedRng([1, 2, 0, 3])

        child = splice_parents(self.parent_a, self.parent_b, rng)

        # A copies [0, 1], B copies nothing, A copies min(2, 3) = 2 -> [2, 3]
        self.assertEqual(child, [0, 1, 2, 3])
        self.assertEqual(rng.calls, [(0, 2), (0, 4), (0, 4), (0, 4)])

    def test_splice_parent_b_first_truncates_last_run(self):
        """Test runs alternate from parent B and the last run is truncated."""
        rng = ScriptedRng([0, 1, 1, 3])

        child = splice_parents(self.parent_a, self.parent_b, rng)

        # B[0] = 3, A[1] = 1, B[2:4] = [1, 0] (run of 3 truncated to 2)
        self.assertEqual(child, [3, 1, 1, 0])

    def test_breed_repairs_spliced_child(self):
        """Test breed returns the repaired child as a tuple."""
        rng = ScriptedRng([0, 1, 1, 3])

        child = breed(self.parent_a, self.parent_b, rng)

        self.assertEqual(child, (3, 1, 2, 0))

    def test_fix_duplicates_single(self):
        """Test the missing node fills the repeated position."""
        self.assertEqual(fix_duplicates([0, 0, 2, 3], 4), [0, 1, 2, 3])

    def test_fix_duplicates_ascending_fill(self):
        """Test repair positions get missing nodes in ascending order."""
        self.assertEqual(fix_duplicates([1, 1, 1, 0], 4), [1, 2, 3, 0])

    def test_fix_duplicates_valid_unchanged(self):
        """Test a valid permutation is returned unchanged and input is not modified."""
        child = [2, 0, 3, 1]
        repaired = fix_duplicates(child, 4)

        self.assertEqual(repaired, [2, 0, 3, 1])
        self.assertIsNot(repaired, child)

        duplicate = [0, 0, 2, 3]
        fix_duplicates(duplicate, 4)
        self.assertEqual(duplicate, [0, 0, 2, 3])

    def test_breed_always_valid(self):
        """Test bred children are permutations for random parents."""
        rng = np.random.default_rng(5)
        for node_count in (1, 2, 3, 9):
            for _ in range(50):
                parent_a = generate_random_sequence(node_count, rng)
                parent_b = generate_random_sequence(node_count, rng)
                child = breed(parent_a, parent_b, rng)
                self.assertTrue(is_valid_sequence(child, node_count))


class TestPopulationCrossover(unittest.TestCase):
    """Test population-level breeding."""

    def setUp(self):
        self.rng = np.random.default_rng(42)
        self.model = random_model(6, seed=11)
        self.population = rank_population(
            generate_initial_population(6, 10, self.rng), self.model
        )

    def test_elitism_and_size(self):
        """Test the fittest sequence is carried over and size is kept."""
        new_population, fallbacks = crossover(self.population, self.rng)

        self.assertIs(new_population[0], self.population[0])
        self.assertEqual(len(new_population), len(self.population))
        self.assertEqual(fallbacks, 0)

    def test_children_valid_and_distinct(self):
        """Test children are permutations and no child repeats."""
        new_population, _ = crossover(self.population, self.rng)

        children = new_population[1:]
        for child in children:
            self.assertTrue(is_valid_sequence(child, 6))
        self.assertEqual(len(set(children)), len(children))

    def test_parent_schedule(self):
        """Test the per-parent quota starts at S // 3 and halves down to 1."""
        population = [tuple(p) for p in itertools.islice(itertools.permutations(range(4)), 12)]
        calls = []
        counter = itertools.count()

        def fake_breed(parent_a, parent_b, rng):
            calls.append((population.index(parent_a), population.index(parent_b)))
            return (next(counter),)

        with patch('ga_path.crossover.breed', side_effect=fake_breed):
            new_population, _ = crossover(population, self.rng)

        self.assertEqual(len(new_population), 12)
        parents = [parent for parent, _ in calls]
        self.assertEqual(parents, [0, 0, 0, 0, 1, 1, 2, 3, 4, 5, 6])
        for parent, partner in calls:
            self.assertNotEqual(parent, partner)

    def test_duplicate_child_is_rebred(self):
        """Test a child equal to an accepted child is rejected."""
        population = [(0, 1, 2), (1, 2, 0), (2, 0, 1)]
        children = [(1, 0, 2), (1, 0, 2), (2, 1, 0)]

        with patch('ga_path.crossover.breed', side_effect=children) as mock_breed:
            new_population, fallbacks = crossover(population, self.rng)

        self.assertEqual(new_population, [(0, 1, 2), (1, 0, 2), (2, 1, 0)])
        self.assertEqual(mock_breed.call_count, 3)
        self.assertEqual(fallbacks, 0)

    def test_livelock_bounded(self):
        """Test tiny search spaces terminate by accepting duplicates."""
        rng = np.random.default_rng(0)
        population = [(0, 1), (1, 0), (0, 1), (1, 0), (0, 1), (1, 0)]

        with self.assertLogs('ga_path.crossover', level='WARNING'):
            new_population, fallbacks = crossover(population, rng, max_attempts=5)

        self.assertEqual(len(new_population), 6)
        # only two distinct orderings exist for five children
        self.assertGreaterEqual(fallbacks, 3)
        for sequence in new_population:
            self.assertTrue(is_valid_sequence(sequence, 2))

    def test_invalid_arguments(self):
        """Test undersized populations and attempt bounds are rejected."""
        with self.assertRaises(ValueError):
            crossover([(0, 1)], self.rng)
        with self.assertRaises(ValueError):
            crossover(self.population, self.rng, max_attempts=0)


class TestMutation(unittest.TestCase):
    """Test mutation operators."""

    def test_mutation_rate(self):
        self.assertEqual(mutation_rate(10), 10.0)
        self.assertEqual(mutation_rate(25), 4.0)
        self.assertAlmostEqual(mutation_rate(3), 100 / 3)

    def test_threshold_is_inclusive(self):
        """Test a draw equal to the rate mutates and the next value does not."""
        population = [(0, 1, 2, 3, 4, 5)] * 10
        # individual 0: draw 10 -> swap positions 0 and 2 + 3; individual 1: draw 11
        rng = ScriptedRng([10, 0, 2, 11] + [99] * 8)

        mutated = mutate(population, rng)

        self.assertEqual(mutated, 1)
        self.assertEqual(population[0], (5, 1, 2, 3, 4, 0))
        self.assertEqual(population[1], (0, 1, 2, 3, 4, 5))
        self.assertEqual(rng.values, [])

    def test_mutation_count_matches_swaps(self):
        """Test the return value equals the number of mutated individuals."""
        population = [(0, 1, 2, 3)] * 4
        # rate 25: draws 0, 25 mutate; 26, 99 do not
        rng = ScriptedRng([0, 1, 0, 26, 25, 0, 1, 99])

        mutated = mutate(population, rng)

        self.assertEqual(mutated, 2)
        self.assertEqual(population[0], (0, 2, 1, 3))
        self.assertEqual(population[1], (0, 1, 2, 3))
        self.assertEqual(population[2], (3, 1, 2, 0))

    def test_swap_halves_odd_length(self):
        """Test positions come from [0, half) and [half, 2 * half)."""
        rng = ScriptedRng([1, 1])

        swapped = swap_halves((0, 1, 2, 3, 4), rng)

        self.assertEqual(swapped, (0, 3, 2, 1, 4))
        self.assertEqual(rng.calls, [(0, 2), (0, 2)])

    def test_swap_halves_single_node(self):
        """Test length-1 sequences are unchanged and draw nothing."""
        rng = ScriptedRng([])
        self.assertEqual(swap_halves((0,), rng), (0,))

    def test_mutation_keeps_permutations(self):
        """Test mutated sequences remain valid."""
        rng = np.random.default_rng(9)
        population = generate_initial_population(7, 5, rng)

        total = 0
        for _ in range(50):
            total += mutate(population, rng)

        self.assertGreater(total, 0)
        for sequence in population:
            self.assertTrue(is_valid_sequence(sequence, 7))


if __name__ == '__main__':
    unittest.main()
