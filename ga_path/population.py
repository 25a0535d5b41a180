"""
Population utilities for the path-search GA.

Random initial population, fitness (distance) evaluation, and stable ranking.
"""

from typing import List
import numpy as np

from .data_models import DistanceModel, Population, Sequence


def generate_random_sequence(node_count: int, rng: np.random.Generator) -> Sequence:
    """
    Draw one uniformly random permutation of [0, node_count).

    Repeatedly picks a random index into the shrinking pool of available
    nodes and moves that node to the end of the sequence.

    Args:
        node_count: Number of nodes N
        rng: Random number generator

    Returns:
        Sequence containing every node exactly once
    """
    available = list(range(node_count))
    sequence = []

    while available:
        index = int(rng.integers(0, len(available)))
        sequence.append(available.pop(index))

    return tuple(sequence)


def generate_initial_population(
    node_count: int,
    size: int,
    rng: np.random.Generator
) -> Population:
    """
    Build the first generation of random sequences.

    Args:
        node_count: Number of nodes N
        size: Population size S
        rng: Random number generator shared by all draws

    Returns:
        List of S random sequences
    """
    return [generate_random_sequence(node_count, rng) for _ in range(size)]


def distance(sequence: Sequence, model: DistanceModel) -> int:
    """Total open-path cost of a sequence (lower is fitter)."""
    return model.distance(sequence)


def average_distance(population: Population, model: DistanceModel) -> float:
    """Mean distance over a population."""
    if not population:
        return 0.0
    return sum(model.distance(sequence) for sequence in population) / len(population)


def rank_population(population: Population, model: DistanceModel) -> Population:
    """
    Sort a population in place, fittest (shortest) first.

    The sort is stable: sequences with equal distance keep their order.

    Returns:
        The same list, for chaining
    """
    population.sort(key=model.distance)
    return population


def is_valid_sequence(sequence: Sequence, node_count: int) -> bool:
    """Check that a sequence is a permutation of [0, node_count)."""
    return len(sequence) == node_count and sorted(sequence) == list(range(node_count))


def population_distances(population: Population, model: DistanceModel) -> List[int]:
    return [model.distance(sequence) for sequence in population]
