"""
Mutation operators for the path-search GA.

Each individual mutates with probability derived from the population size;
a mutation swaps one node from the first half of the sequence with one node
from the second half.
"""

import logging
import numpy as np

from .data_models import Population, Sequence

logger = logging.getLogger(__name__)


def mutation_rate(population_size: int) -> float:
    """
    Mutation threshold for a population: 100 / S.

    A draw v in [0, 99] mutates when v <= rate, so S = 10 gives an
    11-outcome window out of 100.
    """
    return 100.0 / population_size


def swap_halves(sequence: Sequence, rng: np.random.Generator) -> Sequence:
    """
    Swap a random position in the first half with one in the second half.

    Args:
        sequence: Sequence to mutate
        rng: Random number generator

    Returns:
        New sequence with the two positions exchanged. Sequences shorter
        than 2 are returned unchanged without drawing.
    """
    half = len(sequence) // 2
    if half == 0:
        return tuple(sequence)

    first = int(rng.integers(0, half))
    second = int(rng.integers(0, half)) + half

    mutated = list(sequence)
    mutated[first], mutated[second] = mutated[second], mutated[first]
    return tuple(mutated)


def mutate(population: Population, rng: np.random.Generator, generation: int = 0) -> int:
    """
    Probabilistically mutate a population in place.

    Every individual gets one draw in [0, 99]; draws at or below
    mutation_rate(len(population)) replace the individual with a
    swap_halves() variant. Any number of individuals (including none)
    may mutate in one call.

    Args:
        population: Population to mutate (list is modified in place)
        rng: Random number generator
        generation: Generation number, only used for logging

    Returns:
        Number of individuals mutated
    """
    rate = mutation_rate(len(population))
    mutated_count = 0

    for index, sequence in enumerate(population):
        if int(rng.integers(0, 100)) <= rate:
            population[index] = swap_halves(sequence, rng)
            mutated_count += 1
            logger.debug(f"Mutation in generation {generation}: {sequence} -> {population[index]}")

    return mutated_count
