"""
Crossover operators for the path-search GA.

Implements splice crossover (alternating runs copied positionally from two
parents), duplicate repair restoring the permutation, and the population-level
breeding step with elitism and a shrinking per-parent child quota.
"""

import logging
from typing import List, Set, Tuple
import numpy as np

from .data_models import Population, Sequence

logger = logging.getLogger(__name__)

DEFAULT_MAX_BREED_ATTEMPTS = 1000

# Upper bound (exclusive) of a single run copied from one parent
MAX_RUN_LENGTH = 4


def splice_parents(
    parent_a: Sequence,
    parent_b: Sequence,
    rng: np.random.Generator
) -> List[int]:
    """
    Combine two parents by copying alternating runs of 0-3 positions.

    A single draw picks the first active parent (1 -> parent_a, 0 -> parent_b).
    Each run copies min(remaining, randint[0, 3]) elements from the active
    parent at the shared position cursor, then the other parent becomes active.
    A run of length 0 only switches parents; the last run is truncated to fit.

    Args:
        parent_a: First parent
        parent_b: Second parent (same length as parent_a)
        rng: Random number generator

    Returns:
        Child of len(parent_a) elements. It usually contains duplicates and
        must go through fix_duplicates() before use.
    """
    length = len(parent_a)
    child: List[int] = []
    position = 0
    selector = int(rng.integers(0, 2))

    while len(child) != length:
        active = parent_a if selector % 2 == 1 else parent_b
        run_length = min(length - len(child), int(rng.integers(0, MAX_RUN_LENGTH)))

        child.extend(active[position:position + run_length])
        position += run_length
        selector += 1

    return child


def fix_duplicates(child: List[int], node_count: int) -> List[int]:
    """
    Restore the permutation invariant of a spliced child.

    Scans left to right: the first occurrence of a node is kept, every repeat
    (or out-of-range value) marks a repair position. Repair positions are then
    filled, in scan order, with the missing nodes in ascending order.

    Args:
        child: Candidate child, possibly with repeats
        node_count: Size of the node domain N

    Returns:
        New list that is a permutation of [0, node_count)

    Example:
        fix_duplicates([0, 0, 2, 3], 4) -> [0, 1, 2, 3]
    """
    missing: Set[int] = set(range(node_count))
    repair_positions = []

    for position, node in enumerate(child):
        if node in missing:
            missing.remove(node)
        else:
            repair_positions.append(position)

    repaired = list(child)
    for position, node in zip(repair_positions, sorted(missing)):
        repaired[position] = node

    return repaired


def breed(parent_a: Sequence, parent_b: Sequence, rng: np.random.Generator) -> Sequence:
    """Splice two parents and repair the result into a valid sequence."""
    child = splice_parents(parent_a, parent_b, rng)
    return tuple(fix_duplicates(child, len(parent_a)))


def _pick_partner(starting_index: int, size: int, rng: np.random.Generator) -> int:
    """Draw a uniformly random population index different from starting_index."""
    while True:
        partner = int(rng.integers(0, size))
        if partner != starting_index:
            return partner


def _breed_distinct_child(
    population: Population,
    starting_index: int,
    existing_children: Set[Sequence],
    rng: np.random.Generator,
    max_attempts: int
) -> Tuple[Sequence, bool]:
    """
    Breed one child for the parent at starting_index, rejecting repeats.

    Returns:
        Tuple of (child, is_distinct). When every attempt produced a child
        already in existing_children, the last candidate is returned with
        is_distinct=False.
    """
    parent = population[starting_index]
    child = parent

    for _ in range(max_attempts):
        partner = _pick_partner(starting_index, len(population), rng)
        child = breed(parent, population[partner], rng)
        if child not in existing_children:
            return child, True

    return child, False


def crossover(
    population: Population,
    rng: np.random.Generator,
    max_attempts: int = DEFAULT_MAX_BREED_ATTEMPTS
) -> Tuple[Population, int]:
    """
    Produce the next generation from a ranked population.

    The fittest sequence is carried over unchanged into slot 0. Parents are
    then taken in rank order: the parent at the starting index breeds
    `value_cap` children with random partners, starting at max(S // 3, 1)
    children for the fittest parent and halving (floor 1) for each
    following parent, until the new population has S members. Children
    identical to one already produced in this call are re-bred, up to
    max_attempts times per child.

    Args:
        population: Ranked population, fittest first (size >= 2)
        rng: Random number generator
        max_attempts: Breeding attempts per child before a duplicate is accepted

    Returns:
        Tuple of (new_population, duplicate_fallbacks)

    Raises:
        ValueError: If the population has fewer than 2 members or
            max_attempts < 1
    """
    size = len(population)
    if size < 2:
        raise ValueError(f"Need at least 2 sequences for crossover, got {size}")
    if max_attempts < 1:
        raise ValueError(f"max_attempts must be at least 1, got {max_attempts}")

    new_population: Population = [population[0]]
    existing_children: Set[Sequence] = set()
    value_cap = max(size // 3, 1)
    starting_index = 0
    duplicate_fallbacks = 0

    while len(new_population) < size:
        quota = min(value_cap, size - len(new_population))

        for _ in range(quota):
            child, is_distinct = _breed_distinct_child(
                population, starting_index, existing_children, rng, max_attempts
            )
            if not is_distinct:
                duplicate_fallbacks += 1
                logger.warning(
                    f"No distinct child for parent {starting_index} after "
                    f"{max_attempts} attempts, accepting duplicate {child}"
                )

            existing_children.add(child)
            new_population.append(child)

        if value_cap > 1:
            value_cap = max(value_cap // 2, 1)
        starting_index += 1

    return new_population, duplicate_fallbacks
