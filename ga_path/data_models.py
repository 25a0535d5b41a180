"""
Data models for the path-search GA.

Core data structures: the distance model wrapping the cost matrix, and the
progress events and run result emitted by the generation controller.
"""

from dataclasses import dataclass, field
from typing import Any, Iterable, List, Optional, Sequence as SequenceLike, Tuple

import numpy as np

# A candidate path: an ordered permutation of node indices
Sequence = Tuple[int, ...]
Population = List[Sequence]


class InvalidGraphError(ValueError):
    """Raised when a cost matrix is empty, non-square, or has invalid costs."""
    pass


@dataclass
class DistanceModel:
    """
    Directed cost matrix over N nodes.

    Attributes:
        costs: N x N integer array, costs[a, b] is the cost of travelling a -> b
        labels: Display label per node (defaults to the node index as text)
    """
    costs: np.ndarray
    labels: List[str] = field(default_factory=list)

    def __post_init__(self):
        """Validate the matrix shape and costs, and fill in default labels."""
        costs = np.asarray(self.costs)

        if costs.ndim != 2 or costs.shape[0] == 0:
            raise InvalidGraphError("Cost matrix must be a non-empty 2D matrix")

        if costs.shape[0] != costs.shape[1]:
            raise InvalidGraphError(
                f"Cost matrix must be square, got {costs.shape[0]}x{costs.shape[1]}"
            )

        if not np.issubdtype(costs.dtype, np.integer):
            raise InvalidGraphError(f"Costs must be integers, got dtype {costs.dtype}")

        if (costs < 0).any():
            raise InvalidGraphError("Costs must be non-negative")

        self.costs = costs.astype(np.int64)

        if not self.labels:
            self.labels = [str(i) for i in range(costs.shape[0])]
        elif len(self.labels) != costs.shape[0]:
            raise InvalidGraphError(
                f"Expected {costs.shape[0]} labels, got {len(self.labels)}"
            )

    @classmethod
    def from_rows(
        cls,
        rows: Iterable[SequenceLike[int]],
        labels: Optional[List[str]] = None
    ) -> "DistanceModel":
        """
        Build a model from nested rows of costs.

        Raises:
            InvalidGraphError: If the rows do not form a valid square matrix
        """
        rows = [list(row) for row in rows]

        if not rows:
            raise InvalidGraphError("Cost matrix has no rows")

        size = len(rows)
        for index, row in enumerate(rows):
            if len(row) != size:
                raise InvalidGraphError(
                    f"Row {index} has {len(row)} costs, expected {size}"
                )
            for value in row:
                if isinstance(value, bool) or not isinstance(value, (int, np.integer)):
                    raise InvalidGraphError(f"Row {index} has non-integer cost {value!r}")

        try:
            costs = np.array(rows, dtype=np.int64)
        except OverflowError:
            raise InvalidGraphError(
                f"Costs must fit in a 64-bit integer (max {np.iinfo(np.int64).max})"
            )

        return cls(costs=costs, labels=list(labels or []))

    @property
    def node_count(self) -> int:
        """Number of nodes N."""
        return int(self.costs.shape[0])

    def cost(self, origin: int, destination: int) -> int:
        """Cost of the directed edge origin -> destination."""
        return int(self.costs[origin, destination])

    def distance(self, sequence: SequenceLike[int]) -> int:
        """
        Total cost of walking the sequence in order.

        The path is open: no cost is added from the last node back to the first.
        Sequences of length 0 or 1 have distance 0. Edge costs are summed as
        Python ints so large costs cannot wrap around.
        """
        if len(sequence) < 2:
            return 0
        nodes = np.asarray(sequence, dtype=np.int64)
        return sum(self.costs[nodes[:-1], nodes[1:]].tolist())

    def label_path(self, sequence: SequenceLike[int]) -> List[str]:
        """Map a sequence of node indices to their labels."""
        return [self.labels[node] for node in sequence]


@dataclass
class ProgressEvent:
    """
    Snapshot of one ranked generation.

    Attributes:
        generation: Generation number (1 for the initial population)
        sequences: Ranked sequences, fittest first
        distances: Distance of each sequence, parallel to sequences
        average_distance: Mean distance over the population
        mutation_count: Cumulative number of mutation events so far
        mutations: Mutation events during this generation's mutation step
        duplicate_fallbacks: Children accepted as duplicates after the retry bound
    """
    generation: int
    sequences: Tuple[Sequence, ...]
    distances: Tuple[int, ...]
    average_distance: float
    mutation_count: int
    mutations: int = 0
    duplicate_fallbacks: int = 0

    @property
    def best_sequence(self) -> Sequence:
        return self.sequences[0]

    @property
    def best_distance(self) -> int:
        return self.distances[0]

    def to_dict(self) -> dict[str, Any]:
        """Flatten to a CSV-friendly row (sequences are omitted except the best)."""
        return {
            "generation": self.generation,
            "best_distance": self.best_distance,
            "average_distance": self.average_distance,
            "mutations": self.mutations,
            "mutation_count": self.mutation_count,
            "duplicate_fallbacks": self.duplicate_fallbacks,
            "best_sequence": " ".join(str(node) for node in self.best_sequence),
        }


@dataclass
class RunResult:
    """Outcome of a full GA run."""
    best_sequence: Sequence
    best_distance: int
    labeled_path: List[str]
    generations: int
    population_size: int
    mutation_count: int
    seed: Optional[int] = None
    history: List[ProgressEvent] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain types for YAML export."""
        return {
            "best_sequence": [int(node) for node in self.best_sequence],
            "best_distance": int(self.best_distance),
            "labeled_path": list(self.labeled_path),
            "generations": self.generations,
            "population_size": self.population_size,
            "mutation_count": self.mutation_count,
            "seed": self.seed,
        }
