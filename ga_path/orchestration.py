"""
Orchestration module for the path-search GA.

Runs the generation loop: initial population, then repeated
crossover -> mutation -> ranking until the target generation, emitting a
progress event after every ranking.
"""

import logging
from enum import Enum
from typing import Callable, Iterable, List, Optional
import numpy as np

from .data_models import DistanceModel, Population, ProgressEvent, RunResult
from .population import generate_initial_population, population_distances, rank_population
from .crossover import DEFAULT_MAX_BREED_ATTEMPTS, crossover
from .mutation import mutate

logger = logging.getLogger(__name__)

ProgressListener = Callable[[ProgressEvent], None]


class InvalidPopulationSizeError(ValueError):
    """Raised when the population size is below 2."""
    pass


class InvalidGenerationCountError(ValueError):
    """Raised when the generation count is below 1."""
    pass


class ControllerState(Enum):
    """Phases of the generation loop."""
    INITIALIZING = "initializing"
    EVALUATING = "evaluating"
    BREEDING = "breeding"
    MUTATING = "mutating"
    TERMINAL = "terminal"


class GenerationController:
    """
    Drives a single GA run over a distance model.

    The controller owns the run state (population, generation counter,
    cumulative mutation count and history); all randomness comes from the
    injected generator, so equal seeds give identical runs.
    """

    def __init__(self,
                 model: DistanceModel,
                 population_size: int,
                 generations: int,
                 rng: np.random.Generator,
                 max_breed_attempts: int = DEFAULT_MAX_BREED_ATTEMPTS,
                 listeners: Iterable[ProgressListener] = ()):
        if population_size < 2:
            raise InvalidPopulationSizeError(
                f"Population size must be at least 2, got {population_size}"
            )
        if generations < 1:
            raise InvalidGenerationCountError(
                f"Generation count must be at least 1, got {generations}"
            )

        self.model = model
        self.population_size = population_size
        self.generations = generations
        self.rng = rng
        self.max_breed_attempts = max_breed_attempts
        self.listeners: List[ProgressListener] = list(listeners)

        self.state = ControllerState.INITIALIZING
        self.generation = 0
        self.mutation_count = 0
        self.population: Population = []
        self.history: List[ProgressEvent] = []

    def run(self, seed: Optional[int] = None) -> RunResult:
        """
        Execute all generations and return the best sequence found.

        Args:
            seed: Seed the generator was built from, recorded in the result

        Returns:
            RunResult with the fittest sequence of the final generation
        """
        self.state = ControllerState.INITIALIZING
        self.history = []
        self.population = generate_initial_population(
            self.model.node_count, self.population_size, self.rng
        )
        self.generation = 1
        self._evaluate(mutations=0, duplicate_fallbacks=0)

        while self.generation < self.generations:
            self.state = ControllerState.BREEDING
            self.population, duplicate_fallbacks = crossover(
                self.population, self.rng, self.max_breed_attempts
            )
            self.generation += 1

            self.state = ControllerState.MUTATING
            mutations = mutate(self.population, self.rng, self.generation)
            self.mutation_count += mutations

            self._evaluate(mutations, duplicate_fallbacks)

        self.state = ControllerState.TERMINAL
        best = self.population[0]
        best_distance = self.model.distance(best)
        logger.info(f"Finished {self.generations} generations, best distance {best_distance}")

        return RunResult(
            best_sequence=best,
            best_distance=best_distance,
            labeled_path=self.model.label_path(best),
            generations=self.generation,
            population_size=self.population_size,
            mutation_count=self.mutation_count,
            seed=seed,
            history=list(self.history),
        )

    def _evaluate(self, mutations: int, duplicate_fallbacks: int) -> ProgressEvent:
        """Rank the population and publish a progress event."""
        self.state = ControllerState.EVALUATING
        rank_population(self.population, self.model)

        distances = population_distances(self.population, self.model)
        event = ProgressEvent(
            generation=self.generation,
            sequences=tuple(self.population),
            distances=tuple(distances),
            average_distance=sum(distances) / len(distances),
            mutation_count=self.mutation_count,
            mutations=mutations,
            duplicate_fallbacks=duplicate_fallbacks,
        )
        self.history.append(event)
        logger.debug(
            f"Generation {event.generation}: best={event.best_distance}, "
            f"average={event.average_distance:.2f}, mutations={self.mutation_count}"
        )

        for listener in self.listeners:
            listener(event)

        return event


def run_search(
    model: DistanceModel,
    population_size: int,
    generations: int,
    seed: Optional[int] = None,
    rng: Optional[np.random.Generator] = None,
    listeners: Iterable[ProgressListener] = (),
    max_breed_attempts: int = DEFAULT_MAX_BREED_ATTEMPTS
) -> RunResult:
    """
    Convenience wrapper: build a controller and run it.

    Args:
        model: Distance model to search over
        population_size: Population size S (>= 2)
        generations: Number of generations (>= 1)
        seed: Seed for np.random.default_rng when rng is not given
        rng: Explicit random number generator (takes precedence over seed)
        listeners: Callables receiving each ProgressEvent
        max_breed_attempts: Breeding attempts per child before accepting a duplicate

    Returns:
        RunResult of the run
    """
    if rng is None:
        rng = np.random.default_rng(seed)

    controller = GenerationController(
        model,
        population_size,
        generations,
        rng,
        max_breed_attempts=max_breed_attempts,
        listeners=listeners,
    )
    return controller.run(seed=seed)
