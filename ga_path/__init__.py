"""
Genetic-algorithm path search over a directed cost matrix.

This package searches for a short (not necessarily shortest) ordering of
nodes given pairwise directed travel costs. A population of candidate
sequences is repeatedly ranked, bred and mutated; the best sequence of the
final generation is reported.

Modules:
- data_models: DistanceModel, ProgressEvent, RunResult
- population: Random initial population, distance evaluation, ranking
- crossover: Splice crossover, duplicate repair, population breeding
- mutation: Half-swap mutation
- orchestration: GenerationController and run_search()
- io_utils: Graph CSV loading, history/result export
- reporting: Console progress and summary reports
- visualization_utils: Convergence plot
- cli: Run configuration, prompting, and command-line entry point
"""

__version__ = "0.1.0"
__author__ = "Path Search Team"

from .data_models import DistanceModel, InvalidGraphError, ProgressEvent, RunResult
from .orchestration import (
    GenerationController,
    InvalidGenerationCountError,
    InvalidPopulationSizeError,
    run_search,
)

__all__ = [
    "DistanceModel",
    "InvalidGraphError",
    "ProgressEvent",
    "RunResult",
    "GenerationController",
    "InvalidGenerationCountError",
    "InvalidPopulationSizeError",
    "run_search",
]
