"""
Human-readable reports for GA runs.

Formats the matrix preview, per-generation progress and the final summary.
The GA core only emits ProgressEvent objects; ConsoleReporter is the
listener that prints them.
"""

from typing import Sequence as SequenceLike
import numpy as np

from .data_models import DistanceModel, ProgressEvent, RunResult

LINE_BREAK = "X" + "-" * 54 + "X"


def format_sequence(items: SequenceLike) -> str:
    """Join sequence items as 'a, b, c'."""
    return ", ".join(str(item) for item in items)


def format_matrix_info(model: DistanceModel, rng: np.random.Generator, examples: int = 3) -> str:
    """
    Describe a freshly loaded matrix: node count and a few random rows.

    Args:
        model: Loaded distance model
        rng: Random number generator used only for picking example rows
        examples: Number of example rows to show

    Returns:
        Multi-line report string
    """
    lines = []
    lines.append(f"Number of Input Nodes: {model.node_count}")
    lines.append("")
    lines.append(f"{examples} examples of existing connections:")

    for _ in range(examples):
        node = int(rng.integers(0, model.node_count))
        lines.append(f"\t{model.labels[node]}:    {format_sequence(model.costs[node].tolist())}")

    return "\n".join(lines)


def format_progress(event: ProgressEvent) -> str:
    """Generate the report for one ranked generation."""
    lines = []
    lines.append(LINE_BREAK)
    lines.append(f"CURRENT GENERATION: #{event.generation}")
    lines.append("")

    if event.mutations:
        lines.append(f"! {event.mutations} mutation(s) occurred for Generation #{event.generation}!")
    if event.duplicate_fallbacks:
        lines.append(f"! {event.duplicate_fallbacks} duplicate child(ren) accepted")

    lines.append("Sequences (sorted from most fit to least fit):")
    for rank, sequence in enumerate(event.sequences, start=1):
        lines.append(f"{rank})\t\t{format_sequence(sequence)}")

    lines.append("")
    lines.append(f"| Distance of most Fit Path: \t{event.best_distance}")
    lines.append(f"| Average Path Length: \t{event.average_distance}")
    lines.append(f"| Mutation Count : \t{event.mutation_count}")

    return "\n".join(lines)


def format_summary(result: RunResult) -> str:
    """Generate the final shortest-path summary."""
    lines = []
    lines.append(LINE_BREAK)
    lines.append("")
    lines.append("SHORTEST PATH SUMMARY")
    lines.append("")
    lines.append("Shortest path's sequence of nodes")
    lines.append(f"\t{format_sequence(result.best_sequence)}")
    lines.append(f"\t{format_sequence(result.labeled_path)}")
    lines.append(f"| Shortest Path's length: {result.best_distance}")

    return "\n".join(lines)


class ConsoleReporter:
    """Progress listener printing each generation to stdout."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def __call__(self, event: ProgressEvent):
        if self.quiet:
            print(f"Generation #{event.generation}: best={event.best_distance}, "
                  f"average={event.average_distance:.2f}")
        else:
            print(format_progress(event))
