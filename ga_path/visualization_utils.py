"""
Visualization utilities for the path-search GA.

Plots how the best and average path distance evolve over generations.
"""

from pathlib import Path
from typing import List, Tuple, Union

import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from .data_models import ProgressEvent


def plot_convergence(
    history: List[ProgressEvent],
    output_path: Union[str, Path],
    figsize: Tuple[int, int] = (10, 6)
) -> Path:
    """
    Save a line plot of best and average distance per generation.

    Args:
        history: Progress events in generation order
        output_path: Path to save PNG file
        figsize: Figure size (width, height) in inches

    Returns:
        Path to saved plot

    Raises:
        ValueError: If history is empty
    """
    if not history:
        raise ValueError("Cannot plot an empty history")

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    generations = [event.generation for event in history]
    best = [event.best_distance for event in history]
    average = [event.average_distance for event in history]

    fig, ax = plt.subplots(figsize=figsize)
    ax.plot(generations, best, 'o-', color='tab:green', label='Most fit path')
    ax.plot(generations, average, 's--', color='tab:blue', alpha=0.7, label='Population average')

    # Mark generations with mutations
    mutated = [event for event in history if event.mutations]
    if mutated:
        ax.scatter([e.generation for e in mutated], [e.best_distance for e in mutated],
                   marker='x', color='tab:red', zorder=3, label='Mutation occurred')

    ax.set_xlabel('Generation')
    ax.set_ylabel('Path distance')
    ax.set_title('GA Path Search Convergence')
    ax.grid(True, alpha=0.3)
    ax.legend()

    fig.tight_layout()
    fig.savefig(output_path, dpi=150)
    plt.close(fig)

    print(f"  Saved convergence plot: {output_path}")
    return output_path
