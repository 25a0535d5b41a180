"""
I/O utilities for the path-search GA.

Handles graph CSV parsing, configuration loading, and export of run history
and results.
"""

import csv
from pathlib import Path
from typing import List, Optional, Union
import yaml

from .data_models import DistanceModel, InvalidGraphError, ProgressEvent, RunResult

HISTORY_FIELDS = [
    'generation', 'best_distance', 'average_distance', 'mutations',
    'mutation_count', 'duplicate_fallbacks', 'best_sequence'
]


def load_graph_csv(csv_path: Union[str, Path]) -> DistanceModel:
    """
    Load a weighted graph file into a DistanceModel.

    File format (no header, one row per node):
        A,0,10,20
        B,10,0,35
        C,20,35,0

    The first cell is the node label, the remaining N cells are the costs
    from that node to every node in file order.

    Args:
        csv_path: Path to graph file

    Returns:
        DistanceModel with labels and costs

    Raises:
        FileNotFoundError: If the file doesn't exist
        InvalidGraphError: If the matrix is empty, non-square or has invalid costs
    """
    csv_path = Path(csv_path)

    if not csv_path.exists():
        raise FileNotFoundError(f"Graph file not found: {csv_path}")

    labels = []
    rows = []
    with open(csv_path, 'r', newline='') as f:
        reader = csv.reader(f)

        for line_number, row in enumerate(reader, start=1):
            cells = [cell.strip() for cell in row]
            if not any(cells):
                continue

            labels.append(cells[0])
            try:
                rows.append([int(cell) for cell in cells[1:]])
            except ValueError:
                raise InvalidGraphError(
                    f"Non-integer cost on line {line_number} of {csv_path}: {row}"
                )

    if not rows:
        raise InvalidGraphError(f"Graph file is empty: {csv_path}")

    return DistanceModel.from_rows(rows, labels=labels)


def validate_graph_csv(csv_path: Union[str, Path]) -> tuple[bool, Optional[str]]:
    """
    Validate that a graph file can be loaded.

    Args:
        csv_path: Path to graph file

    Returns:
        Tuple of (is_valid, error_message)
    """
    try:
        load_graph_csv(csv_path)
    except (FileNotFoundError, InvalidGraphError) as e:
        return False, str(e)

    return True, None


def load_config(config_path: Union[str, Path]) -> dict:
    """
    Load a YAML configuration file.

    Raises:
        FileNotFoundError: If config file doesn't exist
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        config = yaml.safe_load(f)

    return config or {}


def save_history_csv(
    history: List[ProgressEvent],
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save per-generation progress to CSV.

    Args:
        history: Progress events in generation order
        output_path: Path for output CSV
        overwrite: If True, overwrite existing file

    Returns:
        Path to saved CSV file

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"History file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w', newline='') as f:
        writer = csv.DictWriter(f, fieldnames=HISTORY_FIELDS)
        writer.writeheader()

        for event in history:
            writer.writerow(event.to_dict())

    return output_path


def save_result_yaml(
    result: RunResult,
    output_path: Union[str, Path],
    overwrite: bool = False
) -> Path:
    """
    Save the final result to a YAML file.

    Raises:
        FileExistsError: If file exists and overwrite=False
    """
    output_path = Path(output_path)

    if output_path.exists() and not overwrite:
        raise FileExistsError(f"Result file already exists: {output_path}")

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with open(output_path, 'w') as f:
        yaml.dump(result.to_dict(), f, default_flow_style=False, sort_keys=False)

    return output_path
