#!/usr/bin/env python3
"""
GA Path Search CLI - Minimal entry point.

Searches for a short path through a weighted graph with a genetic algorithm.
Run parameters come from flags, an optional YAML run config, or prompts.

Usage:
    python3 ga_cli.py graph.csv
    python3 ga_cli.py graph.csv --population 25 --generations 20
    python3 ga_cli.py --config run_config.yaml --no-prompt
    python3 ga_cli.py --help

Examples:
    # Prompt for population size and generation count
    python3 ga_cli.py examples/matrix.csv

    # Non-interactive run with outputs configured in YAML
    python3 ga_cli.py --config examples/run_config.yaml --no-prompt
"""

import sys
from pathlib import Path

# Add project root to path if needed
project_root = Path(__file__).parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))


if __name__ == '__main__':
    from ga_path.cli import main
    sys.exit(main())
