"""
CLI module for the path-search GA.

Handles run configuration loading and validation, interactive prompting for
population size and generation count, and the end-to-end run.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional
import numpy as np
import yaml

from .data_models import RunResult
from .io_utils import load_graph_csv, save_history_csv, save_result_yaml
from .orchestration import run_search
from .reporting import ConsoleReporter, format_matrix_info, format_summary

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).parent / "ga_config.yaml"

LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']

# key -> minimum accepted value
INTEGER_FIELDS = {
    'population_size': 2,
    'generations': 1,
    'max_breed_attempts': 1,
    'matrix_info_examples': 0,
}


class ConfigValidationError(Exception):
    """Raised when run configuration is invalid."""
    pass


def load_run_config(config_path: str) -> Dict[str, Any]:
    """
    Load run configuration from YAML file.

    Args:
        config_path: Path to run configuration YAML file

    Returns:
        Dictionary containing run configuration

    Raises:
        FileNotFoundError: If config file doesn't exist
        ConfigValidationError: If config is invalid
    """
    config_file = Path(config_path)

    if not config_file.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    try:
        with open(config_file, 'r') as f:
            config = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigValidationError(f"Invalid YAML in configuration file: {e}")

    if config is None:
        raise ConfigValidationError("Configuration file is empty")

    if not isinstance(config, dict):
        raise ConfigValidationError("Configuration must be a mapping")

    return config


def validate_run_config(config: Dict[str, Any]) -> None:
    """
    Validate run configuration values. All keys are optional.

    Args:
        config: Run configuration dictionary

    Raises:
        ConfigValidationError: If configuration is invalid
    """
    for key, minimum in INTEGER_FIELDS.items():
        if key not in config:
            continue
        value = config[key]
        if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
            raise ConfigValidationError(
                f"'{key}' must be an integer >= {minimum}, got: {value}"
            )

    seed = config.get('random_seed')
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int) or seed < 0):
        raise ConfigValidationError(f"'random_seed' must be a non-negative integer or null, got: {seed}")

    if 'log_level' in config and str(config['log_level']).upper() not in LOG_LEVELS:
        raise ConfigValidationError(
            f"Invalid log_level: '{config['log_level']}'. Must be one of {LOG_LEVELS}"
        )

    if 'graph' in config and not isinstance(config['graph'], str):
        raise ConfigValidationError("'graph' must be a file path")

    if 'output' in config:
        _validate_output_config(config['output'])


def _validate_output_config(output: Any) -> None:
    if not isinstance(output, dict):
        raise ConfigValidationError("'output' must be a dictionary")

    for key in ('history', 'result', 'plot'):
        if key in output and output[key] is not None and not isinstance(output[key], str):
            raise ConfigValidationError(f"'output.{key}' must be a file path")

    if 'overwrite' in output and not isinstance(output['overwrite'], bool):
        raise ConfigValidationError("'output.overwrite' must be true or false")


def merge_configs(defaults: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    """Overlay a run config on the defaults (the output section is merged key by key)."""
    merged = dict(defaults)
    for key, value in overrides.items():
        if key == 'output' and isinstance(value, dict):
            merged['output'] = {**merged.get('output', {}), **value}
        else:
            merged[key] = value
    return merged


def prompt_int(
    message: str,
    default: int,
    minimum: int,
    input_fn: Callable[[str], str] = input
) -> int:
    """
    Ask for an integer, falling back to the default on bad input.

    Empty input, closed input, non-integers and values below minimum all
    select the default.
    """
    try:
        answer = input_fn(message).strip()
    except EOFError:
        answer = ""

    try:
        value = int(answer)
    except ValueError:
        value = None

    if value is None or value < minimum:
        print(f"Invalid input. Defaulting to {default}.")
        return default

    return value


def resolve_parameter(
    key: str,
    flag_value: Optional[int],
    user_config: Dict[str, Any],
    defaults: Dict[str, Any],
    interactive: bool,
    message: str,
    input_fn: Callable[[str], str] = input
) -> int:
    """
    Pick a run parameter: command-line flag, then run config, then prompt, then default.

    Raises:
        ConfigValidationError: If the flag value is below the accepted minimum
    """
    minimum = INTEGER_FIELDS[key]

    if flag_value is not None:
        if flag_value < minimum:
            raise ConfigValidationError(f"--{key.split('_')[0]} must be at least {minimum}, got {flag_value}")
        return flag_value

    if key in user_config:
        return user_config[key]

    if interactive:
        return prompt_int(message, defaults[key], minimum, input_fn)

    return defaults[key]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Genetic-algorithm search for a short path through a weighted graph",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ga-path examples/matrix.csv                          # Prompt for population and generations
  ga-path examples/matrix.csv --population 25 --generations 20
  ga-path --config examples/run_config.yaml --no-prompt
  ga-path examples/matrix.csv --no-prompt --history out/history.csv --plot out/convergence.png
        """
    )

    parser.add_argument('graph', nargs='?', help='Graph file (label,cost,cost,... per line)')
    parser.add_argument('--config', '-c', help='Run configuration YAML file')
    parser.add_argument('--population', '-p', type=int, metavar='N', help='Population size (>= 2)')
    parser.add_argument('--generations', '-g', type=int, metavar='N', help='Number of generations (>= 1)')
    parser.add_argument('--seed', '-s', type=int, help='Random seed')
    parser.add_argument('--no-prompt', action='store_true',
                        help='Never prompt; use configured defaults for missing values')
    parser.add_argument('--history', metavar='PATH', help='Save per-generation history CSV')
    parser.add_argument('--result', metavar='PATH', help='Save final result YAML')
    parser.add_argument('--plot', metavar='PATH', help='Save convergence plot PNG')
    parser.add_argument('--overwrite', action='store_true', help='Overwrite existing output files')
    parser.add_argument('--quiet', '-q', action='store_true', help='One line per generation')
    parser.add_argument('--log-level', choices=LOG_LEVELS, help='Logging level')

    return parser


def run_from_args(args: argparse.Namespace, input_fn: Callable[[str], str] = input) -> RunResult:
    """
    Load configuration and graph, run the GA, print reports and save outputs.

    Raises:
        FileNotFoundError: If the graph or config file doesn't exist
        ConfigValidationError: If the configuration is invalid
        InvalidGraphError: If the graph file is malformed
    """
    defaults = load_run_config(str(DEFAULT_CONFIG_PATH))
    user_config = load_run_config(args.config) if args.config else {}
    validate_run_config(user_config)
    config = merge_configs(defaults, user_config)

    log_level = (args.log_level or str(config.get('log_level', 'WARNING'))).upper()
    logging.basicConfig(
        level=getattr(logging, log_level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    graph_path = args.graph
    if not graph_path and user_config.get('graph'):
        # relative to the config file
        graph_path = str(Path(args.config).parent / user_config['graph'])
    if not graph_path:
        raise ConfigValidationError("No graph file given (positional argument or 'graph' in config)")

    outputs = _resolve_outputs(args, config.get('output', {}))

    model = load_graph_csv(graph_path)
    print(f"File \"{graph_path}\" found.")

    seed = args.seed if args.seed is not None else config.get('random_seed')
    if seed is None:
        seed = int(np.random.default_rng().integers(0, 2**31))
    logger.info(f"Random seed: {seed}")

    print()
    print(format_matrix_info(model, np.random.default_rng(seed), config['matrix_info_examples']))

    interactive = not args.no_prompt
    population_size = resolve_parameter(
        'population_size', args.population, user_config, defaults, interactive,
        "\n? Enter the number of initial sequences to generate.\n"
        f"(recommended default value is {defaults['population_size']})\n",
        input_fn,
    )
    generations = resolve_parameter(
        'generations', args.generations, user_config, defaults, interactive,
        "\n? Enter the number of generations to process.\n"
        f"(recommended default value is {defaults['generations']})\n",
        input_fn,
    )

    result = run_search(
        model,
        population_size,
        generations,
        seed=seed,
        listeners=[ConsoleReporter(quiet=args.quiet)],
        max_breed_attempts=config['max_breed_attempts'],
    )

    print()
    print(format_summary(result))

    _save_outputs(result, outputs)

    return result


def _resolve_outputs(args: argparse.Namespace, output: Dict[str, Any]) -> Dict[str, Any]:
    """
    Pick output paths (flags over config) and refuse existing files up front.

    Raises:
        FileExistsError: If an output file exists and overwrite is off
    """
    outputs = {
        'history': args.history or output.get('history'),
        'result': args.result or output.get('result'),
        'plot': args.plot or output.get('plot'),
        'overwrite': args.overwrite or output.get('overwrite', False),
    }

    if not outputs['overwrite']:
        for key in ('history', 'result', 'plot'):
            if outputs[key] and Path(outputs[key]).exists():
                raise FileExistsError(
                    f"Output file exists: {outputs[key]}. Use --overwrite to replace it"
                )

    return outputs


def _save_outputs(result: RunResult, outputs: Dict[str, Any]) -> List[Path]:
    overwrite = outputs['overwrite']
    saved = []

    if outputs['history']:
        saved.append(save_history_csv(result.history, outputs['history'], overwrite=overwrite))
        print(f"History: {outputs['history']}")

    if outputs['result']:
        saved.append(save_result_yaml(result, outputs['result'], overwrite=overwrite))
        print(f"Result: {outputs['result']}")

    if outputs['plot']:
        from .visualization_utils import plot_convergence
        saved.append(plot_convergence(result.history, outputs['plot']))

    return saved


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the GA CLI."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        run_from_args(args)
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 1
    except (FileNotFoundError, FileExistsError, ConfigValidationError, ValueError) as e:
        print(f"\nError: {e}")
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
