"""
Command-line interface for TableSift.

Provides commands for:
- Profiling a CSV/Excel file
- Running built-in checks and custom rules from a YAML file
- Bulk cleaning a file
"""

import json
import sys
from pathlib import Path

import click

from tablesift import __version__
from tablesift.core.config import ProjectConfig
from tablesift.core.engine import ProfilingEngine
from tablesift.core.exceptions import ConfigError, DataLoadError, TableSiftException
from tablesift.core.logging_config import setup_logging, get_logger
from tablesift.core.observers import CLIProgressObserver
from tablesift.core.pretty_output import PrettyOutput as po
from tablesift.fixes import cleaning_actions
from tablesift.loaders.table_loader import load_dataset
from tablesift.profiler.type_inferrer import TypeInferrer
from tablesift.validations.custom_rules import RuleSet

logger = get_logger(__name__)

LOG_LEVELS = click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'], case_sensitive=False)


def _load_project(config_file):
    if not config_file:
        return ProjectConfig()
    logger.debug(f"Loading configuration from {config_file}")
    return ProjectConfig.from_yaml(config_file)


def _write_json(payload, json_output):
    text = json.dumps(payload, indent=2, default=str)
    if json_output:
        Path(json_output).parent.mkdir(parents=True, exist_ok=True)
        Path(json_output).write_text(text, encoding="utf-8")
        logger.info(f"JSON written to {json_output}")
    else:
        click.echo(text)


def _fail(message):
    po.blank_line()
    po.error(message)
    sys.exit(1)


@click.group()
@click.version_option(version=__version__)
def cli():
    """
    TableSift - data profiling, validation and cleaning for tabular files.

    Profiles CSV and Excel files (type inference, statistics, outliers,
    duplicates, contextual and cross-field issues, quality score) and
    evaluates user-defined rules.
    """
    pass


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--config', '-c', 'config_file', type=click.Path(exists=True, dir_okay=False),
              help='YAML file with an engine section')
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json'], case_sensitive=False),
              default='text', help='Output format')
@click.option('--json-output', '-j', type=click.Path(dir_okay=False), help='Write the JSON profile to this path')
@click.option('--log-level', type=LOG_LEVELS, default='WARNING', help='Logging level')
@click.option('--log-file', type=click.Path(), help='Optional log file path')
def profile(file_path, config_file, output_format, json_output, log_level, log_file):
    """
    Profile a data file.

    FILE_PATH: CSV (.csv, .txt) or Excel (.xlsx, .xls) file

    Examples:

    \b
    tablesift profile customers.csv
    tablesift profile customers.csv --format json > profile.json
    tablesift profile customers.xlsx -c tablesift.yaml -j out/profile.json
    """
    setup_logging(level=log_level, log_file=log_file)
    logger.info(f"Starting profile: {file_path}")

    try:
        project = _load_project(config_file)
        dataset = load_dataset(file_path)

        show_text = output_format.lower() == 'text'
        observers = [CLIProgressObserver(verbose=True)] if show_text else []
        engine = ProfilingEngine(config=project.engine, observers=observers)
        result = engine.analyze(dataset)

        if json_output or not show_text:
            _write_json(result.to_dict(), json_output)

    except ConfigError as e:
        _fail(f"Configuration error: {e}")
    except DataLoadError as e:
        _fail(f"Error loading file: {e}")
    except TableSiftException as e:
        _fail(f"Analysis failed: {e}")


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--rules', '-r', 'rules_file', type=click.Path(exists=True, dir_okay=False),
              help='YAML file with a rules list (and optional engine section)')
@click.option('--format', '-f', 'output_format', type=click.Choice(['text', 'json'], case_sensitive=False),
              default='text', help='Output format')
@click.option('--json-output', '-j', type=click.Path(dir_okay=False), help='Write the JSON results to this path')
@click.option('--fail-on-issues', is_flag=True, help='Exit with status 1 when any result is reported')
@click.option('--log-level', type=LOG_LEVELS, default='WARNING', help='Logging level')
@click.option('--log-file', type=click.Path(), help='Optional log file path')
def validate(file_path, rules_file, output_format, json_output, fail_on_issues, log_level, log_file):
    """
    Run the built-in checks and custom rules against a data file.

    FILE_PATH: CSV (.csv, .txt) or Excel (.xlsx, .xls) file

    Examples:

    \b
    tablesift validate customers.csv --rules rules.yaml
    tablesift validate customers.csv -r rules.yaml --format json --fail-on-issues
    """
    setup_logging(level=log_level, log_file=log_file)
    logger.info(f"Starting validation: {file_path}")

    try:
        project = _load_project(rules_file)
        rules = RuleSet.from_dicts(project.rules)
        dataset = load_dataset(file_path)

        show_text = output_format.lower() == 'text'
        observers = [CLIProgressObserver(verbose=True)] if show_text else []
        engine = ProfilingEngine(config=project.engine, observers=observers)
        results = engine.validate(dataset, rules)

        for error in engine.custom_rule_engine.errors:
            po.warning(f"Rule '{error.rule_name}' skipped: {error.message}")

        if json_output or not show_text:
            _write_json([r.to_dict() for r in results], json_output)

    except ConfigError as e:
        _fail(f"Configuration error: {e}")
    except DataLoadError as e:
        _fail(f"Error loading file: {e}")
    except TableSiftException as e:
        _fail(f"Validation failed: {e}")

    if fail_on_issues and results:
        sys.exit(1)


@cli.command()
@click.argument('file_path', type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', 'output_path', type=click.Path(dir_okay=False), required=True,
              help='Path for the cleaned CSV file')
@click.option('--fill-missing', is_flag=True, help='Fill empty cells (0 for numbers, "Unknown" for text)')
@click.option('--format-text', is_flag=True, help='Trim and normalize text formatting')
@click.option('--repair', is_flag=True, help='Repair e-mail, phone and price values')
@click.option('--dedupe', is_flag=True, help='Remove duplicate rows')
@click.option('--log-level', type=LOG_LEVELS, default='WARNING', help='Logging level')
def clean(file_path, output_path, fill_missing, format_text, repair, dedupe, log_level):
    """
    Apply bulk clean-ups to a data file and write the result as CSV.

    FILE_PATH: CSV (.csv, .txt) or Excel (.xlsx, .xls) file

    \b
    tablesift clean customers.csv -o clean.csv --format-text --dedupe
    """
    setup_logging(level=log_level)

    try:
        dataset = load_dataset(file_path)
    except DataLoadError as e:
        _fail(f"Error loading file: {e}")

    steps = []
    if fill_missing:
        data_types = TypeInferrer().infer_types(dataset)
        dataset, changed = cleaning_actions.fill_missing_by_type(dataset, data_types)
        steps.append(("Filled empty cells", changed))
    if format_text:
        dataset, changed = cleaning_actions.normalize_formatting(dataset)
        steps.append(("Reformatted values", changed))
    if repair:
        dataset, changed = cleaning_actions.repair_common_values(dataset)
        steps.append(("Repaired values", changed))
    if dedupe:
        dataset, changed = cleaning_actions.remove_duplicates(dataset)
        steps.append(("Removed duplicate rows", changed))

    if not steps:
        po.warning("No clean-up selected; use --fill-missing, --format-text, --repair or --dedupe")

    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    dataset.to_dataframe().to_csv(output_path, index=False)

    for label, changed in steps:
        po.key_value(label, changed, indent=2)
    po.success(f"Cleaned data written to {output_path}")


@cli.command()
def version():
    """Display version information."""
    click.echo(f"TableSift v{__version__}")
    click.echo("Data profiling, validation and cleaning for tabular files")


if __name__ == '__main__':
    cli()
