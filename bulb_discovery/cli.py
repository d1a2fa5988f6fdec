"""CLI entry point for bulb discovery.

Usage:
    bulb-discovery [--debug] [--search-interval-millis 4000] [--duration 10]
    python -m bulb_discovery.cli [options]
"""

import json
import logging
import sys
import time
from pathlib import Path
from typing import Optional

import click

from .config import DiscoveryConfig, apply_overrides, load_config, validate_config
from .discovery.announcement import VALID_PARSE_MODES
from .reporting import JsonReporter
from .runner import DiscoveryService, DiscoveryTransportError

_LOGGER = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

EXIT_INTERRUPTED = 130


@click.command(context_settings={"help_option_names": ["-h", "--help"]})
@click.option("--debug", "-d", is_flag=True, help="Show debug logs.")
@click.option(
    "--search-interval-millis",
    type=click.IntRange(min=1),
    help="Search interval in milliseconds. [default: 4000]",
)
@click.option(
    "--duration",
    type=click.FloatRange(min=0, min_open=True),
    help="Stop after this many seconds (default: run until interrupted).",
)
@click.option(
    "--config",
    "config_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML config file.",
)
@click.option(
    "--parse-mode",
    type=click.Choice(sorted(VALID_PARSE_MODES)),
    help="How attribute lines are located in responses. [default: fixed-offset]",
)
@click.option(
    "--save-report",
    type=click.Path(dir_okay=False, path_type=Path),
    help="Save the JSON report to this file.",
)
@click.option("--pretty", is_flag=True, help="Pretty print output.")
def main(
    debug: bool,
    search_interval_millis: Optional[int],
    duration: Optional[float],
    config_path: Optional[Path],
    parse_mode: Optional[str],
    save_report: Optional[Path],
    pretty: bool,
):
    """Discover smart bulbs on the local network via multicast search."""
    try:
        config = load_config(config_path) if config_path else DiscoveryConfig()
    except (FileNotFoundError, ValueError) as e:
        output_error(f"Failed to load config: {e}")
        sys.exit(1)

    config = apply_overrides(
        config,
        debug=True if debug else None,
        search_interval_ms=search_interval_millis,
        parse_mode=parse_mode,
    )

    validation = validate_config(config)
    if not validation.valid:
        output_error(f"Invalid config: {validation.describe_errors()}")
        sys.exit(1)

    configure_logging(config.debug)
    for warning in validation.warnings:
        _LOGGER.warning("%s", warning)

    service = DiscoveryService(config)
    service.registry.on_device_found(
        lambda record: click.echo(f"  Found: {record}", err=True)
    )

    start_time = time.time()
    error = None
    exit_code = 0

    try:
        service.run(duration)
    except KeyboardInterrupt:
        exit_code = EXIT_INTERRUPTED
    except DiscoveryTransportError as e:
        error = str(e)
        exit_code = 1
    except OSError as e:
        error = f"Could not open discovery socket: {e}"
        exit_code = 1

    duration_ms = int((time.time() - start_time) * 1000)

    reporter = JsonReporter()
    report = reporter.generate(
        service.registry.snapshot(),
        duration_ms=duration_ms,
        probes_sent=service.probes_sent,
        error=error,
    )

    report_path = None
    if save_report:
        try:
            report_path = str(reporter.save(report, save_report))
        except OSError as e:
            _LOGGER.warning("Failed to save report: %s", e)

    output = reporter.generate_flow_output(report, report_path)
    if exit_code == EXIT_INTERRUPTED:
        output["message"] = f"Interrupted by user. {output['message']}"

    click.echo(reporter.to_json_string(output, pretty=pretty))
    sys.exit(exit_code)


def configure_logging(debug: bool) -> None:
    """Send log records to stderr; probe-cycle messages only in debug mode."""
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
        force=True,
    )


def output_error(message: str, **extra):
    """Output error in the CLI JSON envelope."""
    output = {
        "success": False,
        "command": "discover",
        "data": extra or None,
        "message": message,
    }
    click.echo(json.dumps(output, ensure_ascii=False))


if __name__ == "__main__":
    main()
