#!/usr/bin/env python3
"""
URL Monitor - checks configured endpoints and prints the failed ones as JSON
"""

import click
from rich.markup import escape

from url_monitor.modules.config_loader import ConfigError, ConfigLoader
from url_monitor.modules.health_check import (
    DEFAULT_OK_STATUSES,
    DEFAULT_TIMEOUT,
    HealthCheck,
    run_checks,
)
from url_monitor.modules.reporter import FailureReport, console

DEFAULT_CONFIG = './config.json'


@click.command()
@click.option('--config', '-c', 'config_path', default=DEFAULT_CONFIG, show_default=True,
              envvar='URL_MONITOR_CONFIG', help='Endpoint config file (JSON or YAML)')
@click.option('--timeout', '-t', default=DEFAULT_TIMEOUT, show_default=True, type=float,
              envvar='URL_MONITOR_TIMEOUT', help='Request timeout in seconds')
@click.option('--ok-status', '-s', 'ok_statuses', multiple=True, type=int,
              help='Accepted HTTP status code, repeatable (default 200)')
@click.option('--output', '-o', help='Also save the JSON report to this file')
@click.option('--verbose', '-v', is_flag=True, help='Print passing endpoints too')
def main(config_path, timeout, ok_statuses, output, verbose):
    """Check every endpoint from the config file"""
    try:
        endpoints = ConfigLoader(config_path).load()
    except ConfigError as e:
        console.print(f"[red]❌ Config error: {escape(str(e))}[/red]", highlight=False)
        raise click.Abort()

    checker = HealthCheck(timeout=timeout, ok_statuses=ok_statuses or DEFAULT_OK_STATUSES)
    report = run_checks(endpoints, checker, FailureReport(), verbose=verbose)

    if verbose:
        report.print_summary(len(endpoints))
    if output:
        report.save(output)
    click.echo(report.to_json())


if __name__ == "__main__":
    main()
