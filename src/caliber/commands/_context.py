"""AppContext: the object every subcommand receives via ``@click.pass_obj``.

The root group builds it from :class:`CaliberSettings`. It owns logging
and telemetry setup for the invocation, opens the journal on first use,
and turns a :class:`ServiceResult` into output plus an exit status.
"""

from __future__ import annotations

from functools import cached_property
from typing import TYPE_CHECKING

import click

from caliber.config.logging import configure_logging
from caliber.output.formatters import OutputSettings, format_result
from caliber.services.telemetry import enable_telemetry

if TYPE_CHECKING:
    from caliber.config.settings import CaliberSettings
    from caliber.infrastructure.journal import Journal
    from caliber.services.result import ServiceResult


class AppContext:
    def __init__(self, settings: CaliberSettings) -> None:
        self.settings = settings
        configure_logging(verbose=settings.verbose, log_json=settings.log_json)
        if settings.verbose:
            enable_telemetry()

    @cached_property
    def journal(self) -> Journal:
        """Opened lazily so ``--help`` and ``--examples`` never touch disk."""
        from caliber.infrastructure.journal import Journal

        return Journal(self.settings)

    @cached_property
    def output_settings(self) -> OutputSettings:
        return OutputSettings(
            json_output=self.settings.json_output,
            quiet=self.settings.quiet,
            verbose=self.settings.verbose,
        )

    def emit(self, result: ServiceResult) -> None:
        """Print *result*; exit with status 1 if it failed.

        Successful output goes to stdout and failures to stderr. Warnings
        on a successful result are echoed to stderr as well, except in
        JSON mode where the payload already carries them.
        """
        text = format_result(result, settings=self.output_settings)
        if not result.ok:
            click.echo(text, err=True)
            raise SystemExit(1)
        if text:
            click.echo(text)
        if not self.output_settings.json_output:
            for warning in result.warnings:
                click.echo(f"WARNING: {warning}", err=True)
