"""Console entrypoints for inspecting spy recorder settings."""

import dataclasses

import typer
from rich.console import Console
from rich.table import Table

from spy_recorder.config import (
    DEFAULT_SETTINGS,
    RecorderSettings,
    SettingsError,
    load_settings,
    read_settings_document,
    validate_settings_mapping,
)
from spy_recorder.recorder.logging_utils import DEFAULT_LOGGER, LoggingManager


class SpyRecorderCLI:
    """Object-oriented wrapper for the Typer command-line interface."""

    def __init__(self, logger: LoggingManager = DEFAULT_LOGGER) -> None:
        self.logger = logger
        self.app = typer.Typer(help="Check and display spy recorder settings files.")
        self.app.callback()(self._main)
        self.app.command("check-config")(self._check_config)
        self.app.command("show-config")(self._show_config)

    def _main(
        self,
        verbose: bool = typer.Option(
            False,
            "--verbose",
            help="Enable verbose debug logging.",
        ),
    ) -> None:
        """Configure logging before running a subcommand."""
        self.logger.setup(verbose)

    def _check_config(
        self,
        path: str = typer.Argument(..., help="YAML settings file to validate."),
    ) -> None:
        """Validate a settings file and report every issue found."""

        try:
            document = read_settings_document(path)
        except SettingsError as exc:
            for issue in exc.issues:
                typer.echo(f"[CONFIG] {path}: {issue}", err=True)
            raise typer.Exit(code=1) from exc

        issues = validate_settings_mapping(document, path, self.logger)
        for issue in issues:
            typer.echo(f"[CONFIG] {issue}", err=True)

        if issues:
            typer.echo(f"Checked {path}; {len(issues)} issues found.", err=True)
            raise typer.Exit(code=1)

        typer.echo(f"Checked {path}; no issues found.")
        raise typer.Exit(code=0)

    def _show_config(
        self,
        path: str | None = typer.Argument(
            None,
            help="Optional YAML settings file (default: built-in settings).",
        ),
    ) -> None:
        """Render the resolved settings as a table."""

        if path is None:
            settings = DEFAULT_SETTINGS
            source = "defaults"
        else:
            try:
                settings = load_settings(path, logger=self.logger)
            except SettingsError as exc:
                typer.echo(f"Failed to load {path}: {exc}", err=True)
                raise typer.Exit(code=1) from exc
            source = path

        console = Console(force_terminal=False)
        console.print(settings_table(settings, source))

    def run(self) -> None:
        """Invoke the Typer application."""
        self.app()


def settings_table(settings: RecorderSettings, source: str) -> Table:
    """Tabulate each setting next to its default."""

    table = Table(title=f"Spy recorder settings ({source})")
    table.add_column("Setting")
    table.add_column("Value")
    table.add_column("Default")
    for field in dataclasses.fields(RecorderSettings):
        table.add_row(
            field.name,
            str(getattr(settings, field.name)),
            str(getattr(DEFAULT_SETTINGS, field.name)),
        )
    return table


cli = SpyRecorderCLI()
app = cli.app


if __name__ == "__main__":
    cli.run()
