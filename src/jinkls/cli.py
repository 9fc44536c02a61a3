import logging
import os
import sys
from pathlib import Path

import typer

from jinkls.config import JinkLSConfig
from jinkls.constants import DEFAULT_LOG_LEVEL, LOG_FORMAT
from jinklsp.diagnostics import JinkValidator
from jinklsp.jink_index import SymbolIndex
from jinklsp.ls_types import DiagnosticSeverity
from jinklsp.workspace import JinkSourceScanner, read_source_file

log = logging.getLogger(__name__)

app = typer.Typer(help="Jink language server and command line checker.", no_args_is_help=True)


def _configure_logging(level_name: str) -> None:
    # stdout carries the LSP stream, so logs go to stderr
    logging.basicConfig(level=level_name.upper(), format=LOG_FORMAT, stream=sys.stderr)


@app.command()
def serve(
    log_level: str = typer.Option(DEFAULT_LOG_LEVEL, "--log-level", help="Logging level (DEBUG, INFO, ...)."),
) -> None:
    """Run the language server over stdio."""
    _configure_logging(log_level)
    from jinkls.server import server

    log.info("Starting Jink language server on stdio")
    server.start_io()


@app.command()
def check(
    paths: list[Path] = typer.Argument(..., help="Workspace folders or .jk files to check."),
    log_level: str = typer.Option("WARNING", "--log-level", help="Logging level (DEBUG, INFO, ...)."),
) -> None:
    """Index the given paths and print the diagnostics of every Jink file."""
    _configure_logging(log_level)

    folders = [str(p) for p in paths if p.is_dir()]
    try:
        config = JinkLSConfig.load(folders[0] if folders else None)
    except (OSError, ValueError) as e:
        typer.secho(f"Error: {e}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=2)

    scanner = JinkSourceScanner(config.ignored_dirs)
    files: list[str] = []
    for path in paths:
        if path.is_dir():
            files.extend(scanner.find_source_files(str(path)))
        elif path.is_file():
            files.append(str(path))
        else:
            typer.secho(f"Warning: {path} does not exist", fg=typer.colors.YELLOW, err=True)

    index = SymbolIndex()
    sources: dict[str, tuple[str, str]] = {}  # uri -> (path, text)
    for file in files:
        text = read_source_file(file)
        if text is None:
            continue
        uri = Path(file).resolve().as_uri()
        index.update(uri, text)
        sources[uri] = (file, text)

    validator = JinkValidator(index, config.source_roots)
    error_count = 0
    warning_count = 0
    for uri, (file, text) in sources.items():
        for diagnostic in validator.validate(uri, text, config.max_number_of_problems):
            start = diagnostic.range.start
            if diagnostic.severity == DiagnosticSeverity.ERROR:
                error_count += 1
                severity = "error"
            else:
                warning_count += 1
                severity = "warning"
            typer.echo(f"{os.path.relpath(file)}:{start.line + 1}:{start.character + 1}: {severity}: {diagnostic.message}")

    typer.echo(f"Checked {len(sources)} files: {error_count} errors, {warning_count} warnings")
    if error_count:
        raise typer.Exit(code=1)


def main() -> None:
    app()
