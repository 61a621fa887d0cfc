"""
This file is the entry point for the 'ft' command-line tool.
Run 'ft run SCRIPT' to execute a command script against a fresh file tree,
or 'ft shell' to type commands interactively.
"""
import logging
import sys
from pathlib import Path
from typing import Optional

import typer

from common.app_setup import print_and_log, print_error, setup_logging
from filetree import FileTree, TreeSettings, check_tree, coerce_settings
from ft_cli.driver import CommandDriver, DriverError

app = typer.Typer(add_completion=False, help="Drive an in-memory file tree with text commands.")

logger = logging.getLogger(__name__)


@app.callback()
def main(ctx: typer.Context,
         config: Optional[Path] = typer.Option(None, "--config", "-c", exists=True, dir_okay=False, help="YAML or JSON settings file"),
         loglevel: Optional[str] = typer.Option(None, help="Override the configured log level"),
         logfile: Optional[str] = typer.Option(None, help="Override the configured log file")):
    """Load settings and set up logging for every command."""
    try:
        settings = coerce_settings(config)
        overrides = {k: v for k, v in {"loglevel": loglevel, "logfile": logfile}.items() if v is not None}
        if overrides:
            settings = settings.merge(overrides)
    except ValueError as e:
        print_error(f"Invalid settings: {e}")
        raise typer.Exit(2)
    setup_logging(app_name="filetree", loglevel=settings.loglevel, logfile=settings.logfile)
    ctx.obj = settings


def _driver(ctx: typer.Context) -> CommandDriver:
    settings: TreeSettings = ctx.obj or TreeSettings()
    return CommandDriver(FileTree(), settings)


@app.command()
def run(ctx: typer.Context,
        script: str = typer.Argument(..., help="Command script to execute, '-' for stdin"),
        echo: bool = typer.Option(False, help="Echo each command before its output"),
        stop_on_error: bool = typer.Option(False, help="Stop at the first invalid command")):
    """Execute a command script against a fresh file tree."""
    driver = _driver(ctx)
    logger.info(f"Running command script {script}")
    try:
        if script == "-":
            lines = sys.stdin.read().splitlines()
        else:
            lines = Path(script).read_text(encoding="utf-8").splitlines()
    except OSError as e:
        print_error(f"Cannot read script {script}: {e}")
        raise typer.Exit(1)

    failures = 0
    for number, line in driver.commands(lines):
        if echo:
            print_and_log(f"> {line}")
        try:
            output = driver.execute(line)
        except DriverError as e:
            failures += 1
            print_error(f"line {number}: {e}")
            if stop_on_error:
                raise typer.Exit(1)
            continue
        for out in output:
            print_and_log(out)

    if driver.tree.initialized and not check_tree(driver.tree):
        print_error("File tree failed its invariant check")
        raise typer.Exit(1)
    if failures:
        raise typer.Exit(1)


@app.command()
def shell(ctx: typer.Context):
    """Read commands interactively until 'quit' or end of input."""
    driver = _driver(ctx)
    print_and_log(f"Commands: {', '.join(driver.command_names)}, quit", log=False)
    while True:
        try:
            line = input("ft> ")
        except EOFError:
            break
        if line.strip().lower() in ("quit", "exit"):
            break
        try:
            for out in driver.execute(line):
                print_and_log(out)
        except DriverError as e:
            print_error(str(e))


if __name__ == "__main__":
    app()
