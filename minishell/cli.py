from __future__ import annotations

from typing import Optional

import click

from .config import LOG_LEVELS, ShellConfig
from .errors import TreeFormatError
from .log import configure_logging
from .process import exit_code
from .render import render
from .shell_runner import ShellRunner
from .tree_loader import load_tree


def _load(tree_file: str):
    try:
        return load_tree(tree_file)
    except TreeFormatError as e:
        raise click.ClickException(str(e)) from e


@click.group()
def cli() -> None:
    """Minishell command-tree executor."""


@cli.command("run")
@click.argument("tree_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--cwd", default=None, type=click.Path(file_okay=False), help="Working directory to run in")
@click.option(
    "--log-level",
    default=None,
    type=click.Choice(LOG_LEVELS, case_sensitive=False),
    help="Diagnostics level (default: $MINISHELL_LOG_LEVEL or WARNING)",
)
def run_cmd(tree_file: str, cwd: Optional[str], log_level: Optional[str]) -> int:
    """Execute the command tree stored in TREE_FILE and exit with its status."""
    try:
        config = ShellConfig.from_env().with_overrides(log_level=log_level)
    except ValueError as e:
        raise click.ClickException(str(e)) from e
    configure_logging(config)

    tree = _load(tree_file)
    result = ShellRunner(cwd=cwd).run(tree)
    return exit_code(result.exit_code)


@cli.command("show")
@click.argument("tree_file", type=click.Path(exists=True, dir_okay=False))
def show_cmd(tree_file: str) -> int:
    """Print the command tree in TREE_FILE as a shell command line."""
    click.echo(render(_load(tree_file)))
    return 0


def main() -> int:
    try:
        rv = cli(standalone_mode=False)
    except click.ClickException as e:
        e.show()
        return 2
    except click.Abort:
        return 1
    except SystemExit as e:
        return exit_code(e.code)
    return rv if isinstance(rv, int) else 0


if __name__ == "__main__":
    raise SystemExit(main())
