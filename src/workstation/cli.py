"""Command line interface for the workstation provisioner."""

from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.table import Table

from .core.backup import ConfigFileWriter
from .core.bootstrap import Provisioner
from .core.commands import CommandRunner
from .core.config import FONT_MODES, Config
from .core.errors import ProvisionError, StageFailed
from .core.logging import setup_logging
from .core.packages import detect_package_manager

console = Console()


def load_config(config_file: Optional[Path], fonts: Optional[str]) -> Config:
    """Build the configuration from defaults, a file and command line overrides."""
    config = Config()
    if config_file is not None:
        config.load_config(config_file)
    if fonts is not None:
        config.set_font_mode(fonts)
    errors = config.validate()
    if errors:
        for error in errors:
            console.print(f"[red]Configuration error: {error}")
        raise click.Abort()
    return config


@click.group(invoke_without_command=True)
@click.option(
    "--config",
    "config_file",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="YAML file with settings to merge over the defaults",
)
@click.option(
    "--fonts",
    type=click.Choice(FONT_MODES),
    help="Whether to install Nerd Fonts: never (default), ask, or always",
)
@click.option(
    "--dry-run", is_flag=True, help="Show what would be done without changing anything"
)
@click.option("--debug", is_flag=True, help="Enable debug logging")
@click.option(
    "--log-file",
    type=click.Path(dir_okay=False),
    help="Also write a debug log to this file",
)
@click.pass_context
def cli(
    ctx: click.Context,
    config_file: Optional[Path],
    fonts: Optional[str],
    dry_run: bool,
    debug: bool,
    log_file: Optional[str],
) -> None:
    """Workstation provisioning tool.

    Run without a command to provision this machine:

    \b
      1. Install git, vim, tmux, curl, zsh, python3 and flatpak
      2. Install Oh My Zsh unless ~/.oh-my-zsh exists
      3. Append the vim configuration to ~/.vimrc
      4. Clone and run the tmux configuration repository
      5. Append the zsh configuration to ~/.zshrc
      6. Optionally clone and run the Nerd Fonts installer

    Existing configuration files are backed up to <file>.backup.<timestamp>
    before anything is appended to them.

    Other commands:

      detect    Show the detected package manager
      backups   List backups of the configuration files

    Examples:

    \b
      # Provision with the defaults
      workstation

    \b
      # Preview every command and file write
      workstation --dry-run

    \b
      # Be asked whether to install Nerd Fonts
      workstation --fonts ask
    """
    setup_logging(debug=debug, log_file=log_file)
    try:
        config = load_config(config_file, fonts)
    except ProvisionError as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()

    ctx.obj = {"config": config}
    if ctx.invoked_subcommand is None:
        provision(config, dry_run)


def provision(config: Config, dry_run: bool) -> None:
    """Run the full provisioning sequence, aborting on the first failure."""
    provisioner = Provisioner(config, runner=CommandRunner(dry_run=dry_run))
    try:
        result = provisioner.provision()
    except StageFailed as e:
        console.print(f"[red]{e}")
        console.print(f"[yellow]Stopped before stage {e.stage}. Fix the problem and run again.")
        raise click.Abort()
    except ProvisionError as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()

    for write in result.writes:
        if write.backup is not None:
            console.print(f"[green]Updated {write.path} (backup: {write.backup.name})")
        else:
            console.print(f"[green]Created {write.path}")


@cli.command()
def detect() -> None:
    """Show the package manager that would be used."""
    try:
        manager = detect_package_manager()
    except ProvisionError as e:
        console.print(f"[red]Error: {e}")
        raise click.Abort()
    console.print(f"Package manager: [bold]{manager.value}")


@cli.command()
@click.pass_obj
def backups(obj: dict) -> None:
    """List backups of the configuration files this tool writes."""
    config: Config = obj["config"]
    writer = ConfigFileWriter()

    table = Table(title="Configuration Backups")
    table.add_column("File", style="cyan")
    table.add_column("Backup", style="green", no_wrap=True)
    table.add_column("Size", style="yellow", justify="right")

    found = False
    for path in config.target_files().values():
        for backup in writer.list_backups(path):
            table.add_row(path.name, backup.name, str(backup.stat().st_size))
            found = True

    if not found:
        console.print("[yellow]No backups found.")
        return
    console.print(table)


def main() -> None:
    """Entry point for the workstation CLI."""
    cli()


if __name__ == "__main__":
    main()
