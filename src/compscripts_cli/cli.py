"""Command-line interface for the compscripts build coordinator."""

import sys
from pathlib import Path

import click

from compscripts_cli.version import get_version
from compscripts_cli.core.builder import (
    DEFAULT_DESTDIR, MANIFEST_NAME, PROFILE_FLAGS,
    BuildConfig, BuildCoordinator, BuildError, load_manifest,
)
from compscripts_cli.config import DEFAULT_CONFIG, get_config, update_config
from compscripts_cli.utils.console import (
    _rich_success, _rich_error, _rich_info, _rich_warning, _rich_echo, _get_console,
    _create_table, _print_table,
)


def print_version(ctx, param, value):
    """Print version and exit."""
    if not value or ctx.resilient_parsing:
        return

    console = _get_console()
    if console:
        from rich.text import Text
        from rich.panel import Panel
        version_text = Text()
        version_text.append("compscripts", style="bold cyan")
        version_text.append(f" version {get_version()}", style="white")
        console.print(Panel(version_text, border_style="cyan", padding=(0, 1)))
    else:
        click.echo(f"compscripts version {get_version()}", err=True)

    ctx.exit()


@click.group(help="Build, check, test and install the compscripts tools")
@click.option('--version', is_flag=True, callback=print_version,
              expose_value=False, is_eager=True, help="Show version and exit.")
@click.option('--profile', envvar='PROFILE', default=None,
              type=click.Choice(sorted(PROFILE_FLAGS)), help="Build profile (env: PROFILE) [default: release]")
@click.option('--destdir', envvar='DESTDIR', default=None,
              help=f"Install destination (env: DESTDIR) [default: {DEFAULT_DESTDIR}]")
@click.option('--target-dir', default='target', show_default=True,
              help="Directory for build artifacts")
@click.option('--tests-dir', default='tests', show_default=True,
              help="Directory holding the test suite")
@click.option('--manifest', default=MANIFEST_NAME, show_default=True,
              help="Optional YAML build manifest")
@click.pass_context
def cli(ctx, profile, destdir, target_dir, tests_dir, manifest):
    """Main entry point for the build coordinator."""
    ctx.ensure_object(dict)
    try:
        settings = load_manifest(Path(manifest))
        ctx.obj['config'] = BuildConfig(
            profile=profile or settings.get('profile', 'release'),
            destdir=destdir or settings.get('destdir', DEFAULT_DESTDIR),
            target_dir=target_dir,
            tests_dir=tests_dir,
        )
    except BuildError as e:
        _rich_error(f"Error: {e}")
        sys.exit(1)
    ctx.obj['binaries'] = settings.get('binaries')


def _coordinator(ctx) -> BuildCoordinator:
    return BuildCoordinator(ctx.obj['config'], binaries=ctx.obj.get('binaries'))


@cli.command(help="Build every binary in the selected profile")
@click.pass_context
def output(ctx):
    """Build the binaries and the helper script into target/<profile>."""
    coordinator = _coordinator(ctx)
    config = coordinator.config
    _rich_info(f"Building {len(coordinator.binaries)} binaries ({config.profile}) into {config.output_dir}...", symbol="running")

    try:
        artifacts = coordinator.output()
    except BuildError as e:
        _rich_error(f"Error: build failed: {e}")
        sys.exit(1)

    for artifact in artifacts:
        _rich_echo(f"  - {artifact}", style="muted")
    _rich_success("Build finished", symbol="success")


cli.add_command(output, name="build")


@cli.command(help="Build, then copy the binaries and helper script to DESTDIR")
@click.pass_context
def install(ctx):
    """Install the tool suite (the build always runs first)."""
    coordinator = _coordinator(ctx)
    config = coordinator.config

    _rich_info(f"Building ({config.profile}) and installing to {config.destdir}...", symbol="running")
    try:
        installed = coordinator.install()
    except BuildError as e:
        _rich_error(f"Error: install failed: {e}")
        sys.exit(1)

    for path in installed:
        _rich_echo(f"  - {path}", style="muted")
    _rich_success(f"Installed {len(installed)} files", symbol="success")


@cli.command(help="Verify every source file compiles, producing no artifacts")
@click.pass_context
def check(ctx):
    """Static verification of the sources."""
    coordinator = _coordinator(ctx)
    try:
        files = coordinator.check()
    except BuildError as e:
        _rich_error(f"Error: check failed: {e}")
        sys.exit(1)

    _rich_success(f"Checked {len(files)} files", symbol="check")


@cli.command(help="Run the test suite",
             context_settings=dict(ignore_unknown_options=True))
@click.argument('pytest_args', nargs=-1, type=click.UNPROCESSED)
@click.pass_context
def test(ctx, pytest_args):
    """Run pytest, exiting with its status."""
    coordinator = _coordinator(ctx)
    try:
        code = coordinator.test(pytest_args)
    except BuildError as e:
        _rich_error(f"Error: {e}")
        sys.exit(1)

    if code != 0:
        _rich_error(f"Tests failed with exit code {code}")
    sys.exit(code)


@cli.command(help="Show or change the global configuration")
@click.option('--show', is_flag=True, help="Show current configuration")
@click.option('--set', 'updates', nargs=2, multiple=True, metavar='KEY VALUE',
              help=f"Set a configuration value ({', '.join(DEFAULT_CONFIG)})")
@click.pass_context
def config(ctx, show, updates):
    """Configure the compscripts tools."""
    for key, _ in updates:
        if key not in DEFAULT_CONFIG:
            _rich_error(f"Error: unknown configuration key {key!r}")
            sys.exit(1)

    try:
        if updates:
            update_config(dict(updates))
            _rich_success(f"Updated {', '.join(key for key, _ in updates)}", symbol="success")

        if not show:
            if not updates:
                _rich_info("Use --show to display configuration")
            return

        build_config = ctx.obj['config']
        rows = [("Global", key, value) for key, value in sorted(get_config().items())]
        rows.append(("Build", "profile", build_config.profile))
        rows.append(("", "destdir", build_config.destdir))
        rows.append(("", "version", get_version()))
        _print_table(_create_table(
            "Current compscripts configuration",
            [("Category", "bold yellow"), ("Setting", "white"), ("Value", "cyan")],
            rows,
        ))
    except (OSError, ValueError) as e:
        _rich_error(f"Error: failed to access configuration: {e}")
        sys.exit(1)


@cli.command(help="Not available: several binaries are built")
@click.pass_context
def run(ctx):
    """There is no single binary to run."""
    coordinator = _coordinator(ctx)
    _rich_warning('The "run" action is disabled here, since multiple binaries are being made.')
    _rich_echo(f"Run one of: {', '.join([*coordinator.binaries, coordinator.helper[0]])}", style="muted")


def main():
    """Main entry point for the CLI."""
    cli(obj={})


if __name__ == "__main__":
    main()
