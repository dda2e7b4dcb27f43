#!/usr/bin/env python3
"""Command-line interface for goimporter using Click."""

from importlib import metadata
import logging
from pathlib import Path
import sys
from typing import Optional

import click
from goimporter import config
from goimporter import core
from goimporter.entities import RepoConfig
from goimporter.entities import RunConfig


try:
    VERSION = f"goimporter {metadata.version('goimporter')}"
except metadata.PackageNotFoundError:
    VERSION = "goimporter"


def _handle_files(run: RunConfig, repo: RepoConfig) -> int:
    """Process Go files and report or regroup their imports.

    Args:
        run: What to process and whether to write changes.
        repo: Repository layout used to group imports.
    Returns:
        0 if no changes, 1 if changes required, 2 if error occurred.
    """
    exit_code = 0
    changed = 0

    for file_path in core.iter_go_files(run.target, run.recursive, run.exclude_mock):
        try:
            modified = core.process_file(file_path, repo, apply=not run.dry_run)
        except core.FileProcessingError as exc:
            logging.error("[%s] ERROR: %s", file_path, exc.reason)
            exit_code = max(exit_code, 2)
            continue

        if modified:
            msg = "imports would be regrouped." if run.dry_run else "file updated."
            logging.info("[%s] %s", file_path, msg)
            changed += 1
            exit_code = max(exit_code, 1)

    if changed:
        logging.info("Total files %s: %d", "to regroup" if run.dry_run else "updated", changed)

    return exit_code


def _repo_options(func):
    """Attach the repository layout options shared by check and fix."""
    options = [
        click.option("--config", "config_path", type=click.Path(exists=True, dir_okay=False),
                     help="Path to a JSON or TOML config file."),
        click.option("--org", default=None, help="Organization prefix."),
        click.option("--repo", default=None, help="Repository prefix."),
        click.option("--common-prefix", default=None, help="Common packages prefix."),
        click.option("--domain-prefix", default=None, help="Domain-specific packages prefix."),
        click.option("--projects-tpl", default=None, help="Projects template, e.g. 'host/repo/projects/domain/%s'."),
        click.option("--pkgs", default="", help="Comma-separated list of additional common prefixes."),
        click.option("-r", "--recursive", is_flag=True, help="Process directories recursively."),
        click.option("--exclude-mock/--include-mock", default=True, show_default=True,
                     help="Skip files with 'mock' in their path."),
    ]
    for option in reversed(options):
        func = option(func)
    return func


def _build_repo_config(config_path: Optional[str], org: Optional[str], repo: Optional[str],
                       common_prefix: Optional[str], domain_prefix: Optional[str],
                       projects_tpl: Optional[str], pkgs: str) -> RepoConfig:
    base = config.DEFAULT_REPO_CONFIG
    if config_path:
        try:
            base = config.load_repo_config(config_path)
        except config.ConfigError as exc:
            raise click.BadParameter(str(exc), param_hint="--config") from exc

    repo_config = config.build_repo_config(
        base,
        extra_common_prefixes=(p.strip() for p in pkgs.split(",")),
        org_prefix=org,
        repo_prefix=repo,
        common_prefix=common_prefix,
        domain_prefix=domain_prefix,
        projects_template=projects_tpl,
    )
    for warning in config.check_repo_config(repo_config):
        logging.warning("config: %s", warning)
    return repo_config


def _run(path: str, dry_run: bool, recursive: bool, exclude_mock: bool, **repo_options) -> None:
    repo_config = _build_repo_config(**repo_options)
    run = RunConfig(target=Path(path), recursive=recursive, dry_run=dry_run, exclude_mock=exclude_mock)
    sys.exit(_handle_files(run, repo_config))


@click.group()
@click.option("-v", "--verbose", is_flag=True, help="Increase verbosity.")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output.")
@click.version_option(version=VERSION, prog_name="goimporter CLI")
def cli(verbose: bool, quiet: bool) -> None:
    """Group and sort the import blocks of Go files."""
    # Configure logging only once
    if not logging.getLogger().handlers:
        if quiet:
            logging.basicConfig(level=logging.ERROR, format="%(message)s")
        else:
            logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO, format="%(message)s")


@cli.command(help="Report files whose imports need regrouping without modifying them.")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=True, dir_okay=True))
@_repo_options
def check(path: str, recursive: bool, exclude_mock: bool, **repo_options) -> None:
    _run(path, True, recursive, exclude_mock, **repo_options)


@cli.command(help="Regroup imports in place.")
@click.argument("path", default=".", type=click.Path(exists=True, file_okay=True, dir_okay=True))
@_repo_options
def fix(path: str, recursive: bool, exclude_mock: bool, **repo_options) -> None:
    _run(path, False, recursive, exclude_mock, **repo_options)


def main():
    """Entry point for the CLI."""
    cli()


if __name__ == "__main__":
    cli()
