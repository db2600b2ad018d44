#!/usr/bin/env python3
"""
Command-line interface for vSphere clone builds.

This module provides the ``vsphere-clone`` command: validate a build file,
run the clone step against a driver, and manage build files.
"""

import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional

import click
import yaml

from vsphere_clone.client import CloneClient
from vsphere_clone.config import BuildConfig, config_loader
from vsphere_clone.driver import Driver, load_driver
from vsphere_clone.exceptions import ConfigurationError, VSphereCloneError
from vsphere_clone.logging import logger
from vsphere_clone.models import CloneResult, ValidationResult
from vsphere_clone.simulator import InMemoryDriver
from vsphere_clone.ui import ClickUi
from vsphere_clone.validation import validate_build_config


# Configure logging
logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)


SAMPLE_BUILD = {
    "clone": {
        "template": "templates/ubuntu-22.04",
        "disk_size": 0,
        "linked_clone": False,
        "network": "VM Network",
        "mac_address": "",
        "notes": "Built by vsphere-clone",
        "destroy": False,
        "vapp": {"properties": {}},
        "disk_controller_type": ["pvscsi"],
        "storage": [
            {
                "disk_size": 20480,
                "disk_thin_provisioned": True,
                "disk_eagerly_scrub": False,
                "disk_controller_index": 0,
            }
        ],
    },
    "location": {
        "vm_name": "ubuntu-build",
        "folder": "builds",
        "cluster": "cluster01",
        "host": "",
        "resource_pool": "",
        "datastore": "datastore1",
    },
    "force": False,
    "timeout": 3600,
    "log_level": "INFO",
}


def setup_logging(
    verbose: bool = False, quiet: bool = False, log_level: str = "INFO"
) -> None:
    """Setup logging configuration."""
    if quiet:
        level = logging.ERROR
    elif verbose:
        level = logging.DEBUG
    else:
        level = getattr(logging, log_level.upper(), logging.INFO)

    logging.getLogger().setLevel(level)
    logger.set_level(logging.getLevelName(level))


def load_build(ctx: Any) -> BuildConfig:
    """
    Load the build file or exit with the configuration error code.

    The build's ``log_level`` applies unless the command line already chose
    a level through --log-level, --verbose or --quiet.
    """
    try:
        build = config_loader.load_config(ctx.obj["config_path"])
    except ConfigurationError as e:
        click.echo(f"✗ {e}", err=True)
        sys.exit(e.exit_code)

    if not (ctx.obj["verbose"] or ctx.obj["quiet"] or ctx.obj["log_level"]):
        setup_logging(log_level=build.log_level)
    return build


def resolve_driver(build: BuildConfig, driver_path: Optional[str], dry_run: bool) -> Driver:
    """Pick the driver: simulator for dry runs, else --driver, else the build file."""
    if dry_run:
        return InMemoryDriver(templates=[build.clone.template])

    import_path = driver_path or build.driver
    if not import_path:
        raise ConfigurationError(
            "No driver configured: pass --driver, set 'driver' in the build file, "
            "or use --dry-run"
        )
    return load_driver(import_path, build.driver_options)


def validation_to_dict(validation: ValidationResult) -> Dict[str, Any]:
    return {
        "valid": validation.valid,
        "errors": validation.errors,
        "warnings": validation.warnings,
    }


def result_to_dict(result: CloneResult) -> Dict[str, Any]:
    return {
        "operation_id": result.operation_id,
        "success": result.success,
        "template": result.template,
        "vm_name": result.vm_name,
        "vm_path": result.vm_path,
        "duration": result.duration,
        "destroy_vm": result.destroy_vm,
        "cancelled": result.cancelled,
        "error": result.error,
        "validation": validation_to_dict(result.validation)
        if result.validation
        else None,
    }


@click.group()
@click.option("--config", "-c", default=None, help="Build configuration file path")
@click.option("--verbose", "-v", is_flag=True, help="Enable verbose logging")
@click.option("--quiet", "-q", is_flag=True, help="Suppress non-error output")
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    help="Output format",
)
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"]),
    default=None,
    help="Log level (defaults to the build file's log_level)",
)
@click.version_option(package_name="vsphere-clone")
@click.pass_context
def cli(
    ctx: Any,
    config: Optional[str],
    verbose: bool,
    quiet: bool,
    output: str,
    log_level: Optional[str],
) -> None:
    """Clone a vSphere template as one stage of a build pipeline."""
    setup_logging(verbose, quiet, log_level or "INFO")

    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config
    ctx.obj["output_format"] = output
    ctx.obj["verbose"] = verbose
    ctx.obj["quiet"] = quiet
    ctx.obj["log_level"] = log_level


@cli.command()
@click.pass_context
def validate(ctx: Any) -> None:
    """Check the build file and report every problem found."""
    build = load_build(ctx)
    validation = validate_build_config(build)

    if ctx.obj["output_format"] == "json":
        click.echo(json.dumps(validation_to_dict(validation), indent=2))
    else:
        for error in validation.errors:
            click.echo(f"✗ {error}", err=True)
        for warning in validation.warnings:
            click.echo(f"  Warning: {warning}", err=True)
        if validation.valid:
            click.echo("✓ Configuration is valid")

    if not validation.valid:
        sys.exit(ConfigurationError("Invalid configuration", validation.errors).exit_code)


@cli.command()
@click.option("--force", "-f", is_flag=True, help="Destroy a VM already at the target path")
@click.option("--timeout", type=int, default=None, help="Build timeout in seconds")
@click.option("--driver", "driver_path", default=None, help='Driver import path ("module:attribute")')
@click.option("--dry-run", is_flag=True, help="Run against an in-memory inventory")
@click.pass_context
def clone(
    ctx: Any,
    force: bool,
    timeout: Optional[int],
    driver_path: Optional[str],
    dry_run: bool,
) -> None:
    """Clone the configured template into the configured location."""
    build = load_build(ctx)
    if force:
        build = build.model_copy(update={"force": True})

    quiet = ctx.obj["quiet"] or ctx.obj["output_format"] == "json"

    async def run_clone() -> CloneResult:
        driver = resolve_driver(build, driver_path, dry_run)
        ui = ClickUi(quiet=quiet)
        async with CloneClient(driver, ui=ui, timeout=timeout or build.timeout) as client:
            if not quiet:
                click.echo(
                    f"Cloning '{build.clone.template}' to '{build.location.vm_path}'..."
                )
            return await client.clone_vm(build)

    try:
        result = asyncio.run(run_clone())
    except VSphereCloneError as e:
        click.echo(f"✗ Error: {e}", err=True)
        sys.exit(e.exit_code)
    except Exception as e:
        click.echo(f"✗ Unexpected error: {e}", err=True)
        sys.exit(1)

    if ctx.obj["output_format"] == "json":
        click.echo(json.dumps(result_to_dict(result), indent=2))
    elif result.success:
        click.echo(f"✓ Successfully cloned '{result.template}' to '{result.vm_path}'")
        click.echo(f"  Duration: {result.duration:.1f}s")
        if result.destroy_vm:
            click.echo("  VM destroyed after build (destroy: true)")
    else:
        click.echo(f"✗ Clone failed: {result.error}", err=True)
        if result.validation:
            for error in result.validation.errors:
                click.echo(f"  - {error}", err=True)

    if not result.success:
        if result.validation and not result.validation.valid:
            sys.exit(ConfigurationError(result.error or "", result.validation.errors).exit_code)
        sys.exit(1)


@cli.group()
def config() -> None:
    """Manage build files."""
    pass


@config.command("show")
@click.pass_context
def config_show(ctx: Any) -> None:
    """Display the resolved build configuration."""
    build = load_build(ctx)
    click.echo(yaml.safe_dump(build.model_dump(), default_flow_style=False, sort_keys=False))


@config.command("init")
@click.option("--path", "path", default="build.yaml", help="Where to write the build file")
@click.option("--overwrite", is_flag=True, help="Replace an existing file")
def config_init(path: str, overwrite: bool) -> None:
    """Write a sample build file."""
    config_file = Path(path).expanduser()
    if config_file.exists() and not overwrite:
        click.echo(f"{config_file} already exists, use --overwrite", err=True)
        sys.exit(1)

    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w") as f:
        yaml.safe_dump(SAMPLE_BUILD, f, default_flow_style=False, sort_keys=False)

    click.echo(f"Build file initialized at {config_file}")


if __name__ == "__main__":
    cli()
