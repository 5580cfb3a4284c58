#!/usr/bin/python3
from pathlib import Path

import click

from governance.registry import read_registry, verify_addresses
from governance.utils import _load_yaml


@click.command(name="verify-addresses")
@click.option(
    "--registry",
    "-r",
    "registry_filepath",
    help="Filepath of the contract registry",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)
@click.option(
    "--expected",
    "-e",
    "expected_filepath",
    help="YAML file mapping contract names to their expected addresses",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)
@click.option(
    "--chain-id",
    "-c",
    help="Chain id of the registry entries to verify",
    type=int,
    required=True,
)
def cli(registry_filepath, expected_filepath, chain_id):
    """Check that a registry holds the expected contract addresses."""
    entries = read_registry(filepath=registry_filepath)
    expected = _load_yaml(expected_filepath)
    if not isinstance(expected, dict):
        raise click.BadParameter(
            "must map contract names to addresses", param_hint="--expected"
        )
    try:
        verified = verify_addresses(entries=entries, chain_id=chain_id, expected=expected)
    except ValueError as e:
        raise click.ClickException(str(e))
    for name in verified:
        click.secho(f"    {name} ✓", fg="green")


if __name__ == "__main__":
    cli()
