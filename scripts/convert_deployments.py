#!/usr/bin/python3
from pathlib import Path

import click

from governance.registry import read_hardhat_deployments, write_registry


@click.command(name="convert-deployments")
@click.option(
    "--deployments",
    "-d",
    "deployments_dir",
    help="hardhat-deploy deployments directory of a single network",
    type=click.Path(file_okay=False, exists=True, path_type=Path),
    required=True,
)
@click.option(
    "--chain-id",
    "-c",
    help="Chain id of the deployments; read from the .chainId file when omitted",
    type=int,
    required=False,
)
@click.option(
    "--output-registry",
    "-o",
    help="Filepath of output registry file",
    type=click.Path(dir_okay=False, exists=False, path_type=Path),
    required=True,
)
def cli(deployments_dir, chain_id, output_registry):
    """Convert hardhat deployment artifacts into a contract registry."""
    entries = read_hardhat_deployments(directory=deployments_dir, chain_id=chain_id)
    filepath = write_registry(entries=entries, filepath=output_registry)
    click.echo(f"Wrote {len(entries)} entries to {filepath}")


if __name__ == "__main__":
    cli()
