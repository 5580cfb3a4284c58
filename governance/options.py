from pathlib import Path

import click

from governance.constants import GOVERNANCE_CONTRACTS, RONIN_MAINNET, RONIN_NETWORKS, VoteType

params_option = click.option(
    "--params",
    "-p",
    "params_filepath",
    help="Filepath of the proposal parameters YAML file",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=True,
)

registry_option = click.option(
    "--registry",
    "-r",
    "registry_filepath",
    help="Filepath of the contract registry; defaults to the one named in the params file",
    type=click.Path(dir_okay=False, exists=True, path_type=Path),
    required=False,
)

ronin_network_option = click.option(
    "--ronin-network",
    "-n",
    help="Ronin network whose chain id salts the bridge manager domain",
    type=click.Choice(RONIN_NETWORKS),
    default=RONIN_MAINNET,
    show_default=True,
)

governance_option = click.option(
    "--governance",
    "-g",
    help="Governance contract whose signing domain is used",
    type=click.Choice(GOVERNANCE_CONTRACTS),
    required=False,
)

support_option = click.option(
    "--support",
    "-s",
    help="Vote choice",
    type=click.Choice([v.name for v in VoteType], case_sensitive=False),
    default=VoteType.FOR.name,
    show_default=True,
)

auto_option = click.option(
    "--auto",
    help="Automatically sign transactions.",
    is_flag=True,
)
