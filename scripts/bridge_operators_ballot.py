#!/usr/bin/python3

import click

from governance.constants import CHAIN_IDS
from governance.digest import bridge_operators_ballot_digest, hash_bridge_operators_ballot, to_hex
from governance.domain import bridge_manager_domain
from governance.options import ronin_network_option
from governance.types import MinInt, WeightedAddressType


@click.command(name="bridge-operators-ballot")
@ronin_network_option
@click.option(
    "--period",
    help="Period the operator weights are attested for",
    type=MinInt(0),
    required=True,
)
@click.option(
    "--operator",
    "-o",
    "operators",
    help="Bridge operator and its weight as 'address:weight'; order is significant",
    type=WeightedAddressType(),
    multiple=True,
)
def cli(ronin_network, period, operators):
    """Compute the digest bridge operators sign to attest a weight snapshot."""
    domain = bridge_manager_domain(ronin_chain_id=CHAIN_IDS[ronin_network])
    domain_separator = domain.separator()
    struct_hash = hash_bridge_operators_ballot(period, operators)
    digest = bridge_operators_ballot_digest(domain_separator, period, operators)

    click.secho(f"\nBridge operators ballot for period {period}", fg="green")
    for index, operator in enumerate(operators, start=1):
        click.echo(f"    {index}. {operator.addr} weight={operator.weight}")
    click.echo(f"    ballot hash: {to_hex(struct_hash)}")
    click.echo(f"    domain separator: {to_hex(domain_separator)}")
    click.echo(f"    digest: {to_hex(digest)}")


if __name__ == "__main__":
    cli()
