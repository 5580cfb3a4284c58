#!/usr/bin/python3

import click

from governance.constants import CHAIN_IDS, GOVERNANCE_CONTRACTS, VoteType
from governance.digest import compute_signing_digest, hash_ballot, to_hex
from governance.domain import domain_for_contract
from governance.options import ronin_network_option, support_option
from governance.types import Bytes32


@click.command(name="ballot-digest")
@ronin_network_option
@support_option
@click.option(
    "--proposal-hash",
    help="Hash of the proposal being voted on",
    type=Bytes32(),
    required=True,
)
@click.option(
    "--governance",
    "-g",
    help="Governance contract whose signing domain is used",
    type=click.Choice(GOVERNANCE_CONTRACTS),
    required=True,
)
def cli(ronin_network, support, proposal_hash, governance):
    """Compute the digest a voter signs for an already known proposal hash."""
    support = VoteType[support.upper()]
    domain = domain_for_contract(governance, ronin_chain_id=CHAIN_IDS[ronin_network])
    ballot_hash = hash_ballot(proposal_hash, support)
    digest = compute_signing_digest(domain.separator(), ballot_hash)

    click.echo(f"ballot hash: {to_hex(ballot_hash)}")
    click.echo(f"digest: {to_hex(digest)}")


if __name__ == "__main__":
    cli()
