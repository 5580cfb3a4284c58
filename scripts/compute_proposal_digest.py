#!/usr/bin/python3

import click

from governance.constants import CHAIN_IDS, VoteType
from governance.digest import ballot_digest, hash_ballot, hash_struct, to_hex
from governance.domain import domain_for_contract
from governance.options import (
    governance_option,
    params_option,
    registry_option,
    ronin_network_option,
    support_option,
)
from governance.params import ProposalParameters
from governance.types import MinInt


@click.command(name="compute-proposal-digest")
@params_option
@registry_option
@governance_option
@ronin_network_option
@support_option
@click.option(
    "--nonce",
    help="Proposal nonce; overrides the one in the params file",
    type=MinInt(1),
    required=False,
)
def cli(params_filepath, registry_filepath, governance, ronin_network, support, nonce):
    """Compute the proposal hash and the ballot digest voters sign for it."""
    parameters = ProposalParameters.from_yaml(
        filepath=params_filepath, registry_filepath=registry_filepath
    )
    proposal = parameters.build(nonce=nonce)

    governance = governance or parameters.governance
    domain = domain_for_contract(governance, ronin_chain_id=CHAIN_IDS[ronin_network])
    domain_separator = domain.separator()

    support = VoteType[support.upper()]
    proposal_hash = hash_struct(proposal)

    click.secho(f"\nProposal '{parameters.name}' ({parameters.kind})", fg="green")
    click.echo(f"    nonce: {proposal.nonce}")
    click.echo(f"    chain_id: {proposal.chain_id}")
    click.echo(f"    instructions: {len(parameters.instructions)}")
    click.echo(f"    proposal hash: {to_hex(proposal_hash)}")
    click.secho(f"\n{governance} domain", fg="yellow")
    click.echo(f"    {domain.type_string}")
    click.echo(f"    domain separator: {to_hex(domain_separator)}")
    click.secho(f"\nBallot ({support.name})", fg="cyan")
    click.echo(f"    ballot hash: {to_hex(hash_ballot(proposal_hash, support))}")
    click.echo(f"    digest: {to_hex(ballot_digest(domain_separator, proposal_hash, support))}")


if __name__ == "__main__":
    cli()
