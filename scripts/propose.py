#!/usr/bin/python3

import click
from ape import accounts, networks
from ape.cli import ConnectedProviderCommand, account_option, network_option

from governance.digest import hash_struct, to_hex
from governance.domain import domain_for_contract, ronin_chain_id_for
from governance.options import auto_option, params_option, registry_option
from governance.params import ProposalParameters
from governance.registry import get_entry, read_registry
from governance.transactor import Proposer, check_chain_id, contract_from_entry
from governance.types import MinInt
from governance.utils import _load_yaml, get_registry_filepath


@click.command(cls=ConnectedProviderCommand, name="propose")
@account_option()
@network_option(required=True)
@params_option
@registry_option
@click.option(
    "--voter",
    "-v",
    "voter_aliases",
    help="Alias of an ape account that signs a 'for' ballot; repeat for every voter",
    multiple=True,
    required=True,
)
@click.option(
    "--nonce",
    help="Proposal nonce; defaults to the params file, then to the next on-chain round",
    type=MinInt(1),
    required=False,
)
@auto_option
def cli(account, network, params_filepath, registry_filepath, voter_aliases, nonce, auto):
    """Submit a proposal together with its voters' ballots in a single transaction."""
    click.echo(f"Connected to {network.name} network.")
    connected_chain_id = networks.provider.network.chain_id

    if registry_filepath is None:
        registry_filepath = get_registry_filepath(_load_yaml(params_filepath))
    parameters = ProposalParameters.from_yaml(
        filepath=params_filepath, registry_filepath=registry_filepath
    )
    if not parameters.is_global:
        check_chain_id(parameters.chain_id)

    entries = read_registry(filepath=registry_filepath)
    governance_entry = get_entry(
        entries=entries, chain_id=connected_chain_id, name=parameters.governance
    )
    domain = domain_for_contract(
        parameters.governance, ronin_chain_id=ronin_chain_id_for(connected_chain_id)
    )
    proposer = Proposer(
        governance=contract_from_entry(governance_entry),
        domain=domain,
        account=account,
        autosign=auto,
    )

    if nonce is None:
        nonce = parameters.nonce
    if nonce is None:
        nonce = proposer.next_nonce(parameters.chain_id)
        click.echo(f"Using next on-chain nonce {nonce}.")
    proposal = parameters.build(nonce=nonce)

    voters = [accounts.load(alias) for alias in voter_aliases]
    proposer.propose(proposal=proposal, voters=voters, name=parameters.name)

    status = proposer.vote_status(proposal.chain_id, proposal.nonce)
    click.secho(
        f"Proposal {to_hex(hash_struct(proposal))} is {status.name.lower()}.", fg="green"
    )


if __name__ == "__main__":
    cli()
