from typing import Any, Dict, List, Optional, Sequence, Tuple

from ape import Contract, networks
from ape.api import AccountAPI, ReceiptAPI
from ape.cli.choices import select_account
from ape.contracts.base import ContractInstance, ContractTransactionHandler
from eth_abi import is_encodable
from eth_utils import encode_hex
from ethpm_types import MethodABI

from governance.confirm import _confirm_proposal, _continue
from governance.constants import VoteStatus, VoteType
from governance.digest import hash_struct, to_hex
from governance.domain import Domain
from governance.params import Proposal
from governance.proposal import GlobalProposalDetail
from governance.registry import RegistryEntry
from governance.signatures import generate_signatures


def _match_method_abi(
    method_abis: List[MethodABI], args: Sequence[Any]
) -> Tuple[MethodABI, Dict[str, Any]]:
    """Finds the overload whose inputs can encode the arguments; struct inputs included."""
    if not method_abis:
        raise ValueError("No method abis provided for validation of args")

    for abi in method_abis:
        if len(abi.inputs) != len(args):
            continue
        named_args = dict()
        for arg, abi_input in zip(args, abi.inputs):
            if not is_encodable(abi_input.canonical_type, arg):
                break
            named_args[abi_input.name or f"arg{len(named_args)}"] = arg
        else:
            return abi, named_args
    raise ValueError(
        f"Could not find ABI for '{method_abis[0].name}' with {len(args)} arg(s) and given type(s)"
    )


def _format_arg(value: Any) -> str:
    if isinstance(value, bytes):
        return encode_hex(value)
    if isinstance(value, (list, tuple)):
        return f"[{', '.join(_format_arg(v) for v in value)}]"
    return str(value)


def contract_from_entry(entry: RegistryEntry) -> ContractInstance:
    """Returns an ape contract instance for a registry entry."""
    return Contract(entry.address, abi=entry.abi)


def check_chain_id(chain_id: int) -> None:
    """Checks that a per-chain proposal targets the connected network."""
    connected_chain_id = networks.provider.network.chain_id
    if chain_id != connected_chain_id:
        raise ValueError(
            f"chain_id in params file ({chain_id}) does not match "
            f"chain_id of current network ({connected_chain_id})."
        )


class Transactor:
    """
    An ape account that prints every call it is about to make and, unless
    autosigning, waits for confirmation before sending it.
    """

    def __init__(self, account: Optional[AccountAPI] = None, autosign: bool = False):
        self._account = account if account is not None else select_account()
        if autosign:
            print("WARNING: Autosign is enabled. Transactions will be signed automatically.")
        self._autosign = autosign
        self._account.set_autosign(autosign)

    @property
    def account(self) -> AccountAPI:
        return self._account

    def transact(self, method: ContractTransactionHandler, *args) -> ReceiptAPI:
        abi, named_args = _match_method_abi(method_abis=method.abis, args=args)
        contract = method.contract
        label = contract.contract_type.name or "contract"
        print(f"\nTransacting {label}[{contract.address[:10]}].{abi.selector}")
        for name, value in named_args.items():
            print(f"\t{name}={_format_arg(value)}")
        if not self._autosign:
            _continue()

        return method(*args, sender=self._account)


class Proposer(Transactor):
    """
    Represents an ape account that submits proposals to a governance contract
    together with the ballots of its voters.
    """

    def __init__(
        self,
        governance: ContractInstance,
        domain: Domain,
        account: Optional[AccountAPI] = None,
        autosign: bool = False,
    ):
        super().__init__(account, autosign)
        self.governance = governance
        self.domain = domain

    def next_nonce(self, chain_id: int) -> int:
        """Returns the nonce the governance contract expects for the next proposal."""
        return int(self.governance.round(chain_id)) + 1

    def vote_status(self, chain_id: int, nonce: int) -> VoteStatus:
        vote = self.governance.vote(chain_id, nonce)
        return VoteStatus(int(vote[0]))

    def propose(
        self,
        proposal: Proposal,
        voters: Sequence[AccountAPI],
        name: Optional[str] = None,
    ) -> ReceiptAPI:
        """Signs the proposal hash with every voter and submits everything in one transaction."""
        if not voters:
            raise ValueError("At least one voter is required to cast votes")

        name = name or f"#{proposal.nonce}"
        if not self._autosign:
            _confirm_proposal(name, proposal)

        proposal_hash = hash_struct(proposal)
        print(f"Proposal hash: {to_hex(proposal_hash)}")
        signatures = generate_signatures(voters, self.domain, proposal_hash, VoteType.FOR)
        supports = [VoteType.FOR] * len(signatures)

        if isinstance(proposal, GlobalProposalDetail):
            method = self.governance.proposeGlobalProposalStructAndCastVotes
        else:
            method = self.governance.proposeProposalStructAndCastVotes
        return self.transact(method, proposal, supports, signatures)
