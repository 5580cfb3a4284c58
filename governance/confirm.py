from ape.utils import ZERO_ADDRESS
from eth_utils import encode_hex
from hexbytes import HexBytes

from governance.constants import TargetOption
from governance.proposal import GlobalProposalDetail


def _confirm_submission(proposal_name: str) -> None:
    """Asks the user to confirm the submission of a single proposal."""
    answer = input(f"Submit proposal {proposal_name} Y/N? ")
    if answer.lower().strip() == "n":
        print("Aborting submission!")
        exit(-1)


def _continue() -> None:
    """Asks the user to continue."""
    answer = input("Continue Y/N? ")
    if answer.lower().strip() == "n":
        print("Aborting submission!")
        exit(-1)


def _confirm_zero_address() -> None:
    answer = input("Zero Address detected for proposal target; Continue? Y/N? ")
    if answer.lower().strip() == "n":
        print("Aborting submission!")
        exit(-1)


def _print_proposal(proposal_name: str, proposal) -> bool:
    """Prints the instructions of a proposal; returns True if any target is the zero address."""
    print(f"\nInstructions for proposal {proposal_name} (nonce {proposal.nonce})")
    if isinstance(proposal, GlobalProposalDetail):
        targets = [f"option:{TargetOption(option).name}" for option in proposal.target_options]
    else:
        targets = proposal.targets

    contains_zero_address = False
    instructions = zip(targets, proposal.values, proposal.calldatas, proposal.gas_amounts)
    for index, (target, value, calldata, gas_amount) in enumerate(instructions):
        calldata = HexBytes(calldata)
        print(
            f"\t{index}. target={target} value={value} gas={gas_amount} "
            f"selector={encode_hex(calldata[:4])} ({len(calldata)} bytes)"
        )
        if not contains_zero_address:
            contains_zero_address = str(target).lower() == ZERO_ADDRESS
    return contains_zero_address


def _confirm_proposal(proposal_name: str, proposal) -> None:
    """Asks the user to confirm the assembled instructions of a proposal."""
    contains_zero_address = _print_proposal(proposal_name, proposal)
    _confirm_submission(proposal_name)
    if contains_zero_address:
        _confirm_zero_address()
