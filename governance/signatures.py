from typing import List, NamedTuple, Sequence

from eth_account import Account
from eth_account.messages import SignableMessage, encode_typed_data
from eth_typing import ChecksumAddress
from eth_utils import encode_hex, to_checksum_address, to_int
from hexbytes import HexBytes

from governance.constants import VoteType
from governance.domain import Domain

BALLOT_TYPES = {
    "Ballot": [
        {"name": "proposalHash", "type": "bytes32"},
        {"name": "support", "type": "uint8"},
    ],
}

BRIDGE_OPERATORS_BALLOT_TYPES = {
    "BridgeOperatorsBallot": [
        {"name": "period", "type": "uint256"},
        {"name": "operators", "type": "WeightedAddress[]"},
    ],
    "WeightedAddress": [
        {"name": "addr", "type": "address"},
        {"name": "weight", "type": "uint256"},
    ],
}


class Signature(NamedTuple):
    """(v, r, s) as expected by the governance contracts' Signature struct."""

    v: int
    r: bytes
    s: bytes


def _to_bytes32(value) -> bytes:
    if isinstance(value, int):
        return value.to_bytes(32, "big")
    return bytes(HexBytes(value)).rjust(32, b"\x00")


def _to_signature(signed) -> Signature:
    return Signature(v=int(signed.v), r=_to_bytes32(signed.r), s=_to_bytes32(signed.s))


def ballot_typed_data(domain: Domain, proposal_hash: bytes, support: int) -> SignableMessage:
    return encode_typed_data(
        domain_data=domain.as_dict(),
        message_types=BALLOT_TYPES,
        message_data={"proposalHash": bytes(HexBytes(proposal_hash)), "support": int(support)},
    )


def bridge_operators_ballot_typed_data(
    domain: Domain, period: int, operators: Sequence
) -> SignableMessage:
    message_operators = [
        {"addr": to_checksum_address(addr), "weight": weight} for addr, weight in operators
    ]
    return encode_typed_data(
        domain_data=domain.as_dict(),
        message_types=BRIDGE_OPERATORS_BALLOT_TYPES,
        message_data={"period": period, "operators": message_operators},
    )


def sign_ballot(account, domain: Domain, proposal_hash: bytes, support: int) -> Signature:
    """
    Signs a ballot with either an eth-account local account or an ape account;
    both expose sign_message(SignableMessage).
    """
    signable_message = ballot_typed_data(domain, proposal_hash, support)
    signed = account.sign_message(signable_message)
    if signed is None:
        raise ValueError(f"Account {account.address} refused to sign the ballot")
    return _to_signature(signed)


def recover_ballot_signer(
    domain: Domain, proposal_hash: bytes, support: int, signature: Signature
) -> ChecksumAddress:
    signable_message = ballot_typed_data(domain, proposal_hash, support)
    vrs = (signature.v, to_int(signature.r), to_int(signature.s))
    recovered = Account.recover_message(signable_message, vrs=vrs)
    return to_checksum_address(recovered)


def generate_signatures(
    accounts: Sequence,
    domain: Domain,
    proposal_hash: bytes,
    support: int = VoteType.FOR,
) -> List[Signature]:
    signatures = list()
    for account in accounts:
        pretty_hash = encode_hex(HexBytes(proposal_hash))
        print(f"Signing ballot for {pretty_hash} with {account.address}...")
        signatures.append(sign_ballot(account, domain, proposal_hash, support))
    return signatures
