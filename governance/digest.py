"""
Struct hashes and signing digests for governance proposals and ballots.

Every struct is hashed as keccak256(abi.encode(typeHash, field, ...)) where
variable-length arrays are first collapsed into keccak256 of their
fixed-width element encodings. The value that is actually signed is the
EIP-712 digest binding a struct hash to a domain separator.

Nothing in this module checks business rules (nonces, expiry, whether a
calldata makes sense for its target); the verifying contract does that.
"""

from typing import Sequence

from eth_abi import encode
from eth_utils import encode_hex, keccak, to_canonical_address
from hexbytes import HexBytes

from governance.constants import (
    BALLOT_TYPE_HASH,
    BRIDGE_OPERATORS_BALLOT_TYPE_HASH,
    EIP712_PREFIX,
    GLOBAL_PROPOSAL_TYPE_HASH,
    PROPOSAL_TYPE_HASH,
    WEIGHTED_ADDRESS_TYPE_HASH,
)
from governance.proposal import (
    Address,
    Ballot,
    BridgeOperatorsBallot,
    GlobalProposalDetail,
    InvalidProposal,
    ProposalDetail,
    WeightedAddress,
)
from governance.receipt import Receipt, hash_receipt

PROPOSAL_PARAM_TYPES = ["bytes32", "uint256", "uint256", "bytes32", "bytes32", "bytes32", "bytes32"]
GLOBAL_PROPOSAL_PARAM_TYPES = PROPOSAL_PARAM_TYPES
BALLOT_PARAM_TYPES = ["bytes32", "bytes32", "uint8"]
WEIGHTED_ADDRESS_PARAM_TYPES = ["bytes32", "address", "uint256"]
BRIDGE_OPERATORS_BALLOT_PARAM_TYPES = ["bytes32", "uint256", "bytes32"]


def _hash_array(abi_type: str, items: Sequence) -> HexBytes:
    # an empty array encodes to b"" and hashes to keccak256("")
    return HexBytes(keccak(encode([abi_type] * len(items), list(items))))


def _hash_addresses(addresses: Sequence[Address]) -> HexBytes:
    return _hash_array("address", [to_canonical_address(a) for a in addresses])


def _hash_calldatas(calldatas: Sequence[bytes]) -> HexBytes:
    return _hash_array("bytes32", [keccak(HexBytes(c)) for c in calldatas])


def _to_bytes32(name: str, value) -> HexBytes:
    value = HexBytes(value)
    if len(value) != 32:
        raise InvalidProposal(f"{name} must be 32 bytes long, got {len(value)}")
    return value


def hash_proposal(proposal: ProposalDetail) -> HexBytes:
    proposal.validate()
    encoded = encode(
        PROPOSAL_PARAM_TYPES,
        [
            PROPOSAL_TYPE_HASH,
            proposal.nonce,
            proposal.chain_id,
            _hash_addresses(proposal.targets),
            _hash_array("uint256", proposal.values),
            _hash_calldatas(proposal.calldatas),
            _hash_array("uint256", proposal.gas_amounts),
        ],
    )
    return HexBytes(keccak(encoded))


def hash_global_proposal(proposal: GlobalProposalDetail) -> HexBytes:
    proposal.validate()
    encoded = encode(
        GLOBAL_PROPOSAL_PARAM_TYPES,
        [
            GLOBAL_PROPOSAL_TYPE_HASH,
            proposal.nonce,
            proposal.chain_id,
            _hash_array("uint8", [int(option) for option in proposal.target_options]),
            _hash_array("uint256", proposal.values),
            _hash_calldatas(proposal.calldatas),
            _hash_array("uint256", proposal.gas_amounts),
        ],
    )
    return HexBytes(keccak(encoded))


def hash_ballot(proposal_hash: bytes, support: int) -> HexBytes:
    ballot = Ballot(proposal_hash=proposal_hash, support=support)
    ballot.validate()
    encoded = encode(
        BALLOT_PARAM_TYPES,
        [BALLOT_TYPE_HASH, HexBytes(proposal_hash), int(support)],
    )
    return HexBytes(keccak(encoded))


def hash_weighted_address(operator: WeightedAddress) -> HexBytes:
    encoded = encode(
        WEIGHTED_ADDRESS_PARAM_TYPES,
        [WEIGHTED_ADDRESS_TYPE_HASH, to_canonical_address(operator.addr), operator.weight],
    )
    return HexBytes(keccak(encoded))


def hash_bridge_operators_ballot(period: int, operators: Sequence[WeightedAddress]) -> HexBytes:
    """
    Hashes a snapshot of bridge operator weights. Operators are committed to
    in the given order; reordering them yields a different hash.
    """
    BridgeOperatorsBallot(period=period, operators=list(operators)).validate()
    operators = [WeightedAddress(*operator) for operator in operators]
    operator_hashes = [hash_weighted_address(operator) for operator in operators]
    encoded = encode(
        BRIDGE_OPERATORS_BALLOT_PARAM_TYPES,
        [
            BRIDGE_OPERATORS_BALLOT_TYPE_HASH,
            period,
            _hash_array("bytes32", operator_hashes),
        ],
    )
    return HexBytes(keccak(encoded))


def compute_signing_digest(domain_separator: bytes, struct_hash: bytes) -> HexBytes:
    """Returns keccak256("\\x19\\x01" || domainSeparator || structHash)."""
    domain_separator = _to_bytes32("domain_separator", domain_separator)
    struct_hash = _to_bytes32("struct_hash", struct_hash)
    return HexBytes(keccak(EIP712_PREFIX + domain_separator + struct_hash))


def hash_struct(value) -> HexBytes:
    """Hashes any governance struct, selecting the scheme by its concrete type."""
    if isinstance(value, ProposalDetail):
        return hash_proposal(value)
    elif isinstance(value, GlobalProposalDetail):
        return hash_global_proposal(value)
    elif isinstance(value, Ballot):
        return hash_ballot(value.proposal_hash, value.support)
    elif isinstance(value, BridgeOperatorsBallot):
        return hash_bridge_operators_ballot(value.period, value.operators)
    elif isinstance(value, Receipt):
        return hash_receipt(value)
    raise TypeError(f"Cannot hash value of type {type(value).__name__}")


def ballot_digest(domain_separator: bytes, proposal_hash: bytes, support: int) -> HexBytes:
    return compute_signing_digest(domain_separator, hash_ballot(proposal_hash, support))


def bridge_operators_ballot_digest(
    domain_separator: bytes, period: int, operators: Sequence[WeightedAddress]
) -> HexBytes:
    struct_hash = hash_bridge_operators_ballot(period, operators)
    return compute_signing_digest(domain_separator, struct_hash)


def to_hex(digest: bytes) -> str:
    """Formats a digest as 0x followed by 64 lowercase hex digits."""
    return encode_hex(_to_bytes32("digest", digest))
