from typing import NamedTuple, Sequence, Union

from eth_utils import is_address
from hexbytes import HexBytes

from governance.constants import UINT256_MAX, TargetOption, VoteType

Address = Union[str, bytes]


class InvalidProposal(ValueError):
    """Raised when a governance struct does not have a hashable shape."""


class ProposalDetail(NamedTuple):
    """A batch of instructions executed atomically on a single chain."""

    nonce: int
    chain_id: int
    targets: Sequence[Address]
    values: Sequence[int]
    calldatas: Sequence[bytes]
    gas_amounts: Sequence[int]

    def validate(self) -> None:
        _validate_uint256("nonce", self.nonce)
        _validate_uint256("chain_id", self.chain_id)
        _validate_lengths(
            targets=self.targets,
            values=self.values,
            calldatas=self.calldatas,
            gas_amounts=self.gas_amounts,
        )
        for index, target in enumerate(self.targets):
            _validate_address(f"targets[{index}]", target)
        _validate_instructions(self.values, self.calldatas, self.gas_amounts)


class GlobalProposalDetail(NamedTuple):
    """
    A batch of instructions addressed by role rather than by address, so that
    the same proposal is valid on every chain that resolves the roles. Such
    proposals conventionally live in the nonce space of chain_id 0.
    """

    nonce: int
    chain_id: int
    target_options: Sequence[int]
    values: Sequence[int]
    calldatas: Sequence[bytes]
    gas_amounts: Sequence[int]

    def validate(self) -> None:
        _validate_uint256("nonce", self.nonce)
        _validate_uint256("chain_id", self.chain_id)
        _validate_lengths(
            target_options=self.target_options,
            values=self.values,
            calldatas=self.calldatas,
            gas_amounts=self.gas_amounts,
        )
        for index, option in enumerate(self.target_options):
            try:
                TargetOption(option)
            except ValueError:
                raise InvalidProposal(
                    f"target_options[{index}] is not a target option: {option!r}"
                )
        _validate_instructions(self.values, self.calldatas, self.gas_amounts)


class Ballot(NamedTuple):
    proposal_hash: bytes
    support: int

    def validate(self) -> None:
        _validate_bytes32("proposal_hash", self.proposal_hash)
        _validate_vote_type(self.support)


class WeightedAddress(NamedTuple):
    addr: Address
    weight: int

    def validate(self) -> None:
        _validate_address("addr", self.addr)
        _validate_uint256("weight", self.weight)


class BridgeOperatorsBallot(NamedTuple):
    """Snapshot of bridge operator weights attested for a reward period."""

    period: int
    operators: Sequence[WeightedAddress]

    @classmethod
    def from_lists(
        cls, period: int, operators: Sequence[Address], weights: Sequence[int]
    ) -> "BridgeOperatorsBallot":
        _validate_lengths(operators=operators, weights=weights)
        entries = [WeightedAddress(addr=o, weight=w) for o, w in zip(operators, weights)]
        return cls(period=period, operators=entries)

    def validate(self) -> None:
        _validate_uint256("period", self.period)
        for index, operator in enumerate(self.operators):
            if not isinstance(operator, WeightedAddress):
                if len(operator) != 2:
                    raise InvalidProposal(
                        f"operators[{index}] must be an (address, weight) pair, got {operator!r}"
                    )
                operator = WeightedAddress(*operator)
            try:
                operator.validate()
            except InvalidProposal as e:
                raise InvalidProposal(f"operators[{index}]: {e}") from e


def _validate_lengths(**fields: Sequence) -> None:
    lengths = {name: len(value) for name, value in fields.items()}
    if len(set(lengths.values())) > 1:
        pretty_lengths = ", ".join(f"{name}={length}" for name, length in lengths.items())
        raise InvalidProposal(f"Array length mismatch: {pretty_lengths}")


def _validate_instructions(
    values: Sequence[int], calldatas: Sequence[bytes], gas_amounts: Sequence[int]
) -> None:
    for index, (value, calldata, gas_amount) in enumerate(zip(values, calldatas, gas_amounts)):
        _validate_uint256(f"values[{index}]", value)
        _validate_uint256(f"gas_amounts[{index}]", gas_amount)
        try:
            HexBytes(calldata)
        except (TypeError, ValueError):
            raise InvalidProposal(f"calldatas[{index}] is not a byte string: {calldata!r}")


def _validate_uint256(name: str, value: int) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidProposal(f"{name} must be an integer, got {value!r}")
    if not 0 <= value <= UINT256_MAX:
        raise InvalidProposal(f"{name} is out of uint256 range: {value}")


def _validate_bytes32(name: str, value: bytes) -> None:
    try:
        value = HexBytes(value)
    except (TypeError, ValueError):
        raise InvalidProposal(f"{name} is not a byte string: {value!r}")
    if len(value) != 32:
        raise InvalidProposal(f"{name} must be 32 bytes long, got {len(value)}")


def _validate_address(name: str, value: Address) -> None:
    if isinstance(value, bytes):
        valid = len(value) == 20
    else:
        valid = is_address(value)
    if not valid:
        raise InvalidProposal(f"{name} is not a valid address: {value!r}")


def _validate_vote_type(value: int) -> None:
    if isinstance(value, bool):
        raise InvalidProposal(f"support is not a vote type: {value!r}")
    try:
        VoteType(value)
    except ValueError:
        raise InvalidProposal(f"support is not a vote type: {value!r}")
