import typing
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, NamedTuple, Optional, Sequence, Union

from eth_abi import encode, is_encodable
from eth_utils import function_signature_to_4byte_selector, is_address, to_checksum_address
from hexbytes import HexBytes

from governance.constants import (
    DEFAULT_GAS_AMOUNT,
    FUNCTION_DELEGATE_CALL_SIGNATURE,
    GLOBAL_PROPOSAL_CHAIN_ID,
    UPGRADE_GAS_AMOUNT,
    UPGRADE_TO_SIGNATURE,
    TargetOption,
)
from governance.proposal import GlobalProposalDetail, InvalidProposal, ProposalDetail
from governance.registry import RegistryEntry, addresses_by_name, read_registry
from governance.utils import _load_yaml, get_registry_filepath, validate_config

Proposal = Union[ProposalDetail, GlobalProposalDetail]


class VariableContext:
    def __init__(
        self,
        contract_addresses: Dict[str, str],
        constants: typing.Dict[str, Any] = None,
    ):
        self.contract_addresses = contract_addresses or dict()
        self.constants = constants or dict()


# Variables


class Variable(ABC):
    VARIABLE_PREFIX = "$"

    @abstractmethod
    def resolve(self) -> Any:
        raise NotImplementedError

    @classmethod
    def is_variable(cls, param: Any) -> bool:
        """Returns True if the param is a variable."""
        result = isinstance(param, str) and param.startswith(cls.VARIABLE_PREFIX)
        return result


class Constant(Variable):
    def __init__(self, constant_name: str, context: VariableContext):
        try:
            self.constant_value = context.constants[constant_name]
        except KeyError:
            raise ValueError(f"Constant '{constant_name}' not found in params file.")

    @classmethod
    def is_constant(cls, value: str) -> bool:
        """Returns True if the variable is a params file constant."""
        return value.isupper()

    def resolve(self) -> Any:
        return self.constant_value


class ContractName(Variable):
    def __init__(self, contract_name: str, context: VariableContext):
        if contract_name not in context.contract_addresses:
            raise ValueError(f"Contract name {contract_name} not found in registry")

        self.contract_name = contract_name
        self.address = context.contract_addresses[contract_name]

    def resolve(self) -> Any:
        """Resolves a contract address."""
        return self.address


def _variable_from_value(variable: str, context: VariableContext) -> Variable:
    variable = variable[len(Variable.VARIABLE_PREFIX) :]
    if Constant.is_constant(variable):
        return Constant(variable, context)
    else:
        return ContractName(variable, context)


def _process_raw_value(value: Any, context: VariableContext) -> Any:
    if isinstance(value, list):
        return [_process_raw_value(v, context) for v in value]

    if Variable.is_variable(value):
        value = _variable_from_value(value, context)

    return value


def _resolve_param(value: Any) -> Any:
    """Resolves a single parameter value or a list of parameter values."""
    if isinstance(value, list):
        return [_resolve_param(v) for v in value]

    if isinstance(value, Variable):
        return value.resolve()

    return value  # literally a value


# ABI encoding


def _split_types(types: str) -> List[str]:
    """Splits a comma separated list of ABI types, keeping tuple types intact."""
    result, depth, current = list(), 0, ""
    for char in types:
        if char == "," and depth == 0:
            result.append(current.strip())
            current = ""
            continue
        if char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
        current += char
    if current.strip():
        result.append(current.strip())
    return result


def parse_signature(signature: str) -> typing.Tuple[str, List[str]]:
    """Returns the function name and argument types of e.g. 'upgradeTo(address)'."""
    signature = signature.replace(" ", "")
    if "(" not in signature or not signature.endswith(")"):
        raise ValueError(f"Malformed function signature '{signature}'")
    name, _, types = signature.partition("(")
    return name, _split_types(types[:-1])


def _coerce_arg(abi_type: str, value: Any) -> Any:
    """Converts YAML friendly values (hex strings, decimal strings) to encodable ones."""
    if abi_type.endswith("]"):
        element_type = abi_type[: abi_type.rindex("[")]
        return [_coerce_arg(element_type, v) for v in value]
    if abi_type.startswith("("):
        component_types = _split_types(abi_type[1:-1])
        return tuple(_coerce_arg(t, v) for t, v in zip(component_types, value))
    if abi_type.startswith("bytes") and isinstance(value, str):
        return bytes(HexBytes(value))
    if abi_type.startswith(("uint", "int")) and isinstance(value, str):
        return int(value, 0)
    if abi_type == "address" and isinstance(value, str) and is_address(value.lower()):
        return to_checksum_address(value)
    return value


def encode_call(signature: str, args: Sequence[Any]) -> HexBytes:
    """ABI-encodes a function call, selector included."""
    _, abi_types = parse_signature(signature)
    if len(abi_types) != len(args):
        raise ValueError(
            f"'{signature}' expects {len(abi_types)} argument(s), got {len(args)}"
        )
    coerced_args = [_coerce_arg(t, a) for t, a in zip(abi_types, args)]
    for position, (abi_type, arg) in enumerate(zip(abi_types, coerced_args)):
        if not is_encodable(abi_type, arg):
            raise ValueError(
                f"Argument at position {position} of '{signature}' has a value '{arg}' "
                f"whose type does not match expected ABI type '{abi_type}'"
            )
    selector = function_signature_to_4byte_selector(signature.replace(" ", ""))
    return HexBytes(selector + encode(abi_types, coerced_args))


def function_delegate_call_data(data: bytes) -> HexBytes:
    return encode_call(FUNCTION_DELEGATE_CALL_SIGNATURE, [bytes(HexBytes(data))])


# Proposal builders


def function_delegate_calls(
    chain_id: int,
    nonce: int,
    targets: Sequence[str],
    datas: Sequence[bytes],
    gas_amount: int = DEFAULT_GAS_AMOUNT,
) -> ProposalDetail:
    """One functionDelegateCall instruction per target, executed in order."""
    if len(targets) != len(datas) or len(targets) == 0:
        raise InvalidProposal("invalid array length")
    return ProposalDetail(
        nonce=nonce,
        chain_id=chain_id,
        targets=list(targets),
        values=[0] * len(targets),
        calldatas=[function_delegate_call_data(data) for data in datas],
        gas_amounts=[gas_amount] * len(targets),
    )


def function_delegate_calls_global(
    nonce: int,
    target_options: Sequence[TargetOption],
    datas: Sequence[bytes],
    gas_amount: int = DEFAULT_GAS_AMOUNT,
) -> GlobalProposalDetail:
    if len(target_options) != len(datas) or len(target_options) == 0:
        raise InvalidProposal("invalid array length")
    return GlobalProposalDetail(
        nonce=nonce,
        chain_id=GLOBAL_PROPOSAL_CHAIN_ID,
        target_options=list(target_options),
        values=[0] * len(target_options),
        calldatas=[function_delegate_call_data(data) for data in datas],
        gas_amounts=[gas_amount] * len(target_options),
    )


def upgrade_proposal(chain_id: int, nonce: int, proxy: str, implementation: str) -> ProposalDetail:
    return ProposalDetail(
        nonce=nonce,
        chain_id=chain_id,
        targets=[proxy],
        values=[0],
        calldatas=[encode_call(UPGRADE_TO_SIGNATURE, [implementation])],
        gas_amounts=[UPGRADE_GAS_AMOUNT],
    )


def upgrade_proposal_global(
    nonce: int, target_option: TargetOption, implementation: str
) -> GlobalProposalDetail:
    return GlobalProposalDetail(
        nonce=nonce,
        chain_id=GLOBAL_PROPOSAL_CHAIN_ID,
        target_options=[target_option],
        values=[0],
        calldatas=[encode_call(UPGRADE_TO_SIGNATURE, [implementation])],
        gas_amounts=[UPGRADE_GAS_AMOUNT],
    )


# Params files


class Instruction(NamedTuple):
    target: Optional[str]
    target_option: Optional[TargetOption]
    value: int
    calldata: HexBytes
    gas_amount: int


def _parse_target_option(value: Any) -> TargetOption:
    if isinstance(value, str):
        try:
            return TargetOption[value.upper()]
        except KeyError:
            raise ValueError(f"Unknown target option '{value}'")
    return TargetOption(value)


class ProposalParameters:
    """Represents a proposal described by a params file, with variables resolved."""

    class Invalid(ValueError):
        """Raised when the proposal parameters are invalid"""

    def __init__(
        self,
        name: str,
        kind: str,
        governance: str,
        chain_id: int,
        instructions: List[Instruction],
        nonce: Optional[int] = None,
    ):
        self.name = name
        self.kind = kind
        self.governance = governance
        self.chain_id = chain_id
        self.instructions = instructions
        self.nonce = nonce

    @property
    def is_global(self) -> bool:
        return self.kind == "global"

    @classmethod
    def from_yaml(
        cls, filepath: Path, registry_filepath: Optional[Path] = None
    ) -> "ProposalParameters":
        config = _load_yaml(filepath)
        if not isinstance(config, dict):
            raise cls.Invalid(f"Malformed proposal parameters YAML at {filepath}.")
        if registry_filepath is None:
            registry_filepath = get_registry_filepath(config)
        registry_entries = read_registry(registry_filepath)
        return cls.from_config(config=config, registry_entries=registry_entries)

    @classmethod
    def from_config(
        cls, config: typing.Dict, registry_entries: List[RegistryEntry]
    ) -> "ProposalParameters":
        print("Processing proposal parameters...")
        validate_config(config)
        proposal_config = config["proposal"]
        kind = proposal_config.get("kind", "local")
        chain_id = proposal_config.get("chain_id")
        if chain_id is None:
            chain_id = GLOBAL_PROPOSAL_CHAIN_ID
        chain_id = int(chain_id)

        # global proposals address contracts by role; names still resolve for call args
        registry_chain_id = int(proposal_config.get("registry_chain_id", chain_id))
        context = VariableContext(
            contract_addresses=addresses_by_name(registry_entries, registry_chain_id),
            constants=config.get("constants"),
        )

        instructions = list()
        for index, instruction_config in enumerate(config["instructions"]):
            try:
                instruction = cls._process_instruction(instruction_config, kind, context)
            except (ValueError, TypeError, KeyError) as e:
                raise cls.Invalid(f"Instruction #{index}: {e}") from e
            instructions.append(instruction)

        nonce = proposal_config.get("nonce")
        return cls(
            name=proposal_config.get("name", ""),
            kind=kind,
            governance=proposal_config["governance"],
            chain_id=chain_id,
            instructions=instructions,
            nonce=int(nonce) if nonce is not None else None,
        )

    @classmethod
    def _process_instruction(
        cls, instruction_config: Dict, kind: str, context: VariableContext
    ) -> Instruction:
        if not isinstance(instruction_config, dict):
            raise ValueError("Malformed instruction.")

        target, target_option = None, None
        if kind == "global":
            if "target" in instruction_config:
                raise ValueError("global proposals address contracts by 'target_option'")
            target_option = _parse_target_option(instruction_config["target_option"])
        else:
            if "target_option" in instruction_config:
                raise ValueError("local proposals address contracts by 'target'")
            target = _resolve_param(_process_raw_value(instruction_config["target"], context))
            if not is_address(str(target).lower()):
                raise ValueError(f"target '{target}' is not an address")
            target = to_checksum_address(target)

        if "calldata" in instruction_config:
            if "function" in instruction_config:
                raise ValueError("'calldata' and 'function' are mutually exclusive")
            calldata = HexBytes(instruction_config["calldata"])
        else:
            signature = instruction_config["function"]
            raw_args = instruction_config.get("args") or list()
            args = _resolve_param(_process_raw_value(raw_args, context))
            calldata = encode_call(signature, args)

        if instruction_config.get("delegate", False):
            calldata = function_delegate_call_data(calldata)

        return Instruction(
            target=target,
            target_option=target_option,
            value=int(instruction_config.get("value", 0)),
            calldata=calldata,
            gas_amount=int(instruction_config.get("gas", DEFAULT_GAS_AMOUNT)),
        )

    def build(self, nonce: Optional[int] = None) -> Proposal:
        """Assembles the proposal struct; an explicit nonce overrides the params file."""
        nonce = nonce if nonce is not None else self.nonce
        if nonce is None:
            raise self.Invalid(f"No nonce available for proposal '{self.name}'")

        values = [i.value for i in self.instructions]
        calldatas = [i.calldata for i in self.instructions]
        gas_amounts = [i.gas_amount for i in self.instructions]
        if self.is_global:
            return GlobalProposalDetail(
                nonce=nonce,
                chain_id=self.chain_id,
                target_options=[i.target_option for i in self.instructions],
                values=values,
                calldatas=calldatas,
                gas_amounts=gas_amounts,
            )
        return ProposalDetail(
            nonce=nonce,
            chain_id=self.chain_id,
            targets=[i.target for i in self.instructions],
            values=values,
            calldatas=calldatas,
            gas_amounts=gas_amounts,
        )
