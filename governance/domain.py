from typing import Any, Dict, NamedTuple, Optional

from eth_abi import encode
from eth_utils import keccak, to_canonical_address, to_checksum_address
from hexbytes import HexBytes

from governance.constants import (
    BRIDGE_ADMIN_DOMAIN_NAME,
    BRIDGE_ADMIN_DOMAIN_VERSION,
    BRIDGE_ADMIN_SALT_NAME,
    CHAIN_IDS,
    GOVERNANCE_ADMIN_DOMAIN_NAME,
    GOVERNANCE_ADMIN_DOMAIN_VERSION,
    GOVERNANCE_ADMIN_SALT_CHAIN_ID,
    GOVERNANCE_ADMIN_SALT_NAME,
    NETWORK_MAPPING,
    RONIN_NETWORKS,
)


class Domain(NamedTuple):
    """EIP-712 domain. Absent fields are left out of the domain type."""

    name: str
    version: str
    chain_id: Optional[int] = None
    verifying_contract: Optional[str] = None
    salt: Optional[bytes] = None

    def _fields_present(self):
        # canonical EIP712Domain field order
        fields = [
            ("name", "string", self.name),
            ("version", "string", self.version),
            ("chainId", "uint256", self.chain_id),
            ("verifyingContract", "address", self.verifying_contract),
            ("salt", "bytes32", self.salt),
        ]
        return [field for field in fields if field[2] is not None]

    @property
    def type_string(self) -> str:
        members = ",".join(f"{abi_type} {name}" for name, abi_type, _ in self._fields_present())
        return f"EIP712Domain({members})"

    def separator(self) -> HexBytes:
        abi_types, values = ["bytes32"], [keccak(text=self.type_string)]
        for _, abi_type, value in self._fields_present():
            if abi_type == "string":
                abi_types.append("bytes32")
                values.append(keccak(text=value))
            elif abi_type == "address":
                abi_types.append(abi_type)
                values.append(to_canonical_address(value))
            elif abi_type == "bytes32":
                abi_types.append(abi_type)
                values.append(HexBytes(value))
            else:
                abi_types.append(abi_type)
                values.append(value)
        return HexBytes(keccak(encode(abi_types, values)))

    def as_dict(self) -> Dict[str, Any]:
        """Returns the domain in the shape expected by typed-data encoders."""
        data = dict()
        for name, abi_type, value in self._fields_present():
            if abi_type == "address":
                value = to_checksum_address(value)
            elif abi_type == "bytes32":
                value = bytes(HexBytes(value))
            data[name] = value
        return data


def domain_separator(
    name: str,
    version: str,
    chain_id: Optional[int] = None,
    verifying_contract: Optional[str] = None,
    salt: Optional[bytes] = None,
) -> HexBytes:
    domain = Domain(
        name=name,
        version=version,
        chain_id=chain_id,
        verifying_contract=verifying_contract,
        salt=salt,
    )
    return domain.separator()


def _salt(salt_name: str, chain_id: int) -> HexBytes:
    return HexBytes(keccak(encode(["string", "uint256"], [salt_name, chain_id])))


def governance_admin_domain() -> Domain:
    return Domain(
        name=GOVERNANCE_ADMIN_DOMAIN_NAME,
        version=GOVERNANCE_ADMIN_DOMAIN_VERSION,
        salt=_salt(GOVERNANCE_ADMIN_SALT_NAME, GOVERNANCE_ADMIN_SALT_CHAIN_ID),
    )


def bridge_manager_domain(ronin_chain_id: int) -> Domain:
    return Domain(
        name=BRIDGE_ADMIN_DOMAIN_NAME,
        version=BRIDGE_ADMIN_DOMAIN_VERSION,
        salt=_salt(BRIDGE_ADMIN_SALT_NAME, ronin_chain_id),
    )


def ronin_chain_id_for(chain_id: int) -> int:
    """Returns the chain id of the ronin network a chain belongs to or bridges to."""
    ronin_chain_ids = {CHAIN_IDS[network]: CHAIN_IDS[network] for network in RONIN_NETWORKS}
    for mainchain, ronin_network in NETWORK_MAPPING.items():
        ronin_chain_ids[CHAIN_IDS[mainchain]] = CHAIN_IDS[ronin_network]
    try:
        return ronin_chain_ids[chain_id]
    except KeyError:
        raise ValueError(f"Chain id {chain_id} is not bridged to a known ronin network")


def domain_for_contract(contract_name: str, ronin_chain_id: int) -> Domain:
    """Returns the signing domain of a governance contract."""
    if contract_name == "RoninGovernanceAdmin":
        return governance_admin_domain()
    if contract_name in ("RoninBridgeManager", "MainchainBridgeManager"):
        return bridge_manager_domain(ronin_chain_id)
    raise ValueError(f"No signing domain known for contract '{contract_name}'")
