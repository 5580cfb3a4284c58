import json
from collections import defaultdict
from pathlib import Path
from typing import Dict, List, NamedTuple, Optional

from eth_typing import ChecksumAddress
from eth_utils import to_checksum_address

from governance.constants import ARTIFACTS_DIR
from governance.utils import _load_json

ChainId = int
ContractName = str

STANDARD_REGISTRY_JSON_FORMAT = {"indent": 4, "separators": (",", ": ")}
HARDHAT_CHAIN_ID_FILENAME = ".chainId"


class RegistryEntry(NamedTuple):
    """Represents a single deployed contract in a registry."""

    chain_id: ChainId
    name: ContractName
    address: ChecksumAddress
    abi: list
    tx_hash: str
    block_number: int
    deployer: str


def registry_filepath_from_network(network: str) -> Path:
    p = ARTIFACTS_DIR / f"{network}.json"
    if not p.exists():
        raise ValueError(f"No registry found for network '{network}'")

    return p


def read_registry(filepath: Path) -> List[RegistryEntry]:
    data = _load_json(filepath)
    registry_entries = list()
    for chain_id, entries in data.items():
        for contract_name, artifacts in entries.items():
            registry_entry = RegistryEntry(
                chain_id=int(chain_id),
                name=contract_name,
                address=to_checksum_address(artifacts["address"]),
                abi=artifacts.get("abi", []),
                tx_hash=artifacts.get("tx_hash", ""),
                block_number=int(artifacts.get("block_number", 0)),
                deployer=artifacts.get("deployer", ""),
            )
            registry_entries.append(registry_entry)
    return registry_entries


def read_hardhat_deployments(
    directory: Path, chain_id: Optional[ChainId] = None
) -> List[RegistryEntry]:
    """Reads a hardhat-deploy deployments/<network> directory."""
    if not directory.is_dir():
        raise FileNotFoundError(f"Deployments directory not found at {directory}")

    if chain_id is None:
        chain_id_filepath = directory / HARDHAT_CHAIN_ID_FILENAME
        if not chain_id_filepath.exists():
            raise ValueError(f"chain_id is not given and {chain_id_filepath} does not exist.")
        chain_id = int(chain_id_filepath.read_text().strip())

    entries = list()
    for filepath in sorted(directory.glob("*.json")):
        data = _load_json(filepath)
        receipt = data.get("receipt") or dict()
        entry = RegistryEntry(
            chain_id=chain_id,
            name=filepath.stem,
            address=to_checksum_address(data["address"]),
            abi=data.get("abi", []),
            tx_hash=data.get("transactionHash") or receipt.get("transactionHash", ""),
            block_number=int(receipt.get("blockNumber", 0)),
            deployer=receipt.get("from", ""),
        )
        entries.append(entry)
    return entries


def _registry_data(entries: List[RegistryEntry]) -> Dict[str, Dict[str, dict]]:
    data = defaultdict(dict)
    for entry in sorted(entries, key=lambda e: (str(e.chain_id), e.name)):
        data[str(entry.chain_id)][entry.name] = {
            "address": entry.address,
            "abi": sorted(entry.abi, key=lambda item: (item["type"], item.get("name", ""))),
            "tx_hash": entry.tx_hash,
            "block_number": int(entry.block_number),
            "deployer": entry.deployer,
        }
    return data


def _conflicts(existing: dict, new: dict) -> List[str]:
    """Contracts present in both registries under different addresses."""
    conflicts = list()
    for chain_id, contracts in new.items():
        for name, artifacts in contracts.items():
            current = existing.get(chain_id, {}).get(name)
            if current and current["address"].lower() != artifacts["address"].lower():
                conflicts.append(f"{name}@{chain_id}")
    return conflicts


def write_registry(entries: List[RegistryEntry], filepath: Path, silent: bool = False) -> Path:
    """
    Writes registry entries to a file, merging them into an existing registry
    contract by contract. Entries that would move an existing contract to a
    new address are written next to it as <name>.unmerged.json instead.
    """
    if not entries:
        print("No entries provided.")
        return filepath

    data = _registry_data(entries)
    filepath.parent.mkdir(parents=True, exist_ok=True)

    if filepath.exists():
        existing_data = _load_json(filepath)
        conflicts = _conflicts(existing_data, data)
        if conflicts:
            filepath = filepath.with_suffix(".unmerged.json")
            if not silent:
                print(f"Conflicting addresses for {', '.join(conflicts)}; writing to {filepath}.")
        else:
            if not silent:
                print(f"Updating existing registry at {filepath}.")
            for chain_id, contracts in data.items():
                merged = dict(existing_data.get(chain_id, {}), **contracts)
                existing_data[chain_id] = dict(sorted(merged.items()))
            data = dict(sorted(existing_data.items()))
    elif not silent:
        print(f"Creating new registry at {filepath}.")

    with open(filepath, "w") as file:
        json.dump(data, file, **STANDARD_REGISTRY_JSON_FORMAT)
    return filepath


def get_entry(entries: List[RegistryEntry], chain_id: ChainId, name: ContractName) -> RegistryEntry:
    for entry in entries:
        if entry.chain_id == chain_id and entry.name == name:
            return entry
    raise ValueError(f"Contract '{name}' not found in registry for chain_id {chain_id}")


def addresses_by_name(entries: List[RegistryEntry], chain_id: ChainId) -> Dict[str, str]:
    return {entry.name: entry.address for entry in entries if entry.chain_id == chain_id}


def verify_address(actual: str, expected: Optional[str]) -> None:
    if actual.lower() != (expected or "").lower():
        raise ValueError(f"Invalid address, expected={expected}, actual={actual}")


def verify_addresses(
    entries: List[RegistryEntry], chain_id: ChainId, expected: Dict[ContractName, str]
) -> List[ContractName]:
    """Checks registry addresses against a name -> address map."""
    verified = list()
    for name, expected_address in expected.items():
        entry = get_entry(entries=entries, chain_id=chain_id, name=name)
        try:
            verify_address(actual=entry.address, expected=expected_address)
        except ValueError as e:
            raise ValueError(f"{name}: {e}") from e
        verified.append(name)
    return verified
