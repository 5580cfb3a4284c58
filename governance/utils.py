import json
from pathlib import Path
from typing import Dict

import yaml

from governance.constants import ARTIFACTS_DIR

PROPOSAL_KINDS = ["local", "global"]


def _load_yaml(filepath: Path) -> dict:
    """Loads a YAML file."""
    with open(filepath, "r") as file:
        return yaml.safe_load(file)


def _load_json(filepath: Path) -> dict:
    """Loads a JSON file."""
    with open(filepath, "r") as file:
        return json.load(file)


def get_registry_filepath(config: Dict) -> Path:
    """Returns the filepath of the registry the params file resolves contracts from."""
    artifact_config = config.get("artifacts", {})
    artifact_dir = Path(artifact_config.get("dir", ARTIFACTS_DIR))
    filename = artifact_config.get("registry")
    if not filename:
        raise ValueError("artifacts registry is not set in params file.")
    return artifact_dir / filename


def validate_config(config: Dict) -> None:
    """Checks that a proposal params file has all mandatory sections."""
    print("Validating proposal parameters YAML...")

    if not isinstance(config, dict):
        raise ValueError("Malformed proposal parameters YAML.")

    proposal = config.get("proposal")
    if not proposal:
        raise ValueError("proposal is not set in params file.")

    kind = proposal.get("kind", "local")
    if kind not in PROPOSAL_KINDS:
        raise ValueError(f"proposal kind must be one of {PROPOSAL_KINDS}, got '{kind}'.")

    if kind == "local" and proposal.get("chain_id") is None:
        raise ValueError("chain_id is not set in params file.")

    if not proposal.get("governance"):
        raise ValueError("governance contract is not set in params file.")

    instructions = config.get("instructions")
    if not instructions:
        raise ValueError("Proposal parameters file missing 'instructions' field.")
    if not isinstance(instructions, list):
        raise ValueError("'instructions' must be a list.")
