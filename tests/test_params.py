import pytest
from hexbytes import HexBytes

from governance.constants import (
    DEFAULT_GAS_AMOUNT,
    GLOBAL_PROPOSAL_CHAIN_ID,
    UPGRADE_GAS_AMOUNT,
    TargetOption,
)
from governance.digest import hash_proposal, hash_struct, to_hex
from governance.params import (
    ProposalParameters,
    encode_call,
    function_delegate_call_data,
    function_delegate_calls,
    function_delegate_calls_global,
    parse_signature,
    upgrade_proposal,
    upgrade_proposal_global,
)
from governance.proposal import GlobalProposalDetail, InvalidProposal, ProposalDetail
from governance.registry import read_registry
from governance.utils import validate_config
from tests.conftest import IMPLEMENTATION, TARGET, UPGRADE_TO_CALLDATA

UPGRADE_GATEWAY_HASH = "0x39dd1ba31df9e9ec302f2cba5ab2283cda54deb302f83f63182f30404d1bccff"
GLOBAL_BRIDGE_REWARD_HASH = "0xca435345d70244e1e9353a6ab2f7480712edf010c513077245b35b9609e0baad"

PAUSE_SELECTOR = HexBytes("0x8456cb59")
DELEGATED_PAUSE_CALLDATA = HexBytes(
    "0x4bb5274a"
    "0000000000000000000000000000000000000000000000000000000000000020"
    "0000000000000000000000000000000000000000000000000000000000000004"
    "8456cb5900000000000000000000000000000000000000000000000000000000"
)


def _config(**overrides):
    config = {
        "proposal": {
            "name": "test",
            "kind": "local",
            "governance": "RoninGovernanceAdmin",
            "chain_id": 2021,
            "nonce": 1,
        },
        "constants": {"NEW_LOGIC": "0x" + "44" * 20, "AMOUNT": 100},
        "instructions": [
            {
                "target": "$RoninGatewayV3",
                "function": "upgradeTo(address)",
                "args": ["$NEW_LOGIC"],
            }
        ],
    }
    config.update(overrides)
    return config


@pytest.fixture(scope="module")
def registry_entries(registry_filepath):
    return read_registry(registry_filepath)


def test_parse_signature():
    assert parse_signature("pause()") == ("pause", [])
    assert parse_signature("transfer(address, uint256)") == ("transfer", ["address", "uint256"])
    assert parse_signature("submit((uint256,address[]),bytes32[])") == (
        "submit",
        ["(uint256,address[])", "bytes32[]"],
    )
    with pytest.raises(ValueError, match="Malformed"):
        parse_signature("pause")


def test_encode_call():
    assert encode_call("upgradeTo(address)", [IMPLEMENTATION]) == UPGRADE_TO_CALLDATA
    assert encode_call("pause()", []) == PAUSE_SELECTOR

    # YAML friendly strings are coerced to their ABI types
    calldata = encode_call("setThreshold(uint256,uint256)", ["0x46", "100"])
    assert calldata[4:] == (70).to_bytes(32, "big") + (100).to_bytes(32, "big")


def test_encode_call_rejects_bad_args():
    with pytest.raises(ValueError, match="expects 1 argument"):
        encode_call("upgradeTo(address)", [])
    with pytest.raises(ValueError, match="does not match expected ABI type"):
        encode_call("setPaused(bool)", ["yes"])


def test_function_delegate_call_data():
    assert function_delegate_call_data(PAUSE_SELECTOR) == DELEGATED_PAUSE_CALLDATA


def test_upgrade_proposal():
    proposal = upgrade_proposal(chain_id=2021, nonce=3, proxy=TARGET, implementation=IMPLEMENTATION)
    assert proposal == ProposalDetail(
        nonce=3,
        chain_id=2021,
        targets=[TARGET],
        values=[0],
        calldatas=[UPGRADE_TO_CALLDATA],
        gas_amounts=[UPGRADE_GAS_AMOUNT],
    )
    assert to_hex(hash_proposal(proposal)) == (
        "0x93ca379150534d466b1d1116ac26fcf1159a444d77f5b597d975ffc600a14e41"
    )


def test_upgrade_proposal_global():
    proposal = upgrade_proposal_global(
        nonce=1, target_option=TargetOption.GATEWAY_CONTRACT, implementation=IMPLEMENTATION
    )
    assert isinstance(proposal, GlobalProposalDetail)
    assert proposal.chain_id == GLOBAL_PROPOSAL_CHAIN_ID
    assert proposal.target_options == [TargetOption.GATEWAY_CONTRACT]
    assert proposal.calldatas == [UPGRADE_TO_CALLDATA]


def test_function_delegate_calls():
    proposal = function_delegate_calls(
        chain_id=2021, nonce=2, targets=[TARGET, IMPLEMENTATION], datas=[PAUSE_SELECTOR] * 2
    )
    assert proposal.values == [0, 0]
    assert proposal.gas_amounts == [DEFAULT_GAS_AMOUNT] * 2
    assert proposal.calldatas == [DELEGATED_PAUSE_CALLDATA] * 2

    proposal = function_delegate_calls_global(
        nonce=2, target_options=[TargetOption.BRIDGE_SLASH], datas=[PAUSE_SELECTOR], gas_amount=1
    )
    assert proposal.chain_id == GLOBAL_PROPOSAL_CHAIN_ID
    assert proposal.gas_amounts == [1]


@pytest.mark.parametrize(
    "targets,datas", [([], []), ([TARGET], []), ([TARGET, TARGET], [PAUSE_SELECTOR])]
)
def test_function_delegate_calls_invalid_length(targets, datas):
    with pytest.raises(InvalidProposal, match="invalid array length"):
        function_delegate_calls(chain_id=2021, nonce=1, targets=targets, datas=datas)
    with pytest.raises(InvalidProposal, match="invalid array length"):
        function_delegate_calls_global(
            nonce=1, target_options=[TargetOption.GATEWAY_CONTRACT] * len(targets), datas=datas
        )


def test_local_params_file(local_params_filepath):
    parameters = ProposalParameters.from_yaml(local_params_filepath)
    assert parameters.name == "upgrade-gateway"
    assert not parameters.is_global
    assert parameters.governance == "RoninGovernanceAdmin"
    assert parameters.nonce == 3

    proposal = parameters.build()
    assert isinstance(proposal, ProposalDetail)
    assert proposal.targets == ["0x" + "33" * 20] * 2
    assert proposal.calldatas[0] == HexBytes("0x3659cfe6" + "00" * 12 + "44" * 20)
    assert proposal.calldatas[1] == DELEGATED_PAUSE_CALLDATA
    assert proposal.gas_amounts == [500_000, DEFAULT_GAS_AMOUNT]
    assert to_hex(hash_struct(proposal)) == UPGRADE_GATEWAY_HASH


def test_global_params_file(global_params_filepath):
    parameters = ProposalParameters.from_yaml(global_params_filepath)
    assert parameters.is_global
    assert parameters.chain_id == GLOBAL_PROPOSAL_CHAIN_ID

    proposal = parameters.build()
    assert isinstance(proposal, GlobalProposalDetail)
    assert proposal.target_options == [TargetOption.GATEWAY_CONTRACT, TargetOption.BRIDGE_REWARD]
    assert proposal.calldatas[1] == PAUSE_SELECTOR
    assert to_hex(hash_struct(proposal)) == GLOBAL_BRIDGE_REWARD_HASH


def test_build_nonce_override(local_params_filepath):
    parameters = ProposalParameters.from_yaml(local_params_filepath)
    proposal = parameters.build(nonce=10)
    assert proposal.nonce == 10
    assert to_hex(hash_struct(proposal)) != UPGRADE_GATEWAY_HASH


def test_build_without_nonce(registry_entries):
    config = _config()
    del config["proposal"]["nonce"]
    parameters = ProposalParameters.from_config(config, registry_entries)
    with pytest.raises(ProposalParameters.Invalid, match="No nonce"):
        parameters.build()
    assert parameters.build(nonce=1).nonce == 1


def test_variables(registry_entries):
    config = _config(
        instructions=[
            {
                "target": "$RoninGatewayV3",
                "function": "setBridgeManager(address)",
                "args": ["$RoninBridgeManager"],
                "value": 5,
                "gas": 100,
            },
            {
                "target": "0x" + "55" * 20,
                "function": "setThreshold(uint256,uint256)",
                "args": ["$AMOUNT", 7],
                "delegate": True,
            },
        ]
    )
    parameters = ProposalParameters.from_config(config, registry_entries)
    first, second = parameters.instructions
    assert first.target == "0x" + "33" * 20
    assert first.calldata == encode_call("setBridgeManager(address)", ["0x" + "22" * 20])
    assert (first.value, first.gas_amount) == (5, 100)
    assert second.calldata == function_delegate_call_data(
        encode_call("setThreshold(uint256,uint256)", [100, 7])
    )


@pytest.mark.parametrize(
    "instruction,message",
    [
        ({"target": "$Unknown", "calldata": "0x"}, "not found in registry"),
        (
            {"target": "$RoninGatewayV3", "function": "upgradeTo(address)", "args": ["$MISSING"]},
            "not found in params file",
        ),
        ({"target": "0x1234", "calldata": "0x"}, "is not an address"),
        (
            {"target": "$RoninGatewayV3", "function": "pause()", "calldata": "0x8456cb59"},
            "mutually exclusive",
        ),
        ({"target_option": "GATEWAY_CONTRACT", "calldata": "0x"}, "by 'target'"),
    ],
)
def test_invalid_instructions(registry_entries, instruction, message):
    config = _config(instructions=[instruction])
    with pytest.raises(ProposalParameters.Invalid, match=f"Instruction #0: .*{message}"):
        ProposalParameters.from_config(config, registry_entries)


def test_invalid_global_instructions(registry_entries):
    config = _config(instructions=[{"target": "$RoninGatewayV3", "calldata": "0x"}])
    config["proposal"]["kind"] = "global"
    with pytest.raises(ProposalParameters.Invalid, match="target_option"):
        ProposalParameters.from_config(config, registry_entries)

    config["instructions"] = [{"target_option": "NOT_A_ROLE", "calldata": "0x"}]
    with pytest.raises(ProposalParameters.Invalid, match="Unknown target option"):
        ProposalParameters.from_config(config, registry_entries)


@pytest.mark.parametrize(
    "config,message",
    [
        ([], "Malformed"),
        ({"instructions": []}, "proposal is not set"),
        (_config(proposal={"kind": "remote", "governance": "X"}), "proposal kind"),
        (_config(proposal={"kind": "local", "governance": "X"}), "chain_id is not set"),
        (_config(proposal={"chain_id": 2021}), "governance contract is not set"),
        (_config(instructions=[]), "missing 'instructions'"),
        (_config(instructions={"target": "$X"}), "must be a list"),
    ],
)
def test_validate_config(config, message):
    with pytest.raises(ValueError, match=message):
        validate_config(config)


def test_from_yaml_rejects_non_mapping(tmp_path):
    filepath = tmp_path / "params.yml"
    filepath.write_text("- just\n- a\n- list\n")
    with pytest.raises(ProposalParameters.Invalid, match="Malformed"):
        ProposalParameters.from_yaml(filepath)


def test_from_yaml_with_explicit_registry(tmp_path, registry_filepath):
    filepath = tmp_path / "params.yml"
    filepath.write_text(
        "proposal:\n"
        "  kind: local\n"
        "  governance: RoninGovernanceAdmin\n"
        "  chain_id: 2021\n"
        "  nonce: 1\n"
        "instructions:\n"
        "  - target: $RoninGatewayV3\n"
        "    calldata: '0x8456cb59'\n"
    )
    parameters = ProposalParameters.from_yaml(filepath, registry_filepath=registry_filepath)
    assert parameters.instructions[0].calldata == PAUSE_SELECTOR
